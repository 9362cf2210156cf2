from __future__ import annotations

import logging
import threading

from vacant.context.core import ContextServicesMixin
from vacant.context.core import StoppableService
from vacant.models import LiveSignal
from vacant.modules import events
from vacant.resolver import Resolver


from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from random import Random

    from vacant.catalog import Catalog
    from vacant.context.core import Context
    from vacant.models import Resource


log = logging.getLogger('vacant')


class DriftSimulator(ContextServicesMixin, StoppableService):
    """ Stands in for occupancy sensors by randomly flipping the live signal
    of a few resources on every tick.

    A real sensor feed replaces :meth:`tick` with calls to
    :meth:`set_signal`, which keeps the same events:

    * :data:`~vacant.modules.events.on_live_signal_changed` for every flip.
    * :data:`~vacant.modules.events.on_resource_became_available` when a
      flip from occupied to empty leaves the resource free at the current
      query instant.
    * :data:`~vacant.modules.events.on_tick_completed` after each tick.

    Ticks never overlap, neither with each other nor with
    :meth:`set_signal`.

    """

    def __init__(
        self,
        context: Context,
        catalog: Catalog,
        resolver: Resolver | None = None,
        query_instant: Callable[[], datetime] | None = None,
        random: Random | None = None
    ):
        """ Initializes a new simulator.

        :context:
            The :class:`vacant.context.core.Context` providing the settings,
            the random source and the clock.

        :catalog:
            The :class:`vacant.catalog.Catalog` whose resources drift.

        :resolver:
            The resolver used to check whether a resource which just became
            empty is actually free. Defaults to a new one on the context.

        :query_instant:
            Returns the instant the consumer is currently looking at. This
            defaults to the clock of the context.

        :random:
            The random source picking and flipping the resources. Defaults
            to the random service of the context, seeded by
            :ref:`settings.random_seed`.

        """
        self.context = context
        self.catalog = catalog
        self.resolver = resolver or Resolver(context)
        self.query_instant = query_instant

        if random is not None:
            self.random = random

        self.tick_lock = threading.RLock()
        self.thread_lock = threading.Lock()
        self.stopped = threading.Event()
        self.thread: threading.Thread | None = None

    @property
    def interval(self) -> float:
        return self.context.get_setting('drift_interval')  # type: ignore[no-any-return]

    @property
    def sample_size(self) -> int:
        return self.context.get_setting('drift_sample_size')  # type: ignore[no-any-return]

    @property
    def flip_probability(self) -> float:
        return self.context.get_setting('drift_flip_probability')  # type: ignore[no-any-return]

    @property
    def is_running(self) -> bool:
        return self.thread is not None and self.thread.is_alive()

    def current_instant(self) -> datetime:
        if self.query_instant is not None:
            return self.query_instant()
        return self.clock()

    def tick(self) -> list[Resource]:
        """ Picks a random subset of the resources and flips some of their
        live signals. Returns the flipped resources.

        """
        with self.tick_lock:
            resources = list(self.catalog)
            size = min(self.sample_size, len(resources))

            flipped = []

            for resource in self.random.sample(resources, size):
                if self.random.random() < self.flip_probability:
                    self._apply(resource, resource.live_signal.flipped())
                    flipped.append(resource)

            log.debug(
                f'Drift tick flipped {len(flipped)} of {size} resources'
            )
            events.on_tick_completed(self.context, flipped)

            return flipped

    def set_signal(self, resource: Resource, signal: LiveSignal) -> bool:
        """ Sets the live signal of the resource, returning True if it
        changed.

        """
        with self.tick_lock:
            return self._apply(resource, signal)

    def _apply(self, resource: Resource, signal: LiveSignal) -> bool:
        previous = resource.live_signal

        if previous is signal:
            return False

        resource.live_signal = signal
        events.on_live_signal_changed(self.context, resource, previous)

        if previous is LiveSignal.OCCUPIED and signal is LiveSignal.EMPTY:
            result = self.resolver.resolve(
                resource, self.current_instant(), use_live_signal=True
            )

            if result.is_free:
                log.info(f'{resource.name} just became available')
                events.on_resource_became_available(self.context, resource)

        return True

    def run(self, stopped: threading.Event | None = None) -> None:
        stopped = stopped or self.stopped

        try:
            while not stopped.wait(self.interval):
                try:
                    self.tick()
                except Exception:
                    log.exception('Drift simulator tick failed')
        finally:
            self.store.close()

    def start(self) -> None:
        """ Starts ticking every :ref:`settings.drift_interval` seconds on a
        background thread. Calling it on a running simulator does nothing,
        calling it after :meth:`stop` starts a new thread.

        """
        with self.thread_lock:
            if self.is_running and not self.stopped.is_set():
                return

            # a stopped thread keeps its own event and exits on its own
            self.stopped = threading.Event()
            self.thread = threading.Thread(
                target=self.run,
                args=(self.stopped, ),
                name=f'vacant-drift-{self.context.name}',
                daemon=True
            )
            self.thread.start()

        log.info(f'Drift simulator started, ticking every {self.interval}s')

    def stop(self, wait: bool = False) -> None:
        """ Prevents any further ticks. A tick already in progress is allowed
        to complete, pass wait=True to block until it did.

        """
        with self.thread_lock:
            self.stopped.set()
            thread = self.thread

        if wait and thread is not None:
            if thread is not threading.current_thread():
                thread.join()

        log.info('Drift simulator stopped')

    def stop_service(self) -> None:
        self.stop()
