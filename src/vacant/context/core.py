from __future__ import annotations

import enum
import threading
from functools import cached_property

from vacant.modules import errors


from typing import Any
from typing import Literal
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from random import Random
    from sqlalchemy.orm import Session
    from typing_extensions import TypeAlias

    from vacant.context.session import SessionProvider
    from vacant.db.store import ReservationStore


class _Marker(enum.Enum):
    missing = enum.auto()
    required = enum.auto()


missing_t: TypeAlias = Literal[_Marker.missing]  # noqa: PYI042
required_t: TypeAlias = Literal[_Marker.required]  # noqa: PYI042
missing: missing_t = _Marker.missing
required: required_t = _Marker.required


class StoppableService:
    """ Services inheriting from this class have their stop_service method
    called when the service is discarded.

    Note that this only happens when a service is replaced with a new one
    and not when vacant is stopped (i.e. this is *not* a deconstructor).

    """

    def stop_service(self) -> None:
        pass


class ContextServicesMixin:
    """ Provides access methods to the context's services. Expects
    the class that uses the mixin to provide self.context.

    The store, the random source and the clock are cached, since the
    components using them expect to see the same instance for their
    whole lifetime.

    """

    context: Context

    @cached_property
    def store(self) -> ReservationStore:
        return self.context.get_service('store')  # type: ignore[no-any-return]

    @cached_property
    def random(self) -> Random:
        return self.context.get_service('random')  # type: ignore[no-any-return]

    @cached_property
    def clock(self) -> Callable[[], datetime]:
        return self.context.get_service('clock')  # type: ignore[no-any-return]

    @property
    def timezone(self) -> str | None:
        return self.context.get_setting('timezone')  # type: ignore[no-any-return]

    @property
    def session_provider(self) -> SessionProvider:
        return self.context.get_service('session_provider')  # type: ignore[no-any-return]

    @property
    def session(self) -> Session:
        """ Returns the current session. """
        return self.session_provider.session()  # type: ignore[no-any-return]


class Context:
    """ Used throughout vacant, the context holds settings like the database
    connection string and services like the reservation store or the random
    source that should be used.

    Contexts allow consumers of the library to override these settings /
    services as they wish. It also makes sure that multiple consumers can
    co-exist in a single process, as each consumer must operate on it's own
    context.

    vacant holds all contexts in vacant.registry and provides a
    master_context. When a consumer registers its own context, all lookups
    happen on the custom context. If that context can provide a service or a
    setting, it is used.

    If the custom context can't provide a service or a setting, the
    master_context is used instead. In other words, the custom context
    inherits from the master context.

    A context may be registered as follows::

        from vacant import registry
        my_context = registry.register_context('my_app')

    See also :class:`~vacant.context.registry.Registry`

    """

    def __init__(
        self,
        name: str,
        parent: Context | None = None,
        locked: bool = False
    ):
        self.name = name
        self.values: dict[str, Any] = {}
        self.parent = parent
        self.locked = locked
        self.thread_lock = threading.RLock()

    def __repr__(self) -> str:
        return f"<Vacant Context(name='{self.name}')>"

    def lock(self) -> None:
        with self.thread_lock:
            self.locked = True

    def unlock(self) -> None:
        with self.thread_lock:
            self.locked = False

    def get(self, key: str) -> Any | missing_t:
        if key in self.values:
            return self.values[key]
        elif self.parent:
            return self.parent.get(key)
        else:
            return missing

    def set(self, key: str, value: Any) -> None:
        if self.locked:
            raise errors.ContextIsLocked

        with self.thread_lock:

            # a replaced service gets the chance to release its resources
            # (database connections, timer threads) right away
            if isinstance(self.values.get(key), StoppableService):
                self.values[key].stop_service()

            self.values[key] = value

    def get_setting(self, name: str) -> Any:
        return self.get(f'settings.{name}')

    def set_setting(self, name: str, value: Any) -> None:
        with self.thread_lock:
            self.set(f'settings.{name}', value)

    def get_service(self, name: str) -> Any:
        service_id = f'service/{name}'
        service = self.get(service_id)

        if service is missing:
            raise errors.UnknownService(service_id)

        cache_id = f'service/{name}/cache'
        cache = self.get(cache_id)

        # no cache
        if cache is missing:
            return service(self)
        else:
            # first call, cache it!
            with self.thread_lock:
                if self.get(cache_id) is required:
                    self.set(cache_id, service(self))

            # nth call, use cached value
            return self.get(cache_id)

    def set_service(
        self,
        name: str,
        factory: Callable[..., Any],
        cache: bool = False
    ) -> None:
        with self.thread_lock:
            service_id = f'service/{name}'
            self.set(service_id, factory)

            if cache:
                cache_id = f'service/{name}/cache'
                self.set(cache_id, required)
