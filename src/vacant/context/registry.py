from __future__ import annotations

import threading

from vacant.modules import errors
from vacant.context.core import Context


from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from random import Random

    from vacant.context.session import SessionProvider
    from vacant.db.store import ReservationStore


def create_default_registry() -> Registry:
    """ Creates the default registry for vacant. """

    import random
    import sedate

    from vacant.context.session import SessionProvider
    from vacant.context.settings import set_default_settings
    from vacant.db.store import MemoryStore, SqlStore

    registry = Registry()

    def session_provider(context: Context) -> SessionProvider:
        return SessionProvider(context.get_setting('dsn'))

    def store_factory(context: Context) -> ReservationStore:
        if context.get_setting('dsn'):
            return SqlStore(context)
        return MemoryStore()

    def random_factory(context: Context) -> Random:
        return random.Random(context.get_setting('random_seed'))

    def clock_factory(context: Context) -> Callable[[], datetime]:
        return sedate.utcnow

    master = registry.master_context
    assert master is not None
    master.set_service('session_provider', session_provider, cache=True)
    master.set_service('store', store_factory, cache=True)
    master.set_service('random', random_factory, cache=True)
    master.set_service('clock', clock_factory)

    set_default_settings(master)

    master.lock()

    return registry


class Registry:
    """ Holds a number of contexts and manages their creation.

    A global registry instance is found in vacant::

        from vacant import registry

    Though if global state is something you need to avoid, you can create
    your own version of the registry::

        from vacant.context.registry import create_default_registry
        registry = create_default_registry()

    """

    contexts: dict[str, Context]
    master_context: Context | None = None

    def __init__(self) -> None:
        self.thread_lock = threading.RLock()

        with self.thread_lock:
            self.contexts = {}

        self.master_context = self.register_context('master')

    def is_existing_context(self, name: str) -> bool:
        return name in self.contexts

    def assert_not_locked(self, name: str) -> None:
        if self.get_context(name).locked:
            raise errors.ContextIsLocked

    def assert_exists(self, name: str) -> None:
        if not self.is_existing_context(name):
            raise errors.UnknownContext(name)

    def assert_does_not_exist(self, name: str) -> None:
        if self.is_existing_context(name):
            raise errors.ContextAlreadyExists(name)

    def register_context(self, name: str, replace: bool = False) -> Context:
        """ Registers a new context with the given name and returns it.

        """
        with self.thread_lock:
            if replace:
                if self.is_existing_context(name):
                    self.assert_not_locked(name)
            else:
                self.assert_does_not_exist(name)

            self.contexts[name] = Context(
                name,
                parent=self.master_context,
                locked=False
            )

            return self.contexts[name]

    def get_context(self, name: str, autocreate: bool = False) -> Context:
        with self.thread_lock:
            if not autocreate:
                self.assert_exists(name)
            elif not self.is_existing_context(name):
                self.register_context(name)

            return self.contexts[name]
