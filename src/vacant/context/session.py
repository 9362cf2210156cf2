from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.pool import QueuePool, StaticPool
from sqlalchemy.orm import scoped_session, sessionmaker

from vacant.context.core import StoppableService


from typing import Any


SERIALIZABLE = 'SERIALIZABLE'


class SessionProvider(StoppableService):
    """Global session utility. It provides a SERIALIZABLE session to the
    :class:`vacant.db.store.SqlStore`.

    In-memory SQLite databases share a single connection, which keeps them
    alive for the lifetime of the provider. SQLite files use the default
    pool of the dialect.

    """

    def __init__(
        self,
        dsn: str,
        engine_config: dict[str, Any] | None = None,
        session_config: dict[str, Any] | None = None
    ):
        self.dsn = dsn

        url = make_url(dsn)
        self.is_sqlite = url.get_backend_name() == 'sqlite'

        if self.is_sqlite and url.database in (None, '', ':memory:'):
            pool_config: dict[str, Any] = {
                'poolclass': StaticPool,
                'connect_args': {'check_same_thread': False}
            }
        elif self.is_sqlite:
            pool_config = {}
        else:
            pool_config = {
                'poolclass': QueuePool,
                'pool_size': 5,
                'max_overflow': 5
            }

        self.engine = create_engine(
            dsn,
            isolation_level=SERIALIZABLE,
            **pool_config,
            **(engine_config or {})
        )

        self.session = scoped_session(sessionmaker(
            bind=self.engine, **(session_config or {})
        ))

    def stop_service(self) -> None:
        """ Called by the context when the session provider is being
        discarded (only in testing).

        This makes sure that replacing the session provider on the context
        doesn't leave behind any idle connections.

        """

        self.session.remove()
        self.engine.dispose()
