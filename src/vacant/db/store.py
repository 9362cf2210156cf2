""" Reservation stores keep at most one :class:`vacant.models.Reservation`
per resource id.

Stores only have to be fast and atomic per call, the
:class:`vacant.booking.ReservationManager` takes care of serializing the
get/set/remove sequences of concurrent bookings on the same resource.

"""
from __future__ import annotations

import logging
import threading

from contextlib import contextmanager, nullcontext
from functools import cached_property
from sqlalchemy.exc import SQLAlchemyError

from vacant.context.core import ContextServicesMixin
from vacant.db.models import ORMBase, ReservationRecord
from vacant.modules import errors


from typing import Protocol
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from collections.abc import Iterator
    from sqlalchemy.orm import Session

    from vacant.context.core import Context
    from vacant.models import Reservation


log = logging.getLogger('vacant')


class ReservationStore(Protocol):

    def setup_database(self) -> None: ...

    def get(self, resource_id: str) -> Reservation | None: ...

    def set(self, resource_id: str, reservation: Reservation) -> None: ...

    def remove(self, resource_id: str) -> None: ...

    def clear_all(self) -> None: ...

    def all(self) -> dict[str, Reservation]: ...

    def close(self) -> None: ...


def check_key(resource_id: str, reservation: Reservation) -> None:
    if reservation.resource_id != resource_id:
        raise errors.InvalidReservationError(resource_id, reservation)


class MemoryStore:
    """ Keeps the reservations in a dictionary for the lifetime of the
    process.

    """

    def __init__(self) -> None:
        self.reservations: dict[str, Reservation] = {}
        self.lock = threading.Lock()

    def setup_database(self) -> None:
        pass

    def get(self, resource_id: str) -> Reservation | None:
        with self.lock:
            return self.reservations.get(resource_id)

    def set(self, resource_id: str, reservation: Reservation) -> None:
        check_key(resource_id, reservation)

        with self.lock:
            self.reservations[resource_id] = reservation

    def remove(self, resource_id: str) -> None:
        with self.lock:
            self.reservations.pop(resource_id, None)

    def clear_all(self) -> None:
        with self.lock:
            self.reservations.clear()

    def all(self) -> dict[str, Reservation]:
        with self.lock:
            return dict(self.reservations)

    def close(self) -> None:
        pass


class SqlStore(ContextServicesMixin):
    """ Keeps the reservations in the database given by :ref:`settings.dsn`.

    Every mutation is committed right away. Database errors are rolled back
    and raised as :class:`vacant.modules.errors.StoreUnavailable`.

    SQLite serializes writers anyway, so transactions on a SQLite database
    are run one at a time per store.

    """

    def __init__(self, context: Context):
        self.context = context
        self.lock = threading.RLock()

    @cached_property
    def serialized(self) -> bool:
        return self.session_provider.is_sqlite

    def setup_database(self) -> None:
        """ Creates the reservations table. This needs to be called once per
        database. Multiple invocations won't hurt but they are unnecessary.

        """
        with self.transaction() as session:
            ORMBase.metadata.create_all(session.connection())

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        with self.lock if self.serialized else nullcontext():
            session = self.session

            try:
                yield session
                session.commit()
            except SQLAlchemyError as e:
                log.warning(f'Reservation store failed: {e}')
                session.rollback()
                raise errors.StoreUnavailable(str(e)) from e

    def close(self) -> None:
        """ Discards the session of the current thread. Threads using the
        store should call this before they exit.

        """
        self.session_provider.session.remove()

    def get(self, resource_id: str) -> Reservation | None:
        with self.transaction() as session:
            record = session.get(ReservationRecord, resource_id)
            return record.as_reservation() if record else None

    def set(self, resource_id: str, reservation: Reservation) -> None:
        check_key(resource_id, reservation)

        with self.transaction() as session:
            record = session.get(ReservationRecord, resource_id)

            if record is None:
                session.add(ReservationRecord.from_reservation(reservation))
            else:
                record.update(reservation)

    def remove(self, resource_id: str) -> None:
        with self.transaction() as session:
            query = session.query(ReservationRecord)
            query = query.filter(ReservationRecord.resource_id == resource_id)
            query.delete('fetch')

    def clear_all(self) -> None:
        with self.transaction() as session:
            session.query(ReservationRecord).delete('fetch')

    def all(self) -> dict[str, Reservation]:
        with self.transaction() as session:
            query = session.query(ReservationRecord)
            query = query.order_by(ReservationRecord.resource_id)

            return {
                record.resource_id: record.as_reservation()
                for record in query
            }
