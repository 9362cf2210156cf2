from __future__ import annotations

import logging
import threading

from collections import defaultdict
from contextlib import contextmanager

from vacant.context.core import ContextServicesMixin
from vacant.models import Reservation
from vacant.modules import errors
from vacant.modules import events
from vacant.modules import utils


from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import datetime

    from vacant.catalog import Catalog
    from vacant.context.core import Context
    from vacant.models import Identity


log = logging.getLogger('vacant')


class ReservationManager(ContextServicesMixin):
    """ Creates and cancels reservations on the store of the context.

    A resource holds at most one reservation. Booking does not look at the
    timetable or the live signal, a reservation made over a scheduled class
    is stored but the resolver keeps reporting the class.

    """

    def __init__(self, context: Context, catalog: Catalog | None = None):
        self.context = context
        self.catalog = catalog

        self._locks: defaultdict[str, threading.Lock] = defaultdict(
            threading.Lock
        )
        self._locks_lock = threading.Lock()

    @contextmanager
    def exclusive(self, resource_id: str) -> Iterator[None]:
        """ Serializes the store access of all bookings and cancellations
        on the given resource.

        """
        with self._locks_lock:
            lock = self._locks[resource_id]

        with lock:
            yield

    def _prepare_range(
        self,
        start: datetime | str,
        end: datetime | str
    ) -> tuple[datetime, datetime]:
        return (
            utils.standardize(start, self.timezone),
            utils.standardize(end, self.timezone)
        )

    def reservation_for(self, resource_id: str) -> Reservation | None:
        return self.store.get(resource_id)

    def reservations(self) -> dict[str, Reservation]:
        return self.store.all()

    def book(
        self,
        resource_id: str,
        holder: Identity | None,
        interval: tuple[datetime | str, datetime | str],
        overwrite: bool = False
    ) -> Reservation:
        """ Reserves the resource for the given holder and returns the stored
        reservation.

        :resource_id:
            The id of the resource to book.

        :holder:
            The :class:`vacant.models.Identity` of the caller. Booking without
            an identity raises :class:`~vacant.modules.errors.Unauthenticated`.

        :interval:
            A tuple of start and end. The end must be after the start,
            otherwise :class:`~vacant.modules.errors.InvalidInterval` is
            raised. Naive datetimes are assumed to be in the timezone of
            the context.

        :overwrite:
            If the resource already holds a reservation,
            :class:`~vacant.modules.errors.AlreadyBooked` is raised unless
            this is True, in which case the existing reservation is replaced.

        """

        if holder is None:
            raise errors.Unauthenticated(resource_id)

        start, end = self._prepare_range(*interval)

        if end <= start:
            raise errors.InvalidInterval(start, end)

        if self.catalog is not None and resource_id not in self.catalog:
            raise errors.UnknownResource(resource_id)

        reservation = Reservation(
            resource_id=resource_id,
            holder_id=holder.id,
            holder_role=holder.role,
            start=start,
            end=end
        )

        with self.exclusive(resource_id):
            existing = self.store.get(resource_id)

            if existing is not None:
                if not overwrite:
                    raise errors.AlreadyBooked(existing)

                log.info(
                    f'Replacing reservation of {existing.holder_id} '
                    f'on {resource_id}'
                )

            self.store.set(resource_id, reservation)

        log.info(f'{holder.id} booked {resource_id} from {start} to {end}')
        events.on_reservation_made(self.context, reservation)

        return reservation

    def cancel(self, resource_id: str, caller: Identity | None) -> None:
        """ Removes the reservation of the given resource.

        Only the holder of the reservation or an admin may cancel it, anyone
        else gets :class:`~vacant.modules.errors.Forbidden`. If there's no
        reservation :class:`~vacant.modules.errors.NotFound` is raised.

        """

        with self.exclusive(resource_id):
            reservation = self.store.get(resource_id)

            if reservation is None:
                raise errors.NotFound(resource_id)

            if caller is None:
                raise errors.Forbidden(reservation)

            if not (reservation.is_held_by(caller) or caller.is_admin):
                raise errors.Forbidden(reservation)

            self.store.remove(resource_id)

        log.info(f'{caller.id} cancelled the reservation on {resource_id}')
        events.on_reservation_cancelled(self.context, reservation)

    def clear_all(self) -> None:
        """ Removes every reservation. Meant for administrative resets only.

        """
        with self._locks_lock:
            locks = list(self._locks.values())

        for lock in locks:
            lock.acquire()

        try:
            self.store.clear_all()
        finally:
            for lock in reversed(locks):
                lock.release()

        log.info('Cleared all reservations')
        events.on_reservations_cleared(self.context)
