from __future__ import annotations

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from datetime import datetime
    from vacant.models import Reservation


class VacantError(Exception):
    pass


class ContextAlreadyExists(VacantError):
    pass


class UnknownContext(VacantError):
    pass


class ContextIsLocked(VacantError):
    pass


class UnknownService(VacantError):
    pass


class UnknownResource(VacantError):
    pass


class NotTimezoneAware(VacantError):
    pass


class Unauthenticated(VacantError):
    """ Raised when a mutating call is made without a caller identity. """


class InvalidInterval(VacantError):

    __slots__ = ('start', 'end')

    def __init__(self, start: datetime, end: datetime):
        super().__init__(f'{end} is not after {start}')
        self.start = start
        self.end = end


class Forbidden(VacantError):
    """ Raised when the caller may not cancel the reservation. """

    __slots__ = ('reservation',)

    def __init__(self, reservation: Reservation):
        super().__init__(reservation.resource_id)
        self.reservation = reservation


class NotFound(VacantError):
    pass


class AlreadyBooked(VacantError):

    __slots__ = ('existing',)

    def __init__(self, existing: Reservation):
        super().__init__(existing.resource_id)
        self.existing = existing


class StoreUnavailable(VacantError):
    pass


class InvalidReservationError(VacantError):
    """ Raised when a reservation is stored under another resource's id. """

    __slots__ = ('resource_id', 'reservation')

    def __init__(self, resource_id: str, reservation: Reservation):
        super().__init__(
            f'{reservation.resource_id} cannot be stored as {resource_id}'
        )
        self.resource_id = resource_id
        self.reservation = reservation
