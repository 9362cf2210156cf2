from __future__ import annotations

import enum

from vacant.modules import errors, utils


from typing import NamedTuple
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime


class LiveSignal(enum.Enum):
    OCCUPIED = 'occupied'
    EMPTY = 'empty'

    def flipped(self) -> LiveSignal:
        if self is LiveSignal.OCCUPIED:
            return LiveSignal.EMPTY
        return LiveSignal.OCCUPIED


class Role(enum.Enum):
    GUEST = 'guest'
    STUDENT = 'student'
    FACULTY = 'faculty'
    ADMIN = 'admin'


class Reason(enum.Enum):
    """ The single reason reported with every availability result. The value
    is the text shown to users.

    """

    LIVE_SENSOR_OCCUPIED = 'Live sensor shows occupied'
    SCHEDULED_CLASS = 'Scheduled class'
    BOOKED = 'Booked'
    FREE = 'Free'
    FREE_BY_SCHEDULE = 'Free (by schedule)'


class Status(enum.Enum):
    FREE = 'free'
    BUSY = 'busy'
    BOOKED = 'booked'


class Identity(NamedTuple):
    id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


class AvailabilityResult(NamedTuple):
    is_free: bool
    reason: Reason


class BusyInterval(NamedTuple):
    """ A half-open range [start, end) during which a resource is occupied
    by its static timetable.

    Use :meth:`create` to get a validated interval.

    """

    start: datetime
    end: datetime
    label: str = ''

    @classmethod
    def create(
        cls,
        start: datetime,
        end: datetime,
        label: str = ''
    ) -> BusyInterval:
        if end <= start:
            raise errors.InvalidInterval(start, end)
        return cls(start, end, label)

    def contains(self, instant: datetime) -> bool:
        return utils.contains(self.start, self.end, instant)


class Reservation(NamedTuple):
    resource_id: str
    holder_id: str
    holder_role: Role
    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return utils.contains(self.start, self.end, instant)

    def is_held_by(self, identity: Identity) -> bool:
        return self.holder_id == identity.id


class Resource:
    """ A bookable room. Everything but the live signal is fixed once the
    resource is created, the live signal is written by the
    :class:`vacant.drift.DriftSimulator` only.

    """

    __slots__ = (
        'id', 'name', 'location', 'capacity', 'attributes', 'timetable',
        'department', 'floor', 'live_signal'
    )

    def __init__(
        self,
        id: str,
        name: str,
        location: str = '',
        capacity: int = 0,
        attributes: str | Iterable[str] = (),
        timetable: Iterable[BusyInterval] = (),
        department: str | None = None,
        floor: int | None = None,
        live_signal: LiveSignal = LiveSignal.EMPTY
    ):
        self.id = id
        self.name = name
        self.location = location
        self.capacity = capacity
        self.attributes = utils.string_set(attributes)
        self.timetable = tuple(sorted(timetable, key=lambda i: i.start))
        self.department = department
        self.floor = floor
        self.live_signal = live_signal

    def __repr__(self) -> str:
        return f"<Resource(id='{self.id}', name='{self.name}')>"

    @property
    def is_occupied(self) -> bool:
        return self.live_signal is LiveSignal.OCCUPIED
