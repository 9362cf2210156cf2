from __future__ import annotations

from datetime import datetime

from sqlalchemy import types
from sqlalchemy.orm import mapped_column
from sqlalchemy.orm import Mapped

from vacant.db.models.base import ORMBase
from vacant.db.models.timestamp import TimestampMixin
from vacant.models import Reservation, Role


class ReservationRecord(TimestampMixin, ORMBase):
    """Persists the single reservation a resource may hold.

    The table is keyed by the resource id, storing a reservation for a
    resource that already has one replaces the existing row.

    """

    __tablename__ = 'reservations'

    resource_id: Mapped[str] = mapped_column(
        types.String(64),
        primary_key=True
    )

    holder_id: Mapped[str] = mapped_column(types.Unicode(254))

    holder_role: Mapped[str] = mapped_column(
        types.Enum(
            *(role.value for role in Role),
            name='reservation_holder_role'
        )
    )

    start: Mapped[datetime]

    end: Mapped[datetime]

    def __init__(self) -> None:
        # NOTE: Avoid auto-generated __init__, the mypy plugin is
        #       deprecated and cannot be used with newer versions.
        pass

    @classmethod
    def from_reservation(cls, reservation: Reservation) -> ReservationRecord:
        record = cls()
        record.update(reservation)
        return record

    def update(self, reservation: Reservation) -> None:
        self.resource_id = reservation.resource_id
        self.holder_id = reservation.holder_id
        self.holder_role = reservation.holder_role.value
        self.start = reservation.start
        self.end = reservation.end

    def as_reservation(self) -> Reservation:
        return Reservation(
            resource_id=self.resource_id,
            holder_id=self.holder_id,
            holder_role=Role(self.holder_role),
            start=self.start,
            end=self.end
        )
