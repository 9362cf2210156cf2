from __future__ import annotations

from vacant import timetable
from vacant.context.core import ContextServicesMixin
from vacant.models import AvailabilityResult, Reason, Status
from vacant.modules import utils


from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from vacant.context.core import Context
    from vacant.models import Resource


class Resolver(ContextServicesMixin):
    """ Tells if a resource is free at a given instant, fusing the live
    signal, the static timetable and the reservation of the resource.

    The first source claiming the resource wins, in this order:

    1. The live signal, if it is used and shows the room as occupied.
    2. The timetable, if a scheduled class covers the instant.
    3. The reservation, if it covers the instant.

    Without the live signal (plan ahead queries) the first step is skipped
    and a free resource is reported as :attr:`Reason.FREE_BY_SCHEDULE`.

    Resolving never changes anything, it may be called as often and from as
    many threads as needed.

    """

    def __init__(self, context: Context):
        self.context = context

    def prepare(self, instant: datetime | str) -> datetime:
        return utils.standardize(instant, self.timezone)

    def resolve(
        self,
        resource: Resource,
        instant: datetime | str,
        use_live_signal: bool = True
    ) -> AvailabilityResult:

        instant = self.prepare(instant)

        if use_live_signal and resource.is_occupied:
            return AvailabilityResult(False, Reason.LIVE_SENSOR_OCCUPIED)

        if timetable.is_busy_by_schedule(resource, instant):
            return AvailabilityResult(False, Reason.SCHEDULED_CLASS)

        reservation = self.store.get(resource.id)
        if reservation is not None and reservation.contains(instant):
            return AvailabilityResult(False, Reason.BOOKED)

        if use_live_signal:
            return AvailabilityResult(True, Reason.FREE)
        else:
            return AvailabilityResult(True, Reason.FREE_BY_SCHEDULE)

    def resolve_all(
        self,
        resources: Iterable[Resource],
        instant: datetime | str,
        use_live_signal: bool = True
    ) -> list[tuple[Resource, AvailabilityResult]]:
        """ Resolves all given resources at the same instant, keeping their
        order.

        """
        instant = self.prepare(instant)
        return [
            (resource, self.resolve(resource, instant, use_live_signal))
            for resource in resources
        ]

    def display_status(
        self,
        resource: Resource,
        instant: datetime | str,
        use_live_signal: bool = True
    ) -> Status:
        """ Returns the badge shown for a resource. A resource holding a
        reservation is shown as booked, no matter when the reservation
        takes place.

        """
        if self.store.get(resource.id) is not None:
            return Status.BOOKED

        if self.resolve(resource, instant, use_live_signal).is_free:
            return Status.FREE

        return Status.BUSY

    def free_until(
        self,
        resource: Resource,
        instant: datetime | str
    ) -> datetime | None:
        """ Returns the instant at which the resource stops being free by
        schedule or reservation.

        If the resource is not free at the given instant, the instant itself
        is returned. If nothing is planned ahead, None is returned.

        """
        instant = self.prepare(instant)

        if not self.resolve(resource, instant, use_live_signal=False).is_free:
            return instant

        candidates = []

        start = timetable.next_busy_start(resource, instant)
        if start is not None:
            candidates.append(start)

        reservation = self.store.get(resource.id)
        if reservation is not None and reservation.start > instant:
            candidates.append(reservation.start)

        return min(candidates, default=None)

    def next_free(
        self,
        resource: Resource,
        instant: datetime | str
    ) -> datetime:
        """ Returns the first instant at or after the given one at which the
        resource is free by schedule and reservation.

        """
        instant = self.prepare(instant)
        reservation = self.store.get(resource.id)

        while True:
            scheduled_end = timetable.busy_until(resource, instant)
            if scheduled_end is not None:
                instant = scheduled_end
            elif reservation is not None and reservation.contains(instant):
                instant = reservation.end
            else:
                return instant
