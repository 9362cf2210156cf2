""" Answers questions about the static timetable of a resource.

Timetables are small and never change at runtime, a linear scan over the
intervals is all that's needed. Intervals are half-open: an instant equal
to the start of an interval is busy, an instant equal to its end is not.

"""
from __future__ import annotations


from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from datetime import datetime
    from vacant.models import BusyInterval, Resource


def busy_interval_at(
    resource: Resource,
    instant: datetime
) -> BusyInterval | None:
    """ Returns the first interval of the timetable covering the instant. """

    for interval in resource.timetable:
        if interval.contains(instant):
            return interval
    return None


def is_busy_by_schedule(resource: Resource, instant: datetime) -> bool:
    return busy_interval_at(resource, instant) is not None


def next_busy_start(
    resource: Resource,
    instant: datetime
) -> datetime | None:
    """ Returns the start of the next interval beginning after the instant,
    or None if the timetable has nothing ahead.

    """
    starts = (i.start for i in resource.timetable if i.start > instant)
    return min(starts, default=None)


def busy_until(resource: Resource, instant: datetime) -> datetime | None:
    """ Returns the instant at which the resource stops being busy by
    schedule. Overlapping and adjacent intervals are chained.

    Returns None if the resource isn't busy at the given instant.

    """
    interval = busy_interval_at(resource, instant)

    if interval is None:
        return None

    end = interval.end
    chained = busy_interval_at(resource, end)

    while chained is not None:
        end = chained.end
        chained = busy_interval_at(resource, end)

    return end
