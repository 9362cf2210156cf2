from __future__ import annotations

import sedate

from datetime import datetime
from dateutil.parser import isoparse

from vacant.modules import errors


from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from collections.abc import Iterable
    from sedate.types import TzInfoOrName


def standardize(
    value: datetime | str,
    timezone: TzInfoOrName | None
) -> datetime:
    """ Returns the given instant as a timezone-aware UTC datetime.

    Naive datetimes (and ISO strings without offset) are assumed to be in
    the given timezone. Without a timezone they are rejected.

    """
    if isinstance(value, str):
        value = isoparse(value)

    if value.tzinfo is None:
        if timezone is None:
            raise errors.NotTimezoneAware(value)
        return sedate.standardize_date(value, timezone)

    return sedate.to_timezone(value, 'UTC')


def contains(start: datetime, end: datetime, instant: datetime) -> bool:
    """ True if the instant lies within the half-open range [start, end). """
    return start <= instant < end


def string_set(values: str | Iterable[str]) -> frozenset[str]:
    """ Returns the given strings as a set. A single string is a single
    value, not a sequence of characters.

    """
    if isinstance(values, str):
        return frozenset((values, ))

    return frozenset(values)
