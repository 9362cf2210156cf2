from __future__ import annotations

import pytest
import sedate

from datetime import datetime
from vacant import timetable
from vacant.models import BusyInterval, Resource
from vacant.modules import errors


def at(*args: int) -> datetime:
    return sedate.replace_timezone(datetime(*args), 'UTC')


@pytest.fixture
def room() -> Resource:
    return Resource('r', 'Room', timetable=[
        BusyInterval.create(at(2024, 1, 8, 14), at(2024, 1, 8, 15), 'B'),
        BusyInterval.create(at(2024, 1, 8, 10), at(2024, 1, 8, 12), 'A'),
        BusyInterval.create(at(2024, 1, 8, 15), at(2024, 1, 8, 16), 'C'),
    ])


def test_half_open_intervals(room: Resource) -> None:
    assert timetable.is_busy_by_schedule(room, at(2024, 1, 8, 10))
    assert timetable.is_busy_by_schedule(room, at(2024, 1, 8, 11, 59))
    assert not timetable.is_busy_by_schedule(room, at(2024, 1, 8, 12))
    assert not timetable.is_busy_by_schedule(room, at(2024, 1, 8, 9, 59))


def test_empty_timetable() -> None:
    room = Resource('r', 'Room')
    assert not timetable.is_busy_by_schedule(room, at(2024, 1, 8, 10))
    assert timetable.busy_interval_at(room, at(2024, 1, 8, 10)) is None
    assert timetable.next_busy_start(room, at(2024, 1, 8, 10)) is None
    assert timetable.busy_until(room, at(2024, 1, 8, 10)) is None


def test_timetable_is_ordered(room: Resource) -> None:
    assert [i.label for i in room.timetable] == ['A', 'B', 'C']


def test_busy_interval_at(room: Resource) -> None:
    interval = timetable.busy_interval_at(room, at(2024, 1, 8, 14, 30))
    assert interval is not None
    assert interval.label == 'B'

    interval = timetable.busy_interval_at(room, at(2024, 1, 8, 15))
    assert interval is not None
    assert interval.label == 'C'


def test_next_busy_start(room: Resource) -> None:
    assert timetable.next_busy_start(room, at(2024, 1, 8, 9)) == at(
        2024, 1, 8, 10
    )
    assert timetable.next_busy_start(room, at(2024, 1, 8, 12)) == at(
        2024, 1, 8, 14
    )
    assert timetable.next_busy_start(room, at(2024, 1, 8, 15)) is None


def test_busy_until_chains_adjacent_intervals(room: Resource) -> None:
    assert timetable.busy_until(room, at(2024, 1, 8, 11)) == at(
        2024, 1, 8, 12
    )
    assert timetable.busy_until(room, at(2024, 1, 8, 14)) == at(
        2024, 1, 8, 16
    )
    assert timetable.busy_until(room, at(2024, 1, 8, 13)) is None


def test_invalid_busy_interval() -> None:
    with pytest.raises(errors.InvalidInterval):
        BusyInterval.create(at(2024, 1, 8, 12), at(2024, 1, 8, 12))

    with pytest.raises(errors.InvalidInterval):
        BusyInterval.create(at(2024, 1, 8, 12), at(2024, 1, 8, 11))
