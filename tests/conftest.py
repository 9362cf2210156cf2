from __future__ import annotations

import pytest

from datetime import datetime
from uuid import uuid4 as new_uuid

from vacant import new_finder, registry
from vacant.catalog import Catalog
from vacant.models import BusyInterval, LiveSignal, Resource


from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from collections.abc import Generator
    from vacant.context.core import Context
    from vacant.finder import Finder


def new_test_context(dsn: str | None = None) -> Context:
    context = registry.register_context(new_uuid().hex, replace=True)
    context.set_setting('dsn', dsn)
    context.set_setting('timezone', 'UTC')
    context.set_setting('random_seed', 42)
    return context


def new_test_catalog() -> Catalog:
    from vacant.modules.utils import standardize

    def interval(start: datetime, end: datetime, label: str) -> BusyInterval:
        return BusyInterval.create(
            standardize(start, 'UTC'), standardize(end, 'UTC'), label
        )

    return Catalog([
        Resource(
            id='x',
            name='Bldg A 101',
            location='Building A',
            capacity=40,
            attributes=('Projector', 'AC'),
            timetable=[
                interval(
                    datetime(2024, 1, 8, 10),
                    datetime(2024, 1, 8, 12),
                    'CSE101'
                )
            ],
            department='CSE',
            floor=1
        ),
        Resource(
            id='y',
            name='Bldg A 102',
            location='Building A',
            capacity=25,
            attributes=('Smart Board', ),
            department='ECE',
            floor=1
        ),
        Resource(
            id='z',
            name='Bldg B 201',
            location='Building B',
            capacity=120,
            attributes=('Lab PCs', 'Audio'),
            timetable=[
                interval(
                    datetime(2024, 1, 8, 14),
                    datetime(2024, 1, 8, 15, 30),
                    'ECE210'
                )
            ],
            department='CSE',
            floor=2,
            live_signal=LiveSignal.OCCUPIED
        ),
    ])


@pytest.fixture(autouse=True)
def clear_events() -> None:
    # clear the events before each test
    from vacant.modules import events
    for event in (e for e in dir(events) if e.startswith('on_')):
        del getattr(events, event)[:]


@pytest.fixture
def context() -> Context:
    return new_test_context()


@pytest.fixture
def catalog() -> Catalog:
    return new_test_catalog()


@pytest.fixture
def finder(
    context: Context,
    catalog: Catalog
) -> Generator[Finder, None, None]:
    finder = new_finder(context, catalog)

    yield finder

    finder.simulator.stop(wait=True)


@pytest.fixture
def sql_finder(catalog: Catalog) -> Generator[Finder, None, None]:
    context = new_test_context(dsn='sqlite://')

    finder = new_finder(context, catalog)
    finder.setup_database()

    yield finder

    finder.simulator.stop(wait=True)
    context.get_service('session_provider').stop_service()
