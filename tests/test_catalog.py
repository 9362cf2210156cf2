from __future__ import annotations

import pytest

from datetime import datetime, timezone
from vacant.catalog import Catalog
from vacant.models import LiveSignal, Resource
from vacant.modules import errors


RECORDS = [
    {
        'id': 1,
        'name': 'Bldg A 101',
        'location': 'Building A',
        'department': 'CSE',
        'floor': 1,
        'capacity': '40',
        'attributes': ['Projector', 'AC'],
        'timetable': [
            {
                'start': '2024-01-08T14:00',
                'end': '2024-01-08T15:30',
                'label': 'ECE210'
            },
            {
                'start': '2024-01-08T10:00',
                'end': '2024-01-08T12:00',
                'label': 'CSE101'
            },
        ],
        'live_signal': 'occupied'
    },
    {
        'id': '2',
        'name': 'Bldg B 102',
        'location': 'Building B',
    },
]


def test_from_records() -> None:
    catalog = Catalog.from_records(RECORDS, timezone='Europe/Zurich')

    assert len(catalog) == 2
    assert '1' in catalog
    assert 1 not in catalog

    room = catalog.get('1')
    assert room.capacity == 40
    assert room.attributes == {'Projector', 'AC'}
    assert room.live_signal is LiveSignal.OCCUPIED
    assert [i.label for i in room.timetable] == ['CSE101', 'ECE210']

    # Zurich is one hour ahead of UTC in winter
    assert room.timetable[0].start == datetime(
        2024, 1, 8, 9, tzinfo=timezone.utc
    )

    other = catalog.get('2')
    assert other.capacity == 0
    assert other.timetable == ()
    assert other.department is None
    assert other.live_signal is LiveSignal.EMPTY


def test_from_records_invalid_interval() -> None:
    with pytest.raises(errors.InvalidInterval):
        Catalog.from_records([{
            'id': '1',
            'name': 'Broken',
            'timetable': [{
                'start': '2024-01-08T12:00',
                'end': '2024-01-08T10:00'
            }]
        }])


def test_unique_ids() -> None:
    with pytest.raises(ValueError):
        Catalog([Resource('1', 'One'), Resource('1', 'Uno')])


def test_unknown_resource(catalog: Catalog) -> None:
    with pytest.raises(errors.UnknownResource):
        catalog.get('nope')


def test_select_values(catalog: Catalog) -> None:
    assert catalog.locations() == ['Building A', 'Building B']
    assert catalog.departments() == ['CSE', 'ECE']


def test_search(catalog: Catalog) -> None:

    def ids(resources: list[Resource]) -> list[str]:
        return [r.id for r in resources]

    assert ids(catalog.search()) == ['x', 'y', 'z']
    assert ids(catalog.search(location='Building A')) == ['x', 'y']
    assert ids(catalog.search(department='CSE')) == ['x', 'z']
    assert ids(catalog.search(min_capacity=40)) == ['x', 'z']
    assert ids(catalog.search(min_capacity=121)) == []
    assert ids(catalog.search(attributes=['Projector', 'AC'])) == ['x']
    assert ids(catalog.search(attributes=['Projector', 'Audio'])) == []
    assert ids(catalog.search(attributes='Projector')) == ['x']
    assert ids(catalog.search(text='  smart board ')) == ['y']
    assert ids(catalog.search(text='bldg')) == ['x', 'y', 'z']
    assert ids(catalog.search(text='building b')) == ['z']
    assert ids(catalog.search(text='ece')) == ['y']
    assert ids(catalog.search(
        location='Building A', department='CSE', text='101'
    )) == ['x']


def test_from_records_single_attribute() -> None:
    catalog = Catalog.from_records([
        {'id': 'a', 'name': 'Lab', 'attributes': 'Projector'},
        {'id': 'b', 'name': 'Hall', 'attributes': []},
    ], timezone='UTC')

    assert catalog.get('a').attributes == {'Projector'}
    assert catalog.get('b').attributes == frozenset()
    assert [r.id for r in catalog.search(attributes=['Projector'])] == ['a']
