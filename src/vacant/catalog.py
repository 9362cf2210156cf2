from __future__ import annotations

from vacant.models import BusyInterval, LiveSignal, Resource
from vacant.modules import errors
from vacant.modules import utils


from typing import Any
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from collections.abc import Iterable
    from collections.abc import Iterator
    from collections.abc import Mapping
    from sedate.types import TzInfoOrName


class Catalog:
    """ The read-only, ordered list of resources known to a finder.

    The catalog is created once at startup and handed to every component
    that needs to look up resources. Resources are never added or removed
    afterwards, only their live signal changes.

    """

    def __init__(self, resources: Iterable[Resource]):
        self.resources = tuple(resources)
        self.by_id = {resource.id: resource for resource in self.resources}

        if len(self.by_id) != len(self.resources):
            raise ValueError('Resource ids must be unique')

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Any]],
        timezone: TzInfoOrName | None = 'UTC'
    ) -> Catalog:
        """ Builds a catalog from plain mappings, as read from a json file
        for example::

            {
                "id": "1",
                "name": "Bldg A 101",
                "location": "Building A",
                "department": "CSE",
                "floor": 1,
                "capacity": 40,
                "attributes": ["Projector", "AC"],
                "timetable": [
                    {
                        "start": "2024-01-08T10:00",
                        "end": "2024-01-08T12:00",
                        "label": "CSE101"
                    }
                ],
                "live_signal": "occupied"
            }

        Dates without offset are assumed to be in the given timezone.

        """

        def busy_interval(record: Mapping[str, Any]) -> BusyInterval:
            return BusyInterval.create(
                utils.standardize(record['start'], timezone),
                utils.standardize(record['end'], timezone),
                record.get('label', '')
            )

        return cls(
            Resource(
                id=str(record['id']),
                name=record['name'],
                location=record.get('location', ''),
                capacity=int(record.get('capacity', 0)),
                attributes=record.get('attributes', ()),
                timetable=(
                    busy_interval(r) for r in record.get('timetable', ())
                ),
                department=record.get('department'),
                floor=record.get('floor'),
                live_signal=LiveSignal(record.get('live_signal', 'empty'))
            )
            for record in records
        )

    def __iter__(self) -> Iterator[Resource]:
        return iter(self.resources)

    def __len__(self) -> int:
        return len(self.resources)

    def __contains__(self, resource_id: object) -> bool:
        return resource_id in self.by_id

    def get(self, resource_id: str) -> Resource:
        try:
            return self.by_id[resource_id]
        except KeyError:
            raise errors.UnknownResource(resource_id) from None

    def locations(self) -> list[str]:
        return list(dict.fromkeys(r.location for r in self.resources))

    def departments(self) -> list[str]:
        return list(dict.fromkeys(
            r.department for r in self.resources if r.department
        ))

    def search(
        self,
        location: str | None = None,
        department: str | None = None,
        min_capacity: int = 0,
        text: str | None = None,
        attributes: str | Iterable[str] = ()
    ) -> list[Resource]:
        """ Returns the resources matching all the given filters, in catalog
        order.

        :location:
            Only resources at this exact location.

        :department:
            Only resources of this exact department.

        :min_capacity:
            Only resources with at least this capacity.

        :text:
            Only resources whose name, location, department or attributes
            contain this text (case insensitive).

        :attributes:
            Only resources having all these attributes.

        """
        required = utils.string_set(attributes)
        needle = text.strip().lower() if text else None

        def matches(resource: Resource) -> bool:
            if location and resource.location != location:
                return False
            if department and resource.department != department:
                return False
            if min_capacity and resource.capacity < min_capacity:
                return False
            if not required <= resource.attributes:
                return False
            if needle:
                blob = ' '.join((
                    resource.name,
                    resource.location,
                    resource.department or '',
                    *sorted(resource.attributes)
                ))
                if needle not in blob.lower():
                    return False
            return True

        return [r for r in self.resources if matches(r)]
