import logging

from datetime import datetime
from vacant import new_finder, registry
from vacant.catalog import Catalog
from vacant.models import Identity, Role
from vacant.modules import events


logging.basicConfig(level=logging.INFO)

context = registry.register_context('demo')
context.set_setting('dsn', 'sqlite:///demo.db')
context.set_setting('timezone', 'Europe/Zurich')
context.set_setting('drift_interval', 2)

catalog = Catalog.from_records([
    {
        'id': '1',
        'name': 'Bldg A 101',
        'location': 'Building A',
        'capacity': 40,
        'timetable': [
            {'start': '2024-01-08T10:00', 'end': '2024-01-08T12:00',
             'label': 'CSE101'},
        ],
        'live_signal': 'occupied'
    },
], timezone='Europe/Zurich')

finder = new_finder(context, catalog)
finder.setup_database()

events.on_resource_became_available.append(
    lambda context, resource: print(f'{resource.name} is free!')
)

print(finder.resolve('1', datetime(2024, 1, 8, 11)))
finder.book('1', Identity('alice', Role.STUDENT), (
    datetime(2024, 1, 8, 14), datetime(2024, 1, 8, 15)
), overwrite=True)
print(finder.resolve('1', datetime(2024, 1, 8, 14, 30), use_live_signal=False))
