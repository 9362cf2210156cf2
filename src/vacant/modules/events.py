""" Events are called by the :class:`vacant.booking.ReservationManager` and
the :class:`vacant.drift.DriftSimulator` whenever something interesting
occurs.

The implementation is very simple:

To add an event::

    from vacant.modules import events

    def on_resource_became_available(context, resource):
        pass

    events.on_resource_became_available.append(on_resource_became_available)

To remove the same event::

    events.on_resource_became_available.remove(on_resource_became_available)

Events are called in the order they were added.
"""
from __future__ import annotations


from typing import overload
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from collections.abc import Callable
    from collections.abc import Sequence
    from typing_extensions import ParamSpec

    from vacant.context.core import Context
    from vacant.models import LiveSignal, Reservation, Resource

    _P = ParamSpec('_P')


class Event(list['Callable[_P, object]']):
    """Event subscription. By http://stackoverflow.com/a/2022629

    A list of callable objects. Calling an instance of this will cause a
    call to each item in the list in ascending order by index.

    """
    @overload
    def __init__(self, f: type[Callable[_P, object]]) -> None: ...
    @overload
    def __init__(self) -> None: ...

    def __init__(self, f: object = None) -> None:
        return

    def __call__(self, *args: _P.args, **kwargs: _P.kwargs) -> None:
        for f in self:
            f(*args, **kwargs)


on_reservation_made: Event[Context, Reservation] = Event()
""" Called when a reservation is stored, with the following arguments:

    :context:
        The :class:`vacant.context.core.Context` used when booking.

    :reservation:
        The :class:`vacant.models.Reservation` that was stored.

"""

on_reservation_cancelled: Event[Context, Reservation] = Event()
""" Called when a reservation is cancelled, with the following arguments:

    :context:
        The :class:`vacant.context.core.Context` used when cancelling.

    :reservation:
        The :class:`vacant.models.Reservation` that was removed.

"""

on_reservations_cleared: Event[Context] = Event()
""" Called after all reservations were removed by an administrative reset,
with the context as the only argument.

"""

on_live_signal_changed: Event[Context, Resource, LiveSignal] = Event()
""" Called whenever the live signal of a resource flips, with the following
arguments:

    :context:
        The :class:`vacant.context.core.Context` of the simulator.

    :resource:
        The :class:`vacant.models.Resource`, already carrying the new signal.

    :previous:
        The :class:`vacant.models.LiveSignal` before the flip.

"""

on_resource_became_available: Event[Context, Resource] = Event()
""" Called when a resource's live signal went from occupied to empty and the
resource is free at the current query instant, with the following
arguments:

    :context:
        The :class:`vacant.context.core.Context` of the simulator.

    :resource:
        The :class:`vacant.models.Resource` that became available.

"""

on_tick_completed: Event[Context, Sequence[Resource]] = Event()
""" Called once per simulator tick after all selected resources were
processed, with the following arguments:

    :context:
        The :class:`vacant.context.core.Context` of the simulator.

    :flipped:
        The resources whose live signal changed during the tick. Views which
        do not use the live signal may ignore this event.

"""
