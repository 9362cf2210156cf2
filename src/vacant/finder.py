from __future__ import annotations

from vacant.booking import ReservationManager
from vacant.context.core import ContextServicesMixin
from vacant.drift import DriftSimulator
from vacant.resolver import Resolver


from typing import Any
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from vacant.catalog import Catalog
    from vacant.context.core import Context
    from vacant.models import AvailabilityResult, Identity, Reservation
    from vacant.models import Resource


class Finder(ContextServicesMixin):
    """ The Finder ties the catalog, the resolver, the reservation manager
    and the drift simulator of one context together. It is the main part of
    the API.

    """

    def __init__(
        self,
        context: Context,
        catalog: Catalog,
        query_instant: Callable[[], datetime] | None = None
    ):
        """ Initializes a new Finder instance.

        :context:
            The :class:`vacant.context.core.Context` this finder should
            operate on. Acquire a context by using
            :func:`vacant.context.registry.Registry.register_context`.

        :catalog:
            The :class:`vacant.catalog.Catalog` of resources. It is shared
            with all components and never copied.

        :query_instant:
            Returns the instant the consumer currently looks at, used by the
            drift simulator to decide if a resource became available.

        """
        self.context = context
        self.catalog = catalog

        self.resolver = Resolver(context)
        self.manager = ReservationManager(context, catalog)
        self.simulator = DriftSimulator(
            context, catalog,
            resolver=self.resolver,
            query_instant=query_instant
        )

    def setup_database(self) -> None:
        """ Prepares the reservation store. Needs to be called once per
        database.

        """
        self.store.setup_database()

    def resource(self, resource_id: str) -> Resource:
        return self.catalog.get(resource_id)

    def resolve(
        self,
        resource_id: str,
        instant: datetime | str,
        use_live_signal: bool = True
    ) -> AvailabilityResult:
        return self.resolver.resolve(
            self.catalog.get(resource_id), instant, use_live_signal
        )

    def available(
        self,
        instant: datetime | str,
        use_live_signal: bool = True,
        include_busy: bool = False,
        **filters: Any
    ) -> list[tuple[Resource, AvailabilityResult]]:
        """ Searches the catalog with the given filters (see
        :meth:`vacant.catalog.Catalog.search`) and resolves the matches at
        the given instant.

        Only free resources are returned, unless include_busy is True.

        """
        results = self.resolver.resolve_all(
            self.catalog.search(**filters), instant, use_live_signal
        )

        if include_busy:
            return results

        return [(r, result) for r, result in results if result.is_free]

    def book(
        self,
        resource_id: str,
        holder: Identity | None,
        interval: tuple[datetime | str, datetime | str],
        overwrite: bool = False
    ) -> Reservation:
        return self.manager.book(resource_id, holder, interval, overwrite)

    def cancel(self, resource_id: str, caller: Identity | None) -> None:
        self.manager.cancel(resource_id, caller)

    def reset(self) -> None:
        """ Removes all reservations. """
        self.manager.clear_all()

    def start(self) -> None:
        self.simulator.start()

    def stop(self) -> None:
        self.simulator.stop()


def new_finder(
    context: Context,
    catalog: Catalog,
    query_instant: Callable[[], datetime] | None = None
) -> Finder:
    return Finder(context, catalog, query_instant)
