"""
Admin console: manifests, check-in, metrics and data reset for staff.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from .. import catalog
from ..errors import BookingNotFoundError, RouteNotFoundError
from ..models.enums import BookingStatus
from ..models.manifest import (
    AdminMetricsModel,
    CheckInResultModel,
    ManifestModel,
    RouteOccupancyModel,
)
from ..models.passenger import BookingModel
from .booking_store import BookingStore

logger = logging.getLogger(__name__)


class AdminConsole:
    """
    Staff operations over the booking store.

    All status changes go through ``BookingStore.set_status`` so they are
    persisted immediately.
    """

    def __init__(self, store: BookingStore):
        self.store = store
        self.selected_route_id: str = catalog.ROUTES[0].id

    def select_route(self, route_id: str) -> str:
        """
        Choose the route whose manifest is displayed.

        Raises:
            RouteNotFoundError: If the route is not in the catalog
        """
        if catalog.get_route(route_id) is None:
            raise RouteNotFoundError(route_id)
        self.selected_route_id = route_id
        return route_id

    def manifest(self, route_id: Optional[str] = None) -> ManifestModel:
        """
        Bookings on a route in store order.

        Args:
            route_id: Route to list, defaults to the selected route

        Raises:
            RouteNotFoundError: If the route is not in the catalog
        """
        route_id = route_id or self.selected_route_id
        route = catalog.get_route(route_id)
        if route is None:
            raise RouteNotFoundError(route_id)

        bookings = [booking for booking in self.store if booking.route_id == route_id]
        return ManifestModel(
            route=route,
            bookings=bookings,
            total_passengers=len(bookings),
            checked_in_count=sum(1 for b in bookings if b.status == BookingStatus.CHECKED_IN),
        )

    def metrics(self) -> AdminMetricsModel:
        """Totals across all bookings. Bookings on unknown routes add no revenue."""
        bookings = self.store.bookings
        revenue = Decimal("0")
        for booking in bookings:
            route = catalog.get_route(booking.route_id)
            if route is not None:
                revenue += route.price

        return AdminMetricsModel(
            total_bookings=len(bookings),
            checked_in=sum(1 for b in bookings if b.status == BookingStatus.CHECKED_IN),
            revenue=revenue,
        )

    def occupancy(self) -> List[RouteOccupancyModel]:
        """Booked passengers against capacity for every catalog route."""
        bookings = self.store.bookings
        return [
            RouteOccupancyModel(
                route_id=route.id,
                name=route.destination,
                passengers=sum(1 for b in bookings if b.route_id == route.id),
                capacity=route.total_seats,
            )
            for route in catalog.ROUTES
        ]

    def check_in(self, booking_id: str) -> CheckInResultModel:
        """
        Check in a passenger by exact booking ID.

        An unknown ID leaves the store untouched and reports ``found=False``.
        """
        booking_id = (booking_id or "").strip()
        if self.store.get(booking_id) is None:
            logger.info(f"Check-in failed, unknown booking '{booking_id}'")
            return CheckInResultModel(booking_id=booking_id, found=False)

        self.store.set_status(booking_id, BookingStatus.CHECKED_IN)
        return CheckInResultModel(booking_id=booking_id, found=True, booking=self.store.get(booking_id))

    def board(self, booking_id: str) -> BookingModel:
        """
        Mark a manifest row as boarded.

        Raises:
            BookingNotFoundError: If no booking has this ID
        """
        if self.store.get(booking_id) is None:
            raise BookingNotFoundError(booking_id)

        self.store.set_status(booking_id, BookingStatus.CHECKED_IN)
        return self.store.get(booking_id)

    def reset(self, confirmed: bool) -> bool:
        """
        Restore the demo data. Does nothing unless ``confirmed`` is true.

        Returns:
            bool: Whether the reset happened
        """
        if not confirmed:
            logger.debug("Reset requested without confirmation, ignored")
            return False

        self.store.reset()
        return True
