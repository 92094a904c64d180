"""
Ticket lookup by booking identifier or passenger email.
"""

import logging
from typing import Optional

from .. import catalog
from ..models.manifest import TicketModel
from ..models.passenger import BookingModel
from .booking_store import BookingStore

logger = logging.getLogger(__name__)


class TicketLookup:
    """Resolve tickets from the booking store."""

    def __init__(self, store: BookingStore):
        self.store = store

    def find(self, query: Optional[str] = None) -> Optional[BookingModel]:
        """
        Find a booking for the ticket screen.

        A blank query selects the most recently appended booking. Otherwise the
        first booking whose ID or email equals the query (case-insensitive) is
        returned; a miss returns None.
        """
        if not query or not query.strip():
            return self.store.latest()

        for booking in self.store:
            if booking.matches(query):
                return booking

        logger.debug(f"No booking matches '{query}'")
        return None

    def ticket(self, query: Optional[str] = None) -> Optional[TicketModel]:
        """Find a booking and pair it with its route. None if either is missing."""
        booking = self.find(query)
        if booking is None:
            return None

        route = catalog.get_route(booking.route_id)
        if route is None:
            logger.warning(f"Booking {booking.id} references unknown route {booking.route_id}")
            return None

        return TicketModel(booking=booking, route=route)
