"""
Enums for the booking application.

This module contains the enumeration types shared by the models, the booking
flow and the view router.
"""

from enum import Enum


class BookingStatus(str, Enum):
    """Lifecycle status of a booking."""
    CONFIRMED = "CONFIRMED"
    CHECKED_IN = "CHECKED_IN"
    CANCELLED = "CANCELLED"


class ViewState(str, Enum):
    """Top-level screens selected by the view router."""
    HOME = "HOME"
    BOOKING = "BOOKING"
    TICKET = "TICKET"
    ADMIN = "ADMIN"


class FlowStep(str, Enum):
    """Stages of the booking wizard, in forward order."""
    ROUTE_SEARCH = "ROUTE_SEARCH"
    SEAT_SELECTION = "SEAT_SELECTION"
    PASSENGER_DETAILS = "PASSENGER_DETAILS"
    PAYMENT = "PAYMENT"
    COMPLETE = "COMPLETE"

    @property
    def position(self) -> int:
        """Zero-based position of the step in the wizard."""
        return list(FlowStep).index(self)


class SeatOccupancyMode(str, Enum):
    """How the booking flow decides which seats are already taken."""
    SIMULATED = "simulated"    # Pseudo-random per route selection
    DERIVED = "derived"        # Seats of existing bookings on the route
