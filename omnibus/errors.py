"""
Domain errors for the booking application.

All of these are recoverable: handlers turn them into a flashed notice,
a JSON error envelope or a CLI exit code.
"""


class OmnibusError(Exception):
    """Base class for booking application errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FormValidationError(OmnibusError):
    """Raised when user input is missing or outside the allowed values."""
    pass


class SeatUnavailableError(OmnibusError):
    """Raised when a seat is occupied or outside the route's seat range."""

    def __init__(self, seat_number: int, reason: str = "occupied"):
        super().__init__(f"Seat {seat_number} is {reason}")
        self.seat_number = seat_number
        self.reason = reason


class InvalidTransitionError(OmnibusError):
    """Raised when a booking flow action is not allowed in the current step."""
    pass


class RouteNotFoundError(OmnibusError):
    """Raised when a route identifier does not resolve in the catalog."""

    def __init__(self, route_id: str):
        super().__init__(f"Route not found: {route_id}")
        self.route_id = route_id


class BookingNotFoundError(OmnibusError):
    """Raised when a booking identifier does not resolve in the store."""

    def __init__(self, booking_id: str):
        super().__init__(f"Booking not found: {booking_id}")
        self.booking_id = booking_id
