"""
Passenger and booking models for the booking application.

Bookings are immutable values. A status transition produces a new booking
through ``with_status`` and the store swaps it in place.
"""

from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel

from .enums import BookingStatus


class PassengerModel(BaseModel):
    """
    Passenger details captured in the booking flow.

    Embedded by value into the booking once it is created.
    """
    model_config = ConfigDict(
        from_attributes=True,
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    email: str = Field(..., description="Contact email")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class BookingModel(BaseModel):
    """
    A reservation of one seat on one route for one passenger.

    ``route_id`` is a weak reference into the route catalog; it may dangle.
    The serialized form is the persisted record format
    (``routeId``, ``bookingDate``, ``seatNumber``, nested ``passenger``).
    """
    model_config = ConfigDict(
        from_attributes=True,
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str = Field(..., min_length=1, description="Booking identifier")
    route_id: str = Field(..., description="Associated route ID")
    passenger: PassengerModel
    status: BookingStatus = Field(default=BookingStatus.CONFIRMED, description="Booking status")
    booking_date: datetime = Field(default_factory=datetime.now, description="Booking creation time")
    seat_number: int = Field(..., ge=1, description="Assigned seat number (1-based)")

    def with_status(self, status: BookingStatus) -> "BookingModel":
        """Return a copy of this booking with a different status."""
        return self.model_copy(update={"status": status})

    def matches(self, query: str) -> bool:
        """Case-insensitive match on booking ID or passenger email."""
        needle = query.strip().lower()
        return self.id.lower() == needle or self.passenger.email.lower() == needle
