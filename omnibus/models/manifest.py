"""
Ticket, manifest and admin read models for the booking application.

These are produced on demand by the ticket lookup and the admin console;
none of them are persisted.
"""

from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel

from .enums import BookingStatus
from .route import RouteModel
from .passenger import BookingModel


class TicketModel(BaseModel):
    """
    Boarding pass: a booking together with its resolved route.
    """
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)

    booking: BookingModel
    route: RouteModel

    @property
    def boarded(self) -> bool:
        return self.booking.status == BookingStatus.CHECKED_IN


class ManifestModel(BaseModel):
    """
    Passenger manifest for a single route.
    """
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)

    route: RouteModel
    bookings: List[BookingModel] = Field(default_factory=list, description="Bookings in store order")
    total_passengers: int = Field(..., ge=0, description="Number of bookings on the route")
    checked_in_count: int = Field(default=0, ge=0, description="Number of boarded passengers")


class AdminMetricsModel(BaseModel):
    """Aggregate counters shown on the admin dashboard."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)

    total_bookings: int = Field(..., ge=0, description="All bookings in the store")
    checked_in: int = Field(..., ge=0, description="Bookings with status CHECKED_IN")
    revenue: Decimal = Field(..., ge=0, description="Sum of route prices over resolvable bookings")


class RouteOccupancyModel(BaseModel):
    """Booked passengers against capacity for one route."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)

    route_id: str
    name: str = Field(..., description="Route destination, used as chart label")
    passengers: int = Field(..., ge=0)
    capacity: int = Field(..., ge=1)


class CheckInResultModel(BaseModel):
    """Outcome of a check-in by booking identifier."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)

    booking_id: str
    found: bool
    booking: Optional[BookingModel] = None

    @property
    def message(self) -> str:
        if self.found and self.booking is not None:
            return f"Success! Checked in {self.booking.passenger.full_name}"
        return "Booking ID not found."
