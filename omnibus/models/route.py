"""
Route models for the booking application.

Routes are static reference data: loaded once from the catalog and never
mutated.
"""

from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel


class RouteModel(BaseModel):
    """
    Scheduled origin-destination bus service.

    Serialized with the camelCase field names used by the JSON API
    (``departureTime``, ``totalSeats``, ``busNumber``).
    """
    model_config = ConfigDict(
        from_attributes=True,
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str = Field(..., description="Route identifier (e.g., 'rt_001')")
    origin: str = Field(..., description="Departure city")
    destination: str = Field(..., description="Arrival city")
    departure_time: datetime = Field(..., description="Scheduled departure time")
    arrival_time: datetime = Field(..., description="Scheduled arrival time")
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="Ticket price")
    total_seats: int = Field(..., ge=1, description="Seat capacity of the bus")
    bus_number: str = Field(..., description="Vehicle identifier (e.g., 'OM-101')")

    @property
    def label(self) -> str:
        """Human readable route name."""
        return f"{self.origin} → {self.destination}"
