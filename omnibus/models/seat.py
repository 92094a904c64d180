"""
Seat map models for the booking application.

The layout is derived purely from the route capacity: four seats per row,
two on each side of a single aisle.
"""

from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict


class SeatModel(BaseModel):
    """Individual seat on the seat map."""
    model_config = ConfigDict(from_attributes=True)

    seat_number: int = Field(..., ge=1, description="Seat number (1-based)")
    seat_code: str = Field(..., description="Seat code (e.g., '3C')")
    occupied: bool = Field(default=False, description="Whether the seat is taken")
    selected: bool = Field(default=False, description="Whether the seat is the current selection")

    @property
    def available(self) -> bool:
        return not self.occupied


class SeatRowModel(BaseModel):
    """One row of the bus: left pair, aisle, right pair."""
    model_config = ConfigDict(from_attributes=True)

    row_number: int = Field(..., ge=1, description="Row number (1-based)")
    left: List[SeatModel] = Field(default_factory=list, description="Seats left of the aisle")
    right: List[SeatModel] = Field(default_factory=list, description="Seats right of the aisle")


class SeatMapModel(BaseModel):
    """
    Complete seat map for one route selection.

    Carries the occupied seats synthesized for the selection and the
    passenger's current pick, if any.
    """
    model_config = ConfigDict(from_attributes=True)

    route_id: str = Field(..., description="Route identifier")
    total_seats: int = Field(..., ge=1, description="Total number of seats")
    seats_per_row: int = Field(default=4, ge=1, description="Seats per row")
    occupied_count: int = Field(..., ge=0, description="Number of occupied seats")
    available_count: int = Field(..., ge=0, description="Number of free seats")
    selected_seat: Optional[int] = Field(None, description="Currently selected seat")
    rows: List[SeatRowModel] = Field(default_factory=list, description="Seat rows front to back")
