"""
OmniBus Pydantic models package.

This package contains the Pydantic v2 models used for validation,
serialization of the persisted booking blob, and the JSON API.
"""

# Enums
from .enums import (
    BookingStatus,
    ViewState,
    FlowStep,
    SeatOccupancyMode,
)

# Reference data
from .route import RouteModel

# Passengers and bookings
from .passenger import (
    PassengerModel,
    BookingModel,
)

# Seat map
from .seat import (
    SeatModel,
    SeatRowModel,
    SeatMapModel,
)

# Read models
from .manifest import (
    TicketModel,
    ManifestModel,
    AdminMetricsModel,
    RouteOccupancyModel,
    CheckInResultModel,
)

__all__ = [
    # Enums
    "BookingStatus",
    "ViewState",
    "FlowStep",
    "SeatOccupancyMode",

    # Core models
    "RouteModel",
    "PassengerModel",
    "BookingModel",

    # Seat models
    "SeatModel",
    "SeatRowModel",
    "SeatMapModel",

    # Read models
    "TicketModel",
    "ManifestModel",
    "AdminMetricsModel",
    "RouteOccupancyModel",
    "CheckInResultModel",
]
