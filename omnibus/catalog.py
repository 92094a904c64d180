"""
Static route catalog.

The city list and the scheduled routes are fixed reference data, loaded once
at import time.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from .models.route import RouteModel

CITIES: Tuple[str, ...] = (
    "Paris",
    "Lyon",
    "Marseille",
    "Bordeaux",
    "Lille",
    "Strasbourg",
    "Nantes",
)

ROUTES: Tuple[RouteModel, ...] = (
    RouteModel(
        id="rt_001",
        origin="Paris",
        destination="Lyon",
        departure_time=datetime(2023, 11, 25, 8, 0),
        arrival_time=datetime(2023, 11, 25, 10, 0),
        price=Decimal("45"),
        total_seats=50,
        bus_number="OM-101",
    ),
    RouteModel(
        id="rt_002",
        origin="Paris",
        destination="Bordeaux",
        departure_time=datetime(2023, 11, 25, 9, 30),
        arrival_time=datetime(2023, 11, 25, 12, 45),
        price=Decimal("55"),
        total_seats=50,
        bus_number="OM-102",
    ),
    RouteModel(
        id="rt_003",
        origin="Lyon",
        destination="Marseille",
        departure_time=datetime(2023, 11, 25, 14, 0),
        arrival_time=datetime(2023, 11, 25, 16, 0),
        price=Decimal("30"),
        total_seats=40,
        bus_number="OM-204",
    ),
    RouteModel(
        id="rt_004",
        origin="Lille",
        destination="Paris",
        departure_time=datetime(2023, 11, 26, 7, 0),
        arrival_time=datetime(2023, 11, 26, 8, 0),
        price=Decimal("25"),
        total_seats=60,
        bus_number="OM-305",
    ),
)

_ROUTES_BY_ID = {route.id: route for route in ROUTES}


def get_route(route_id: str) -> Optional[RouteModel]:
    """Return the route with this identifier, or None if it is not in the catalog."""
    return _ROUTES_BY_ID.get(route_id)


def search_routes(origin: str, destination: str) -> List[RouteModel]:
    """
    Filter the catalog by exact origin and destination.

    Args:
        origin: Departure city
        destination: Arrival city

    Returns:
        List[RouteModel]: Matching routes in catalog order (possibly empty)
    """
    return [
        route for route in ROUTES
        if route.origin == origin and route.destination == destination
    ]


def destinations_for(origin: str) -> List[str]:
    """Cities offered as destinations once an origin is chosen."""
    return [city for city in CITIES if city != origin]


def is_known_city(city: str) -> bool:
    return city in CITIES
