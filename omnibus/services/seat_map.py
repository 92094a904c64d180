"""
Seat layout and occupancy for a route selection.

Seats are numbered front to back, four per row: two left of the aisle
(A, B) and two right of it (C, D).
"""

import logging
import math
import random
from typing import FrozenSet, Iterable, Optional

from ..models.enums import BookingStatus
from ..models.passenger import BookingModel
from ..models.route import RouteModel
from ..models.seat import SeatModel, SeatRowModel, SeatMapModel

logger = logging.getLogger(__name__)

SEATS_PER_ROW = 4
SEAT_LETTERS = ("A", "B", "C", "D")
AISLE_AFTER = 2  # Aisle sits between the second and third seat of a row


def seat_code(seat_number: int) -> str:
    """Row-and-letter code for a seat number (1 -> '1A', 6 -> '2B')."""
    row = (seat_number - 1) // SEATS_PER_ROW + 1
    letter = SEAT_LETTERS[(seat_number - 1) % SEATS_PER_ROW]
    return f"{row}{letter}"


def simulate_occupied_seats(
    route: RouteModel,
    ratio: float = 0.3,
    rng: Optional[random.Random] = None,
) -> FrozenSet[int]:
    """
    Draw a pseudo-random set of occupied seats for a route.

    Args:
        route: Route being booked
        ratio: Share of seats to mark as occupied
        rng: Random source (a fresh one if omitted)

    Returns:
        FrozenSet[int]: Occupied seat numbers; at least one seat is left free
    """
    rng = rng or random.Random()
    count = min(int(route.total_seats * ratio), route.total_seats - 1)
    occupied = frozenset(rng.sample(range(1, route.total_seats + 1), count))
    logger.debug(f"Simulated {len(occupied)} occupied seats on {route.id}")
    return occupied


def derive_occupied_seats(route: RouteModel, bookings: Iterable[BookingModel]) -> FrozenSet[int]:
    """Seats held by non-cancelled bookings on the route."""
    return frozenset(
        booking.seat_number
        for booking in bookings
        if booking.route_id == route.id
        and booking.status != BookingStatus.CANCELLED
        and 1 <= booking.seat_number <= route.total_seats
    )


def build_seat_map(
    route: RouteModel,
    occupied: Iterable[int] = (),
    selected: Optional[int] = None,
) -> SeatMapModel:
    """
    Lay out the seats of a route.

    Args:
        route: Route providing the capacity
        occupied: Seat numbers already taken
        selected: Seat currently picked by the passenger

    Returns:
        SeatMapModel: Rows front to back, split by the aisle
    """
    occupied = frozenset(occupied)
    rows = []

    for row_index in range(math.ceil(route.total_seats / SEATS_PER_ROW)):
        first = row_index * SEATS_PER_ROW + 1
        seats = [
            SeatModel(
                seat_number=number,
                seat_code=seat_code(number),
                occupied=number in occupied,
                selected=number == selected,
            )
            for number in range(first, min(first + SEATS_PER_ROW, route.total_seats + 1))
        ]
        rows.append(SeatRowModel(
            row_number=row_index + 1,
            left=seats[:AISLE_AFTER],
            right=seats[AISLE_AFTER:],
        ))

    occupied_count = len([n for n in occupied if 1 <= n <= route.total_seats])
    return SeatMapModel(
        route_id=route.id,
        total_seats=route.total_seats,
        seats_per_row=SEATS_PER_ROW,
        occupied_count=occupied_count,
        available_count=route.total_seats - occupied_count,
        selected_seat=selected,
        rows=rows,
    )
