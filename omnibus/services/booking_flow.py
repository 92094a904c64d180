"""
Booking flow: the four-stage booking wizard as an explicit state machine.

    ROUTE_SEARCH -> SEAT_SELECTION -> PASSENGER_DETAILS -> PAYMENT -> COMPLETE

Forward moves only happen through the action for the current step; ``back``
returns to any earlier step. Validation failures raise and leave the state
untouched so the caller can re-prompt.
"""

import logging
import random
import time
from datetime import datetime
from decimal import Decimal
from typing import Callable, FrozenSet, Iterable, List, Optional

from .. import catalog
from ..errors import FormValidationError, InvalidTransitionError, SeatUnavailableError
from ..models.enums import BookingStatus, FlowStep, SeatOccupancyMode
from ..models.passenger import BookingModel, PassengerModel
from ..models.route import RouteModel
from ..models.seat import SeatMapModel
from .identifiers import BookingIdGenerator
from .seat_map import build_seat_map, derive_occupied_seats, simulate_occupied_seats

logger = logging.getLogger(__name__)

DEFAULT_ORIGIN = "Paris"
DEFAULT_DESTINATION = "Lyon"


class BookingFlow:
    """
    State machine producing one new booking.

    The flow never writes to the store itself: the finished booking is handed
    to ``on_commit``, which owns persistence.
    """

    def __init__(
        self,
        on_commit: Callable[[BookingModel], object],
        bookings: Callable[[], Iterable[BookingModel]] = lambda: (),
        occupancy_mode: SeatOccupancyMode = SeatOccupancyMode.SIMULATED,
        occupancy_ratio: float = 0.3,
        booking_fee: Decimal = Decimal("0"),
        payment_delay: float = 1.0,
        id_generator: Optional[BookingIdGenerator] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            on_commit: Receives the confirmed booking (normally the store append)
            bookings: Read access to existing bookings (derived occupancy, ID uniqueness)
            occupancy_mode: Simulated or derived seat occupancy
            occupancy_ratio: Share of seats occupied in simulated mode
            booking_fee: Fixed fee added to the route price at payment
            payment_delay: Simulated payment processing time in seconds
            id_generator: Booking identifier generator
            rng: Random source for simulated occupancy
            sleep: Blocking wait used for the payment delay
        """
        self._on_commit = on_commit
        self._bookings = bookings
        self.occupancy_mode = occupancy_mode
        self.occupancy_ratio = occupancy_ratio
        self.booking_fee = booking_fee
        self.payment_delay = payment_delay
        self.id_generator = id_generator or BookingIdGenerator()
        self._rng = rng or random.Random()
        self._sleep = sleep
        self.restart()

    def restart(self) -> None:
        """Discard all progress and return to an empty route search."""
        self.step = FlowStep.ROUTE_SEARCH
        self.origin = DEFAULT_ORIGIN
        self.destination = DEFAULT_DESTINATION
        self.destination_changed = False
        self.selected_route: Optional[RouteModel] = None
        self.occupied_seats: FrozenSet[int] = frozenset()
        self.selected_seat: Optional[int] = None
        self.passenger: Optional[PassengerModel] = None
        self.booking: Optional[BookingModel] = None

    def _require(self, step: FlowStep, action: str) -> None:
        if self.step != step:
            raise InvalidTransitionError(
                f"Cannot {action} during {self.step.value}; expected {step.value}"
            )

    # Route search

    @property
    def matching_routes(self) -> List[RouteModel]:
        return catalog.search_routes(self.origin, self.destination)

    def search(self, origin: str, destination: str) -> List[RouteModel]:
        """
        Update the search cities and return the matching routes.

        Sets ``destination_changed`` so the caller can refresh the insight.

        Raises:
            FormValidationError: If either city is not served
        """
        self._require(FlowStep.ROUTE_SEARCH, "search routes")
        for city in (origin, destination):
            if not catalog.is_known_city(city):
                raise FormValidationError(f"Unknown city: {city}")

        self.destination_changed = destination != self.destination
        self.origin = origin
        self.destination = destination
        routes = self.matching_routes
        logger.debug(f"Route search {origin} -> {destination}: {len(routes)} result(s)")
        return routes

    def select_route(self, route_id: str) -> RouteModel:
        """
        Pick one of the matching routes and move to seat selection.

        Raises:
            FormValidationError: If the route is not among the current matches
        """
        self._require(FlowStep.ROUTE_SEARCH, "select a route")
        route = next((r for r in self.matching_routes if r.id == route_id), None)
        if route is None:
            raise FormValidationError(f"Route {route_id} is not available for {self.origin} → {self.destination}")

        self.selected_route = route
        self.selected_seat = None
        self.occupied_seats = self._occupied_for(route)
        self.step = FlowStep.SEAT_SELECTION
        logger.info(f"Route {route.id} selected, {len(self.occupied_seats)} seats occupied")
        return route

    def _occupied_for(self, route: RouteModel) -> FrozenSet[int]:
        if self.occupancy_mode == SeatOccupancyMode.DERIVED:
            return derive_occupied_seats(route, self._bookings())
        return simulate_occupied_seats(route, self.occupancy_ratio, self._rng)

    # Seat selection

    def seat_map(self) -> SeatMapModel:
        if self.selected_route is None:
            raise InvalidTransitionError("No route selected")
        return build_seat_map(self.selected_route, self.occupied_seats, self.selected_seat)

    def select_seat(self, seat_number: int) -> int:
        """
        Make ``seat_number`` the sole selected seat.

        Raises:
            SeatUnavailableError: If the seat is occupied or out of range;
                the previous selection is kept
        """
        self._require(FlowStep.SEAT_SELECTION, "select a seat")
        if not 1 <= seat_number <= self.selected_route.total_seats:
            raise SeatUnavailableError(seat_number, "not on this bus")
        if seat_number in self.occupied_seats:
            raise SeatUnavailableError(seat_number, "occupied")

        self.selected_seat = seat_number
        return seat_number

    def continue_to_details(self) -> None:
        self._require(FlowStep.SEAT_SELECTION, "continue to passenger details")
        if self.selected_seat is None:
            raise FormValidationError("Please select a seat")
        self.step = FlowStep.PASSENGER_DETAILS

    # Passenger details

    def submit_passenger(self, first_name: str, last_name: str, email: str) -> PassengerModel:
        """
        Record passenger details and move to payment.

        Only presence is checked; the email format is not validated.

        Raises:
            FormValidationError: If any field is blank
        """
        self._require(FlowStep.PASSENGER_DETAILS, "submit passenger details")
        fields = [(value or "").strip() for value in (first_name, last_name, email)]
        if not all(fields):
            raise FormValidationError("Please fill all fields")

        self.passenger = PassengerModel(first_name=fields[0], last_name=fields[1], email=fields[2])
        self.step = FlowStep.PAYMENT
        return self.passenger

    # Payment

    @property
    def total(self) -> Decimal:
        """Route price plus the booking fee."""
        if self.selected_route is None:
            return Decimal("0")
        return self.selected_route.price + self.booking_fee

    def confirm_payment(self) -> BookingModel:
        """
        Create the booking, wait out the simulated payment and commit it.

        The delay cannot be cancelled once started.

        Returns:
            BookingModel: The confirmed booking
        """
        self._require(FlowStep.PAYMENT, "confirm payment")

        existing_ids = [booking.id for booking in self._bookings()]
        booking = BookingModel(
            id=self.id_generator.next_id(existing_ids),
            route_id=self.selected_route.id,
            passenger=self.passenger,
            status=BookingStatus.CONFIRMED,
            booking_date=datetime.now(),
            seat_number=self.selected_seat,
        )

        if self.payment_delay > 0:
            self._sleep(self.payment_delay)

        self._on_commit(booking)
        self.booking = booking
        self.step = FlowStep.COMPLETE
        logger.info(f"Payment confirmed for booking {booking.id} ({self.total} EUR)")
        return booking

    # Navigation

    def back(self, step: Optional[FlowStep] = None) -> FlowStep:
        """
        Return to the previous step, or to ``step`` if given.

        Going back to route search discards the route and seat selection.

        Raises:
            InvalidTransitionError: From COMPLETE, from the first step, or
                when ``step`` is not earlier than the current one
        """
        if self.step == FlowStep.COMPLETE:
            raise InvalidTransitionError("Booking already completed; start a new booking")

        steps = list(FlowStep)
        target = step or (steps[self.step.position - 1] if self.step.position > 0 else None)
        if target is None or target.position >= self.step.position:
            raise InvalidTransitionError(f"Cannot go back from {self.step.value} to {target.value if target else 'nothing'}")

        if target == FlowStep.ROUTE_SEARCH:
            self.selected_route = None
            self.occupied_seats = frozenset()
            self.selected_seat = None

        self.step = target
        return target
