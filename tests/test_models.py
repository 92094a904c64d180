"""
Pytest tests for Pydantic models.
Run with: pytest tests/test_models.py -v
"""

import json
import pytest
from datetime import datetime
from decimal import Decimal
from pydantic import ValidationError

from omnibus.models import (
    BookingModel,
    BookingStatus,
    CheckInResultModel,
    FlowStep,
    PassengerModel,
    RouteModel,
    TicketModel,
)
from omnibus.catalog import get_route


def make_booking(**overrides):
    data = dict(
        id="BK1",
        route_id="rt_001",
        passenger=PassengerModel(first_name="Ana", last_name="Lopez", email="Ana@Example.com"),
        status=BookingStatus.CONFIRMED,
        booking_date=datetime(2023, 11, 20, 12, 0),
        seat_number=3,
    )
    data.update(overrides)
    return BookingModel(**data)


class TestBookingModel:
    """Test booking value semantics and serialization."""

    def test_serializes_with_record_field_names(self):
        """Persisted records use camelCase names."""
        data = make_booking().model_dump(mode="json", by_alias=True)
        assert set(data) == {"id", "routeId", "passenger", "status", "bookingDate", "seatNumber"}
        assert data["passenger"] == {"firstName": "Ana", "lastName": "Lopez", "email": "Ana@Example.com"}
        assert data["status"] == "CONFIRMED"

    def test_parses_record_field_names(self):
        record = {
            "id": "BK9",
            "routeId": "rt_002",
            "passenger": {"firstName": "Léa", "lastName": "Roux", "email": "lea@example.com"},
            "status": "CHECKED_IN",
            "bookingDate": "2023-11-20T10:00:00",
            "seatNumber": 7,
        }
        booking = BookingModel.model_validate_json(json.dumps(record))
        assert booking.route_id == "rt_002"
        assert booking.passenger.first_name == "Léa"
        assert booking.status == BookingStatus.CHECKED_IN

    def test_with_status_changes_only_status(self):
        original = make_booking()
        updated = original.with_status(BookingStatus.CHECKED_IN)

        assert updated.status == BookingStatus.CHECKED_IN
        assert original.status == BookingStatus.CONFIRMED
        assert updated.model_dump(exclude={"status"}) == original.model_dump(exclude={"status"})

    def test_booking_is_immutable(self):
        booking = make_booking()
        with pytest.raises(ValidationError):
            booking.seat_number = 9

    def test_seat_number_must_be_positive(self):
        with pytest.raises(ValidationError):
            make_booking(seat_number=0)

    def test_matches_id_or_email_case_insensitively(self):
        booking = make_booking()
        assert booking.matches("bk1")
        assert booking.matches("ana@example.COM")
        assert not booking.matches("BK2")


class TestReadModels:
    """Test ticket and check-in read models."""

    def test_ticket_boarded_flag(self):
        route = get_route("rt_001")
        assert not TicketModel(booking=make_booking(), route=route).boarded
        boarded = make_booking(status=BookingStatus.CHECKED_IN)
        assert TicketModel(booking=boarded, route=route).boarded

    def test_check_in_messages(self):
        found = CheckInResultModel(booking_id="BK1", found=True, booking=make_booking())
        missing = CheckInResultModel(booking_id="NOPE", found=False)
        assert found.message == "Success! Checked in Ana Lopez"
        assert missing.message == "Booking ID not found."

    def test_route_price_cannot_be_negative(self):
        with pytest.raises(ValidationError):
            RouteModel(
                id="rt_x",
                origin="Paris",
                destination="Lyon",
                departure_time=datetime(2023, 1, 1, 8),
                arrival_time=datetime(2023, 1, 1, 10),
                price=Decimal("-1"),
                total_seats=10,
                bus_number="OM-1",
            )

    def test_flow_step_positions(self):
        assert [step.position for step in FlowStep] == [0, 1, 2, 3, 4]
