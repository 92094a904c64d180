"""Command line tests using typer's CliRunner."""

from datetime import datetime

import pytest
from typer.testing import CliRunner

from omnibus import main
from omnibus.models import BookingModel, BookingStatus, PassengerModel, SeatOccupancyMode

runner = CliRunner()


@pytest.fixture(autouse=True)
def shared_controller(monkeypatch, controller):
    """Every command works on the same in-memory controller."""
    monkeypatch.setattr(main, "build_controller", lambda config=None: controller)
    return controller


class TestStaffCommands:
    """Test lookup, manifest, check-in and reset."""

    def test_routes(self):
        result = runner.invoke(main.app, ["routes", "--origin", "Paris", "--destination", "Lyon"])
        assert result.exit_code == 0
        assert "rt_001" in result.output
        assert "rt_002" not in result.output

    def test_routes_none_found(self):
        result = runner.invoke(main.app, ["routes", "--origin", "Paris", "--destination", "Marseille"])
        assert result.exit_code == 1

    def test_lookup_by_email(self):
        result = runner.invoke(main.app, ["lookup", "alice@example.com"])
        assert result.exit_code == 0
        assert "BK82910" in result.output
        assert "Alice Dubois" in result.output

    def test_lookup_miss(self):
        result = runner.invoke(main.app, ["lookup", "BK00000"])
        assert result.exit_code == 1

    def test_manifest(self):
        result = runner.invoke(main.app, ["manifest", "--route", "rt_001"])
        assert result.exit_code == 0
        assert "BK82911" in result.output
        assert "Revenue" in result.output

    def test_manifest_unknown_route(self):
        result = runner.invoke(main.app, ["manifest", "--route", "rt_999"])
        assert result.exit_code == 1

    def test_check_in(self, store):
        result = runner.invoke(main.app, ["check-in", "BK82910"])
        assert result.exit_code == 0
        assert "Success! Checked in Alice Dubois" in result.output
        assert store.get("BK82910").status == BookingStatus.CHECKED_IN

    def test_check_in_unknown(self):
        result = runner.invoke(main.app, ["check-in", "BK00000"])
        assert result.exit_code == 1
        assert "Booking ID not found." in result.output

    def test_reset_declined(self, store):
        store.set_status("BK82910", BookingStatus.CHECKED_IN)
        result = runner.invoke(main.app, ["reset"], input="n\n")
        assert result.exit_code == 1
        assert store.get("BK82910").status == BookingStatus.CHECKED_IN

    def test_reset_confirmed(self, store):
        store.set_status("BK82910", BookingStatus.CHECKED_IN)
        result = runner.invoke(main.app, ["reset", "--yes"])
        assert result.exit_code == 0
        assert store.get("BK82910").status == BookingStatus.CONFIRMED


class TestBookingCommands:
    """Test the scripted booking and the insight demo."""

    def test_book(self, store, insight_provider):
        result = runner.invoke(main.app, [
            "book",
            "--first-name", "Jean",
            "--last-name", "Dupont",
            "--email", "jean@example.com",
            "--origin", "Paris",
            "--destination", "Bordeaux",
        ])
        assert result.exit_code == 0, result.output
        booking = store.latest()
        assert booking.route_id == "rt_002"
        assert booking.id in result.output
        assert "Visit Bordeaux!" in result.output
        assert insight_provider.calls == ["Bordeaux"]

    def test_book_default_destination_skips_insight(self, insight_provider):
        result = runner.invoke(main.app, [
            "book",
            "--first-name", "Jean",
            "--last-name", "Dupont",
            "--email", "jean@example.com",
        ])
        assert result.exit_code == 0, result.output
        assert insight_provider.calls == []

    def test_book_full_route(self, controller, store):
        controller.flow.occupancy_mode = SeatOccupancyMode.DERIVED
        for seat in range(1, 41):
            store.append(BookingModel(
                id=f"BKFULL{seat:02d}",
                route_id="rt_003",
                passenger=PassengerModel(first_name="Full", last_name="Bus", email="full@example.com"),
                booking_date=datetime(2023, 11, 24),
                seat_number=seat,
            ))

        result = runner.invoke(main.app, [
            "book",
            "--first-name", "Jean",
            "--last-name", "Dupont",
            "--email", "jean@example.com",
            "--origin", "Lyon",
            "--destination", "Marseille",
        ])
        assert result.exit_code == 1
        assert "No free seat on rt_003" in result.output
        assert len(store) == 42

    def test_book_without_routes(self, store):
        result = runner.invoke(main.app, [
            "book",
            "--first-name", "Jean",
            "--last-name", "Dupont",
            "--email", "jean@example.com",
            "--destination", "Marseille",
        ])
        assert result.exit_code == 1
        assert len(store) == 2

    def test_book_blank_name(self, store):
        result = runner.invoke(main.app, [
            "book",
            "--first-name", " ",
            "--last-name", "Dupont",
            "--email", "jean@example.com",
        ])
        assert result.exit_code == 1
        assert "Please fill all fields" in result.output

    def test_insight_shows_last_city_only(self, monkeypatch, insight_provider):
        monkeypatch.setenv("INSIGHT_DEBOUNCE_MS", "50")
        result = runner.invoke(main.app, ["insight", "Lyon", "Nantes", "--interval", "0"])
        assert result.exit_code == 0
        assert "Visit Nantes!" in result.output
        assert insight_provider.calls == ["Nantes"]
