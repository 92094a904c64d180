"""Tests for the persisted booking store."""

import json
from datetime import datetime

from unittest.mock import MagicMock

import pytest
from valkey.exceptions import ResponseError

from omnibus.cache import KeyValueClient, ValkeyConfig
from omnibus.models import BookingModel, BookingStatus, PassengerModel
from omnibus.services.booking_store import (
    DEFAULT_STORE_KEY,
    BookingStore,
    deserialize_bookings,
    serialize_bookings,
)


def new_booking(booking_id, seat=20, route_id="rt_002"):
    return BookingModel(
        id=booking_id,
        route_id=route_id,
        passenger=PassengerModel(first_name="Eve", last_name="Martin", email=f"{booking_id.lower()}@example.com"),
        booking_date=datetime(2023, 11, 20, 9, 0),
        seat_number=seat,
    )


class TestLoad:
    """Test rehydration from the key-value slot."""

    def test_absent_slot_gives_seed(self, kv_client):
        store = BookingStore(kv_client)
        assert store.ids() == ["BK82910", "BK82911"]
        assert store.get("BK82910").passenger.full_name == "Alice Dubois"
        assert store.get("BK82911").status == BookingStatus.CHECKED_IN

    @pytest.mark.parametrize("blob", [
        "not json at all",
        '{"id": "BK1"}',
        '[{"id": "BK1"}]',
        "",
    ])
    def test_unreadable_blob_gives_seed(self, kv_client, blob):
        kv_client.set(DEFAULT_STORE_KEY, blob)
        store = BookingStore(kv_client)
        assert len(store) == 2
        assert store.ids() == ["BK82910", "BK82911"]

    @pytest.mark.parametrize("error", [
        ResponseError("WRONGTYPE Operation against a key holding the wrong kind of value"),
        UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"),
    ])
    def test_unreadable_slot_gives_seed(self, error):
        backend = MagicMock()
        backend.get.side_effect = error
        store = BookingStore(KeyValueClient(config=ValkeyConfig(), client=backend))
        assert store.ids() == ["BK82910", "BK82911"]

    def test_persisted_bookings_are_loaded(self, kv_client):
        kv_client.set(DEFAULT_STORE_KEY, serialize_bookings([new_booking("BK1")]))
        store = BookingStore(kv_client)
        assert store.ids() == ["BK1"]

    def test_empty_list_is_respected(self, kv_client):
        kv_client.set(DEFAULT_STORE_KEY, "[]")
        assert len(BookingStore(kv_client)) == 0

    def test_custom_key(self, kv_client):
        kv_client.set("other", serialize_bookings([new_booking("BK5")]))
        assert BookingStore(kv_client, key="other").ids() == ["BK5"]


class TestMutations:
    """Test append, status changes and reset."""

    def test_append_preserves_order_and_persists(self, store, kv_client):
        result = store.append(new_booking("BK1"))
        result = store.append(new_booking("BK2"))

        assert [b.id for b in result] == ["BK82910", "BK82911", "BK1", "BK2"]
        assert store.latest().id == "BK2"

        persisted = json.loads(kv_client.get(DEFAULT_STORE_KEY))
        assert [record["id"] for record in persisted] == ["BK82910", "BK82911", "BK1", "BK2"]
        assert persisted[-1]["routeId"] == "rt_002"

    def test_append_does_not_deduplicate(self, store):
        store.append(new_booking("BK1"))
        store.append(new_booking("BK1"))
        assert store.ids().count("BK1") == 2

    def test_set_status_changes_one_record(self, store):
        before = store.bookings
        after = store.set_status("BK82910", BookingStatus.CHECKED_IN)

        assert after[0].status == BookingStatus.CHECKED_IN
        assert after[0].model_dump(exclude={"status"}) == before[0].model_dump(exclude={"status"})
        assert after[1] == before[1]

    def test_set_status_updates_first_duplicate_only(self, store):
        store.append(new_booking("BK1", seat=1))
        store.append(new_booking("BK1", seat=2))
        store.set_status("BK1", BookingStatus.CANCELLED)

        duplicates = [b for b in store if b.id == "BK1"]
        assert duplicates[0].status == BookingStatus.CANCELLED
        assert duplicates[1].status == BookingStatus.CONFIRMED

    def test_set_status_unknown_id_is_noop(self, store, kv_client):
        before = store.bookings
        after = store.set_status("BK00000", BookingStatus.CHECKED_IN)
        assert after == before
        assert kv_client.get(DEFAULT_STORE_KEY) is None

    def test_set_status_is_case_sensitive(self, store):
        store.set_status("bk82910", BookingStatus.CHECKED_IN)
        assert store.get("BK82910").status == BookingStatus.CONFIRMED

    def test_mutations_survive_reload(self, kv_client):
        store = BookingStore(kv_client)
        store.append(new_booking("BK1"))
        store.set_status("BK1", BookingStatus.CHECKED_IN)

        reloaded = BookingStore(kv_client)
        assert reloaded.ids() == store.ids()
        assert reloaded.get("BK1").status == BookingStatus.CHECKED_IN

    def test_reset_restores_seed_and_clears_slot(self, store, kv_client):
        store.append(new_booking("BK1"))
        store.reset()

        assert store.ids() == ["BK82910", "BK82911"]
        assert kv_client.get(DEFAULT_STORE_KEY) is None

    def test_bookings_returns_a_copy(self, store):
        store.bookings.clear()
        assert len(store) == 2


class TestSerialization:
    """Test the persisted blob format."""

    def test_blob_round_trip(self):
        bookings = [new_booking("BK1"), new_booking("BK2", seat=4)]
        assert deserialize_bookings(serialize_bookings(bookings)) == bookings

    def test_store_shared_between_clients_of_same_slot(self):
        client = KeyValueClient.in_memory()
        BookingStore(client).append(new_booking("BK7"))
        assert "BK7" in BookingStore(client).ids()
