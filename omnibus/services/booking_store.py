"""
Booking store: the single owner of booking records.

The whole ordered sequence of bookings is serialized to one JSON blob under a
fixed key and rewritten after every mutation (last write wins). Loading never
fails; an absent or unreadable blob falls back to the demo seed data.
"""

import json
import logging
from datetime import datetime
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError
from valkey.exceptions import ValkeyError

from ..cache.client import KeyValueClient
from ..models.enums import BookingStatus
from ..models.passenger import BookingModel, PassengerModel

logger = logging.getLogger(__name__)

DEFAULT_STORE_KEY = "omnibus_bookings"

_BOOKING_LIST = TypeAdapter(List[BookingModel])


def seed_bookings(now: Optional[datetime] = None) -> List[BookingModel]:
    """
    Demo bookings restored on first start, on corruption and on reset.

    Args:
        now: Timestamp for the seed records (defaults to the current time)
    """
    now = now or datetime.now()
    return [
        BookingModel(
            id="BK82910",
            route_id="rt_001",
            passenger=PassengerModel(first_name="Alice", last_name="Dubois", email="alice@example.com"),
            status=BookingStatus.CONFIRMED,
            booking_date=now,
            seat_number=12,
        ),
        BookingModel(
            id="BK82911",
            route_id="rt_001",
            passenger=PassengerModel(first_name="Bob", last_name="Martin", email="bob@example.com"),
            status=BookingStatus.CHECKED_IN,
            booking_date=now,
            seat_number=14,
        ),
    ]


def serialize_bookings(bookings: List[BookingModel]) -> str:
    """Serialize bookings to the persisted blob format."""
    return json.dumps([booking.model_dump(mode="json", by_alias=True) for booking in bookings])


def deserialize_bookings(blob: str) -> List[BookingModel]:
    """
    Parse the persisted blob.

    Raises:
        ValidationError: If the blob is not a JSON array of booking records
    """
    return _BOOKING_LIST.validate_json(blob)


class BookingStore:
    """
    Ordered, persisted sequence of bookings.

    Insertion order matters: the last booking is the "most recent" one shown
    by default on the ticket screen.
    """

    def __init__(self, client: KeyValueClient, key: str = DEFAULT_STORE_KEY):
        """
        Initialize the store and rehydrate it from the key-value slot.

        Args:
            client: Key-value client holding the blob
            key: Key of the persisted blob
        """
        self.client = client
        self.key = key
        self._bookings: List[BookingModel] = self.load()

    def load(self) -> List[BookingModel]:
        """
        Read the persisted bookings.

        Returns the seed sequence when the slot is empty or its content does
        not parse. Never raises.
        """
        try:
            blob = self.client.get(self.key)
        except (ValkeyError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read bookings slot '{self.key}', using seed data: {e}")
            return seed_bookings()

        if blob is None:
            logger.info(f"No persisted bookings under '{self.key}', using seed data")
            return seed_bookings()

        try:
            bookings = deserialize_bookings(blob)
        except (ValidationError, ValueError, TypeError) as e:
            logger.warning(f"Discarding unreadable bookings blob under '{self.key}': {e}")
            return seed_bookings()

        logger.info(f"Loaded {len(bookings)} bookings from '{self.key}'")
        return bookings

    def _persist(self) -> None:
        self.client.set(self.key, serialize_bookings(self._bookings))

    @property
    def bookings(self) -> List[BookingModel]:
        """A copy of the current sequence."""
        return list(self._bookings)

    def __len__(self) -> int:
        return len(self._bookings)

    def __iter__(self):
        return iter(list(self._bookings))

    def ids(self) -> List[str]:
        return [booking.id for booking in self._bookings]

    def get(self, booking_id: str) -> Optional[BookingModel]:
        """Return the first booking with exactly this identifier."""
        for booking in self._bookings:
            if booking.id == booking_id:
                return booking
        return None

    def latest(self) -> Optional[BookingModel]:
        """The most recently appended booking, if any."""
        return self._bookings[-1] if self._bookings else None

    def append(self, booking: BookingModel) -> List[BookingModel]:
        """
        Add a booking to the end of the sequence and persist.

        No identifier deduplication is performed here.

        Returns:
            List[BookingModel]: The updated sequence
        """
        self._bookings.append(booking)
        self._persist()
        logger.info(f"Booking {booking.id} stored for route {booking.route_id}, seat {booking.seat_number}")
        return self.bookings

    def set_status(self, booking_id: str, status: BookingStatus) -> List[BookingModel]:
        """
        Replace the status of the booking with this identifier and persist.

        Only the first match is updated; every other field is unchanged.
        Unknown identifiers leave the sequence untouched.

        Returns:
            List[BookingModel]: The (possibly unchanged) sequence
        """
        for index, booking in enumerate(self._bookings):
            if booking.id == booking_id:
                self._bookings[index] = booking.with_status(status)
                self._persist()
                logger.info(f"Booking {booking_id} status {booking.status.value} -> {status.value}")
                break
        else:
            logger.debug(f"Status update ignored, no booking {booking_id}")

        return self.bookings

    def reset(self) -> List[BookingModel]:
        """Restore the seed data and clear the persisted slot."""
        self._bookings = seed_bookings()
        self.client.delete(self.key)
        logger.info(f"Booking store reset to seed data, cleared '{self.key}'")
        return self.bookings
