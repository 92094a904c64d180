"""
Booking identifier generation.

Identifiers look like ``BK3F9A12C4``: a fixed prefix and eight hex characters
from ``secrets``. Candidates that collide with an existing booking are
discarded.
"""

import logging
import secrets
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

ID_PREFIX = "BK"


class BookingIdGenerator:
    """Generate booking identifiers that are unique within the store."""

    def __init__(self, token_factory: Callable[[], str] = None, max_attempts: int = 20):
        """
        Args:
            token_factory: Callable returning the random part (defaults to 4 random bytes as hex)
            max_attempts: Attempts before giving up on a collision-free identifier
        """
        self._token_factory = token_factory or (lambda: secrets.token_hex(4))
        self.max_attempts = max_attempts

    def next_id(self, existing_ids: Iterable[str] = ()) -> str:
        """
        Return a new identifier not present in ``existing_ids``.

        Comparison is case-insensitive because ticket lookup is.

        Raises:
            RuntimeError: If no free identifier was found within ``max_attempts``
        """
        taken = {booking_id.upper() for booking_id in existing_ids}

        for attempt in range(1, self.max_attempts + 1):
            candidate = f"{ID_PREFIX}{self._token_factory().upper()}"
            if candidate not in taken:
                return candidate
            logger.debug(f"Booking ID collision on attempt {attempt}: {candidate}")

        raise RuntimeError(f"Could not generate a unique booking ID after {self.max_attempts} attempts")
