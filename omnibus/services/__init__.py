"""
Business logic services for the OmniBus booking demo.

This module contains the booking store, the booking flow state machine,
ticket lookup, the admin console and the destination insight providers.
"""

from .identifiers import BookingIdGenerator
from .booking_store import BookingStore, seed_bookings
from .seat_map import build_seat_map, simulate_occupied_seats, derive_occupied_seats
from .booking_flow import BookingFlow
from .ticket_lookup import TicketLookup
from .admin_console import AdminConsole
from .insight_provider import (
    InsightProvider,
    DisabledInsightProvider,
    GeminiInsightProvider,
    OllamaInsightProvider,
    InsightPanel,
    build_insight_provider,
)

__all__ = [
    'BookingIdGenerator',
    'BookingStore',
    'seed_bookings',
    'build_seat_map',
    'simulate_occupied_seats',
    'derive_occupied_seats',
    'BookingFlow',
    'TicketLookup',
    'AdminConsole',
    'InsightProvider',
    'DisabledInsightProvider',
    'GeminiInsightProvider',
    'OllamaInsightProvider',
    'InsightPanel',
    'build_insight_provider',
]
