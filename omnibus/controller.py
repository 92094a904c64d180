"""
Application controller: owns the services and the current view.

Every booking mutation goes through here so that the store stays the single
owner of booking records and the view follows the booking lifecycle.
"""

import logging
from typing import Optional

from .cache.client import KeyValueClient, build_kv_client
from .models.enums import ViewState
from .models.passenger import BookingModel
from .services.admin_console import AdminConsole
from .services.booking_flow import BookingFlow
from .services.booking_store import BookingStore
from .services.insight_provider import DisabledInsightProvider, InsightProvider, build_insight_provider
from .services.ticket_lookup import TicketLookup
from .utils.config import OmnibusConfig, get_config

logger = logging.getLogger(__name__)


class ApplicationController:
    """
    View router and service container.

    HOME and BOOKING both present the booking flow; TICKET and ADMIN have
    their own screens.
    """

    def __init__(
        self,
        store: BookingStore,
        insight_provider: Optional[InsightProvider] = None,
        flow: Optional[BookingFlow] = None,
    ):
        self.store = store
        self.insight_provider = insight_provider or DisabledInsightProvider()
        self.flow = flow or BookingFlow(on_commit=self.store.append, bookings=lambda: self.store.bookings)
        self.lookup = TicketLookup(store)
        self.admin = AdminConsole(store)
        self.current_view = ViewState.HOME

    def navigate(self, view: ViewState) -> ViewState:
        """Switch the active view. Never touches booking data."""
        if view != self.current_view:
            logger.debug(f"View {self.current_view.value} -> {view.value}")
        self.current_view = view
        return view

    def start_booking(self) -> BookingFlow:
        """Begin a fresh booking and show the booking view."""
        self.flow.restart()
        self.navigate(ViewState.BOOKING)
        return self.flow

    def confirm_payment(self) -> BookingModel:
        """
        Finish the booking flow and show the new ticket.

        The flow hands the booking to the store before this returns.
        """
        booking = self.flow.confirm_payment()
        self.navigate(ViewState.TICKET)
        return booking

    def get_insight(self, city: str) -> str:
        return self.insight_provider.get_insight(city)

    def reset_data(self, confirmed: bool) -> bool:
        """Restore the demo bookings when confirmed."""
        return self.admin.reset(confirmed)


def build_controller(
    config: Optional[OmnibusConfig] = None,
    client: Optional[KeyValueClient] = None,
) -> ApplicationController:
    """
    Wire the controller from configuration.

    Args:
        config: Application configuration (global config if omitted)
        client: Key-value client to use instead of the configured backend
    """
    config = config or get_config()
    client = client or build_kv_client(config.store_backend, config.valkey_config())

    store = BookingStore(client, key=config.store_key)
    flow = BookingFlow(
        on_commit=store.append,
        bookings=lambda: store.bookings,
        occupancy_mode=config.seat_occupancy_mode,
        occupancy_ratio=config.simulated_occupancy_ratio,
        booking_fee=config.booking_fee,
        payment_delay=config.payment_delay_seconds,
    )
    controller = ApplicationController(
        store,
        insight_provider=build_insight_provider(config),
        flow=flow,
    )
    logger.info(
        f"Controller ready: {len(store)} bookings, store={config.store_backend}, "
        f"insights={controller.insight_provider.name}"
    )
    return controller
