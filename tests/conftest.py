"""
Shared fixtures: in-memory persistence, a deterministic booking flow and
a Flask test client. Nothing here touches the network.
"""

import random
from itertools import count

import pytest

from omnibus.cache import KeyValueClient
from omnibus.controller import ApplicationController
from omnibus.services import BookingFlow, BookingIdGenerator, BookingStore, InsightProvider
from omnibus.utils.config import reset_config


class FakeInsightProvider(InsightProvider):
    """Records calls and answers with a fixed pattern."""

    name = "fake"

    def __init__(self):
        self.calls = []

    def get_insight(self, city):
        self.calls.append(city)
        return f"Visit {city}!"


def sequential_ids():
    """Predictable booking IDs: BK00000001, BK00000002, ..."""
    counter = count(1)
    return BookingIdGenerator(token_factory=lambda: f"{next(counter):08X}")


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep tests independent of the developer's .env and Valkey."""
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("INSIGHT_PROVIDER", "disabled")
    monkeypatch.setenv("PAYMENT_DELAY_MS", "0")
    reset_config()
    yield
    reset_config()


@pytest.fixture
def kv_client():
    return KeyValueClient.in_memory()


@pytest.fixture
def store(kv_client):
    return BookingStore(kv_client)


@pytest.fixture
def flow(store):
    return BookingFlow(
        on_commit=store.append,
        bookings=lambda: store.bookings,
        payment_delay=0,
        id_generator=sequential_ids(),
        rng=random.Random(42),
    )


@pytest.fixture
def insight_provider():
    return FakeInsightProvider()


@pytest.fixture
def controller(store, flow, insight_provider):
    return ApplicationController(store, insight_provider=insight_provider, flow=flow)


@pytest.fixture
def app(controller):
    from omnibus.web import create_app

    return create_app('testing', controller=controller)


@pytest.fixture
def client(app):
    return app.test_client()
