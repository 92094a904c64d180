"""
Insight provider tests.

HTTP calls are mocked through the provider's requests session.
"""

import asyncio
import time
from unittest.mock import MagicMock

import pytest
import requests

from omnibus.services.insight_provider import (
    DisabledInsightProvider,
    GeminiInsightProvider,
    InsightPanel,
    InsightProvider,
    OllamaInsightProvider,
    UNAVAILABLE_MESSAGE,
    build_insight_provider,
)
from omnibus.utils.config import OmnibusConfig


def json_response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def gemini_payload(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class TestGeminiProvider:
    """Test the Gemini REST provider."""

    def test_returns_generated_text(self):
        session = MagicMock()
        session.post.return_value = json_response(gemini_payload("  Lyon awaits. Go now!  "))
        provider = GeminiInsightProvider(api_key="k", model="m", session=session)

        assert provider.get_insight("Lyon") == "Lyon awaits. Go now!"

        url = session.post.call_args.args[0]
        kwargs = session.post.call_args.kwargs
        assert url.endswith("/models/m:generateContent")
        assert kwargs["params"] == {"key": "k"}
        prompt = kwargs["json"]["contents"][0]["parts"][0]["text"]
        assert "travel to Lyon by bus" in prompt
        assert "under 40 words" in prompt

    def test_empty_text_fallback(self):
        session = MagicMock()
        session.post.return_value = json_response(gemini_payload(""))
        provider = GeminiInsightProvider(api_key="k", session=session)
        assert provider.get_insight("Nantes") == "Discover the beauty of Nantes!"

    def test_request_error_fallback(self):
        session = MagicMock()
        session.post.side_effect = requests.exceptions.ConnectionError("offline")
        provider = GeminiInsightProvider(api_key="k", session=session)
        assert provider.get_insight("Lille") == "Enjoy a comfortable ride to Lille."

    def test_malformed_response_fallback(self):
        session = MagicMock()
        session.post.return_value = json_response({"candidates": []})
        provider = GeminiInsightProvider(api_key="k", session=session)
        assert provider.get_insight("Lille") == "Enjoy a comfortable ride to Lille."


class TestOllamaProvider:
    """Test the local Ollama provider."""

    def test_returns_response_text(self):
        session = MagicMock()
        session.post.return_value = json_response({"response": "Marseille sparkles."})
        provider = OllamaInsightProvider(url="http://ollama/api/generate", model="llama3.2", session=session)

        assert provider.get_insight("Marseille") == "Marseille sparkles."
        payload = session.post.call_args.kwargs["json"]
        assert payload["model"] == "llama3.2"
        assert payload["stream"] is False

    def test_http_error_fallback(self):
        session = MagicMock()
        response = json_response({})
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("500")
        session.post.return_value = response
        provider = OllamaInsightProvider(session=session)
        assert provider.get_insight("Paris") == "Enjoy a comfortable ride to Paris."


class TestBuildProvider:
    """Test provider selection from configuration."""

    def test_gemini_without_key_is_disabled(self):
        provider = build_insight_provider(OmnibusConfig(insight_provider="gemini", gemini_api_key=None))
        assert isinstance(provider, DisabledInsightProvider)
        assert provider.get_insight("Lyon") == UNAVAILABLE_MESSAGE

    def test_gemini_with_key(self):
        provider = build_insight_provider(OmnibusConfig(insight_provider="gemini", gemini_api_key="abc"))
        assert isinstance(provider, GeminiInsightProvider)

    def test_ollama(self):
        provider = build_insight_provider(OmnibusConfig(insight_provider="ollama", ollama_model="mistral"))
        assert isinstance(provider, OllamaInsightProvider)
        assert provider.model == "mistral"

    def test_disabled(self):
        provider = build_insight_provider(OmnibusConfig(insight_provider="disabled", gemini_api_key="abc"))
        assert isinstance(provider, DisabledInsightProvider)


class SlowProvider(InsightProvider):
    """Blocks per city for a configurable time."""

    name = "slow"

    def __init__(self, delays=None):
        self.delays = delays or {}
        self.calls = []

    def get_insight(self, city):
        self.calls.append(city)
        time.sleep(self.delays.get(city, 0))
        return f"Visit {city}!"


class TestInsightPanel:
    """Test debouncing and stale-result handling."""

    @pytest.mark.asyncio
    async def test_single_request(self):
        panel = InsightPanel(SlowProvider(), debounce=0.01)
        panel.request("Lyon")
        assert panel.loading

        assert await panel.wait() == "Visit Lyon!"
        assert not panel.loading
        assert panel.destination == "Lyon"

    @pytest.mark.asyncio
    async def test_rapid_changes_only_fetch_last(self):
        provider = SlowProvider()
        panel = InsightPanel(provider, debounce=0.05)

        for city in ("Lyon", "Bordeaux", "Nantes"):
            panel.request(city)
            await asyncio.sleep(0.01)

        assert await panel.wait() == "Visit Nantes!"
        assert provider.calls == ["Nantes"]

    @pytest.mark.asyncio
    async def test_superseded_result_is_dropped(self):
        provider = SlowProvider(delays={"Paris": 0.2})
        panel = InsightPanel(provider, debounce=0)

        panel.request("Paris")
        await asyncio.sleep(0.05)
        panel.request("Lyon")

        assert await panel.wait() == "Visit Lyon!"
        await asyncio.sleep(0.3)
        assert panel.text == "Visit Lyon!"
        assert panel.destination == "Lyon"

    @pytest.mark.asyncio
    async def test_wait_without_request(self):
        panel = InsightPanel(SlowProvider())
        assert await panel.wait() is None

    @pytest.mark.asyncio
    async def test_cancel(self):
        provider = SlowProvider()
        panel = InsightPanel(provider, debounce=0.05)
        panel.request("Lyon")
        panel.cancel()

        assert await panel.wait() is None
        assert provider.calls == []
        assert not panel.loading
