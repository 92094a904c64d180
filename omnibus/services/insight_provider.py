"""
Destination insights: short generated marketing blurbs for a city.

Providers never raise; every failure turns into a fixed fallback sentence.
``InsightPanel`` debounces requests while the user is still changing the
destination and discards results for destinations that are no longer shown.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

import requests

logger = logging.getLogger(__name__)

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
UNAVAILABLE_MESSAGE = "AI insights unavailable (missing API key)."


def build_prompt(city: str) -> str:
    return (
        f"Write a very short, catchy 2-sentence marketing blurb about why someone "
        f"should travel to {city} by bus right now. Keep it under 40 words."
    )


def empty_response_text(city: str) -> str:
    return f"Discover the beauty of {city}!"


ERROR_TEXT_PREFIX = "Enjoy a comfortable ride to "


def error_text(city: str) -> str:
    return f"{ERROR_TEXT_PREFIX}{city}."


def is_fallback_text(text: str) -> bool:
    """True for the texts returned instead of a generated blurb (error or no provider)."""
    return text == UNAVAILABLE_MESSAGE or text.startswith(ERROR_TEXT_PREFIX)


class InsightProvider(ABC):
    """Text generator for destination blurbs."""

    name = "base"

    @abstractmethod
    def get_insight(self, city: str) -> str:
        """Return a blurb for ``city``. Must not raise."""


class DisabledInsightProvider(InsightProvider):
    """Provider used when no generation backend is configured."""

    name = "disabled"

    def __init__(self, message: str = UNAVAILABLE_MESSAGE):
        self.message = message

    def get_insight(self, city: str) -> str:
        return self.message


class GeminiInsightProvider(InsightProvider):
    """
    Google Generative Language API provider.

    Uses the REST ``generateContent`` endpoint and reads the first text part
    of the first candidate.
    """

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.session = session or requests.Session()

    def get_insight(self, city: str) -> str:
        payload = {"contents": [{"parts": [{"text": build_prompt(city)}]}]}

        try:
            response = self.session.post(
                GEMINI_API_URL.format(model=self.model),
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            result = response.json()
            text = result["candidates"][0]["content"]["parts"][0].get("text", "")
        except requests.exceptions.RequestException as e:
            logger.error(f"Gemini request failed for {city}: {e}")
            return error_text(city)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Unexpected Gemini response for {city}: {e}")
            return error_text(city)

        text = (text or "").strip()
        return text or empty_response_text(city)


class OllamaInsightProvider(InsightProvider):
    """Local Ollama ``/api/generate`` provider."""

    name = "ollama"

    def __init__(
        self,
        url: str = "http://localhost:11434/api/generate",
        model: str = "llama3.2",
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.model = model
        self.timeout = timeout
        self.session = session or requests.Session()

    def get_insight(self, city: str) -> str:
        payload = {
            "model": self.model,
            "prompt": build_prompt(city),
            "stream": False,
            "options": {"temperature": 0.7},
        }

        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            text = response.json().get("response", "")
        except requests.exceptions.RequestException as e:
            logger.error(f"Error connecting to Ollama for {city}: {e}")
            return error_text(city)
        except (AttributeError, ValueError) as e:
            logger.error(f"Unexpected Ollama response for {city}: {e}")
            return error_text(city)

        text = (text or "").strip()
        return text or empty_response_text(city)


def build_insight_provider(config) -> InsightProvider:
    """
    Select the insight provider from configuration.

    Args:
        config: OmnibusConfig instance

    Returns:
        InsightProvider: Gemini, Ollama, or the disabled provider
    """
    if config.insight_provider == "ollama":
        logger.info(f"Insights from Ollama model {config.ollama_model}")
        return OllamaInsightProvider(
            url=config.ollama_url,
            model=config.ollama_model,
            timeout=config.insight_timeout_seconds,
        )

    if config.insight_provider == "gemini":
        if not config.gemini_api_key:
            logger.warning("GEMINI_API_KEY is not set, destination insights are disabled")
            return DisabledInsightProvider()
        logger.info(f"Insights from Gemini model {config.gemini_model}")
        return GeminiInsightProvider(
            api_key=config.gemini_api_key,
            model=config.gemini_model,
            timeout=config.insight_timeout_seconds,
        )

    return DisabledInsightProvider()


class InsightPanel:
    """
    Debounced, cancellable insight display state.

    Each ``request`` supersedes the previous one: the pending task is
    cancelled, and a provider call that is already running in a worker
    thread has its result dropped when it finishes.
    """

    def __init__(self, provider: InsightProvider, debounce: float = 0.8):
        self.provider = provider
        self.debounce = debounce
        self.destination: Optional[str] = None
        self.text: Optional[str] = None
        self.loading = False
        self._task: Optional[asyncio.Task] = None
        self._generation = 0

    def request(self, destination: str) -> asyncio.Task:
        """
        Ask for a blurb about ``destination``. Must be called from a running loop.

        Returns:
            asyncio.Task: The task that will fill ``text``
        """
        if self._task is not None and not self._task.done():
            self._task.cancel()

        self._generation += 1
        self.destination = destination
        self.loading = True
        self._task = asyncio.get_running_loop().create_task(self._fetch(destination, self._generation))
        return self._task

    async def _fetch(self, destination: str, generation: int) -> Optional[str]:
        try:
            if self.debounce > 0:
                await asyncio.sleep(self.debounce)
            text = await asyncio.to_thread(self.provider.get_insight, destination)
        except asyncio.CancelledError:
            logger.debug(f"Insight request for {destination} superseded")
            raise

        if generation != self._generation:
            logger.debug(f"Dropping stale insight for {destination}")
            return None

        self.text = text
        self.loading = False
        return text

    async def wait(self) -> Optional[str]:
        """Await the current request and return the displayed text."""
        if self._task is None:
            return self.text
        await asyncio.wait({self._task})
        return self.text

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self.loading = False
