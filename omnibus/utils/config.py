"""
Environment configuration loader with validation for the OmniBus application.
"""

import logging
import os
from decimal import Decimal
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

from ..cache.config import ValkeyConfig
from ..models.enums import SeatOccupancyMode

logger = logging.getLogger(__name__)


class OmnibusConfig(BaseModel):
    """Configuration model for the OmniBus application with validation."""

    # Booking store persistence
    store_backend: str = Field(
        default="valkey", description="Key-value backend: 'valkey' or 'memory'"
    )
    store_key: str = Field(
        default="omnibus_bookings", description="Key holding the persisted bookings blob"
    )

    # Valkey Configuration
    valkey_host: str = Field(default="localhost", description="Valkey server host")
    valkey_port: int = Field(
        default=6379, ge=1, le=65535, description="Valkey server port"
    )
    valkey_password: Optional[str] = Field(
        default=None, description="Valkey server password"
    )
    valkey_database: int = Field(
        default=0, ge=0, le=15, description="Valkey database number"
    )
    valkey_socket_timeout: float = Field(
        default=5.0, gt=0, description="Valkey socket timeout in seconds"
    )

    # Insight provider
    insight_provider: str = Field(
        default="gemini", description="Insight provider: 'gemini', 'ollama' or 'disabled'"
    )
    gemini_api_key: Optional[str] = Field(default=None, description="Google Generative Language API key")
    gemini_model: str = Field(default="gemini-2.5-flash", description="Gemini model name")
    ollama_url: str = Field(
        default="http://localhost:11434/api/generate", description="Ollama generate endpoint"
    )
    ollama_model: str = Field(default="llama3.2", description="Ollama model name")
    insight_timeout_seconds: float = Field(
        default=15.0, gt=0, description="Timeout for a single insight request"
    )
    insight_debounce_ms: int = Field(
        default=800, ge=0, description="Quiet period before an insight request is sent"
    )

    # Booking flow
    payment_delay_ms: int = Field(
        default=1000, ge=0, description="Simulated payment processing delay"
    )
    booking_fee: Decimal = Field(
        default=Decimal("2.00"), ge=0, description="Fixed booking fee added at payment"
    )
    seat_occupancy_mode: SeatOccupancyMode = Field(
        default=SeatOccupancyMode.SIMULATED, description="How occupied seats are determined"
    )
    simulated_occupancy_ratio: float = Field(
        default=0.3, ge=0.0, le=0.95, description="Share of seats marked occupied in simulated mode"
    )

    # Application
    omnibus_log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("omnibus_log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("store_backend", "insight_provider")
    @classmethod
    def normalize_choice(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("store_backend")
    @classmethod
    def validate_store_backend(cls, v: str) -> str:
        if v not in ("valkey", "memory"):
            raise ValueError("Store backend must be 'valkey' or 'memory'")
        return v

    @field_validator("insight_provider")
    @classmethod
    def validate_insight_provider(cls, v: str) -> str:
        if v not in ("gemini", "ollama", "disabled"):
            raise ValueError("Insight provider must be 'gemini', 'ollama' or 'disabled'")
        return v

    @property
    def payment_delay_seconds(self) -> float:
        return self.payment_delay_ms / 1000

    @property
    def insight_debounce_seconds(self) -> float:
        return self.insight_debounce_ms / 1000

    def valkey_config(self) -> ValkeyConfig:
        """Build the Valkey connection settings for the booking store."""
        return ValkeyConfig(
            host=self.valkey_host,
            port=self.valkey_port,
            password=self.valkey_password,
            database=self.valkey_database,
            socket_timeout=self.valkey_socket_timeout,
            socket_connect_timeout=self.valkey_socket_timeout,
        )


def load_config(env_file: Optional[str] = None) -> OmnibusConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Optional path to .env file. If None, looks for .env in current directory.

    Returns:
        OmnibusConfig: Validated configuration object

    Raises:
        ValueError: If configuration is invalid
    """
    if env_file is None:
        env_file = ".env"

    if os.path.exists(env_file):
        load_dotenv(env_file)

    config_data: Dict[str, Any] = {
        "store_backend": os.getenv("STORE_BACKEND", "valkey"),
        "store_key": os.getenv("STORE_KEY", "omnibus_bookings"),
        "valkey_host": os.getenv("VALKEY_HOST", "localhost"),
        "valkey_port": os.getenv("VALKEY_PORT", "6379"),
        "valkey_password": os.getenv("VALKEY_PASSWORD") or None,
        "valkey_database": os.getenv("VALKEY_DATABASE", "0"),
        "valkey_socket_timeout": os.getenv("VALKEY_SOCKET_TIMEOUT", "5.0"),
        "insight_provider": os.getenv("INSIGHT_PROVIDER", "gemini"),
        "gemini_api_key": os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or None,
        "gemini_model": os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
        "ollama_url": os.getenv("OLLAMA_URL", "http://localhost:11434/api/generate"),
        "ollama_model": os.getenv("OLLAMA_MODEL", "llama3.2"),
        "insight_timeout_seconds": os.getenv("INSIGHT_TIMEOUT_SECONDS", "15"),
        "insight_debounce_ms": os.getenv("INSIGHT_DEBOUNCE_MS", "800"),
        "payment_delay_ms": os.getenv("PAYMENT_DELAY_MS", "1000"),
        "booking_fee": os.getenv("BOOKING_FEE", "2.00"),
        "seat_occupancy_mode": os.getenv("SEAT_OCCUPANCY_MODE", "simulated").lower(),
        "simulated_occupancy_ratio": os.getenv("SIMULATED_OCCUPANCY_RATIO", "0.3"),
        "omnibus_log_level": os.getenv("OMNIBUS_LOG_LEVEL", "INFO"),
    }

    try:
        return OmnibusConfig(**config_data)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")


# Global configuration instance
_config: Optional[OmnibusConfig] = None


def get_config() -> OmnibusConfig:
    """
    Get the global configuration instance, loading it if necessary.

    Returns:
        OmnibusConfig: The global configuration object
    """
    global _config
    if _config is None:
        _config = load_config()
        logger.debug(
            "Configuration loaded: store=%s insight=%s occupancy=%s",
            _config.store_backend,
            _config.insight_provider,
            _config.seat_occupancy_mode.value,
        )
    return _config


def reset_config() -> None:
    """Drop the cached global configuration (used by tests and the CLI)."""
    global _config
    _config = None
