"""Configuration and logging helpers."""

from .config import OmnibusConfig, load_config, get_config, reset_config
from .log import configure_logging

__all__ = [
    "OmnibusConfig",
    "load_config",
    "get_config",
    "reset_config",
    "configure_logging",
]
