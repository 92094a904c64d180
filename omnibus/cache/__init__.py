"""
Persistence layer for the OmniBus booking store.

This module contains the Valkey configuration and the key-value client that
holds the serialized bookings blob.
"""

from .config import ValkeyConfig, ValkeyConnectionError
from .client import KeyValueClient, build_kv_client

__all__ = [
    "ValkeyConfig",
    "ValkeyConnectionError",
    "KeyValueClient",
    "build_kv_client",
]
