"""
Key-value client with graceful degradation.

The booking store keeps its whole state under one key. This client talks to
Valkey when it is reachable and falls back to a process-local dictionary
otherwise, so persistence problems never reach the caller.
"""

import logging
from typing import Optional, Dict, Any

import valkey
from valkey.exceptions import ConnectionError, TimeoutError

from .config import ValkeyConfig, ValkeyConnectionError

logger = logging.getLogger(__name__)


class KeyValueClient:
    """
    String key-value client backed by Valkey with an in-memory fallback.

    Features:
    - Lazy connection with a ping test
    - Automatic fallback to local storage on connection or timeout errors
    - Operation statistics for the health endpoint
    """

    def __init__(
        self,
        config: Optional[ValkeyConfig] = None,
        enable_fallback: bool = True,
        client: Optional[Any] = None,
    ):
        """
        Initialize the key-value client.

        Args:
            config: ValkeyConfig instance, defaults to environment-based config
            enable_fallback: Degrade to local storage instead of raising
            client: Pre-built Valkey-compatible client (used by tests)
        """
        self.config = config or ValkeyConfig.from_env()
        self.enable_fallback = enable_fallback
        self._client = client
        self._attempted = client is not None
        self._degraded = False
        self._fallback: Dict[str, str] = {}
        self._stats = {
            "gets": 0,
            "sets": 0,
            "deletes": 0,
            "errors": 0,
            "fallback_operations": 0,
        }

    @classmethod
    def in_memory(cls) -> "KeyValueClient":
        """Build a client that never touches the network."""
        instance = cls(enable_fallback=True)
        instance._attempted = True
        instance._degraded = True
        return instance

    def connect(self) -> bool:
        """
        Connect to Valkey and verify the connection with a ping.

        Returns:
            bool: True if Valkey is in use, False if running on the fallback

        Raises:
            ValkeyConnectionError: If the connection fails and fallback is disabled
        """
        if self._attempted:
            return not self._degraded

        self._attempted = True
        try:
            self._client = valkey.Valkey(**self.config.to_connection_kwargs())
            self._client.ping()
            logger.info(f"Connected to Valkey: {self.config}")
            return True
        except (ConnectionError, TimeoutError, OSError) as e:
            self._handle_failure(e)
            return False

    def _handle_failure(self, error: Exception) -> None:
        self._stats["errors"] += 1
        if not self.enable_fallback:
            raise ValkeyConnectionError(f"Valkey unavailable at {self.config.host}:{self.config.port}: {error}") from error
        if not self._degraded:
            logger.warning(f"Valkey unavailable ({error}); keeping bookings in process memory")
        self._degraded = True

    @property
    def is_degraded(self) -> bool:
        """True when operations are served from local storage."""
        return self._degraded

    def get(self, key: str) -> Optional[str]:
        """
        Get a string value.

        Args:
            key: Storage key

        Returns:
            Stored value or None if the key is absent
        """
        self.connect()
        self._stats["gets"] += 1
        if not self._degraded:
            try:
                return self._client.get(key)
            except (ConnectionError, TimeoutError) as e:
                self._handle_failure(e)
        self._stats["fallback_operations"] += 1
        return self._fallback.get(key)

    def set(self, key: str, value: str) -> None:
        """
        Store a string value without expiry.

        Args:
            key: Storage key
            value: Serialized value
        """
        self.connect()
        self._stats["sets"] += 1
        if not self._degraded:
            try:
                self._client.set(key, value)
                return
            except (ConnectionError, TimeoutError) as e:
                self._handle_failure(e)
        self._stats["fallback_operations"] += 1
        self._fallback[key] = value

    def delete(self, key: str) -> bool:
        """
        Delete a key.

        Returns:
            True if the key existed, False otherwise
        """
        self.connect()
        self._stats["deletes"] += 1
        if not self._degraded:
            try:
                return bool(self._client.delete(key))
            except (ConnectionError, TimeoutError) as e:
                self._handle_failure(e)
        self._stats["fallback_operations"] += 1
        return self._fallback.pop(key, None) is not None

    def get_stats(self) -> Dict[str, Any]:
        """Operation counters plus the active backend."""
        return {
            **self._stats,
            "backend": "memory" if self._degraded else "valkey",
            "config": str(self.config),
        }


def build_kv_client(backend: str, config: Optional[ValkeyConfig] = None) -> KeyValueClient:
    """
    Create the key-value client for a configured backend.

    Args:
        backend: 'valkey' or 'memory'
        config: Valkey settings, used only for the 'valkey' backend
    """
    if backend == "memory":
        return KeyValueClient.in_memory()
    return KeyValueClient(config=config)
