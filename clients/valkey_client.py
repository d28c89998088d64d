"""
Valkey (Redis-compatible) backend for the invoice key-value store.

Thin wrapper around redis-py exposing the same surface as LocalStore.
Keys are namespaced so several dashboards can share one server.
Fail-fast: connection problems surface as StorageError.
"""

import json
import logging

import redis

from clients.errors import StorageError

logger = logging.getLogger(__name__)


class ValkeyStore:
    """
    Key-value store backed by Valkey/Redis.

    Usage:
        store = ValkeyStore("redis://localhost:6379/0")
        store.set_json("qistonpe-invoices", [...])
        invoices = store.get_json("qistonpe-invoices")
    """

    def __init__(self, url: str, namespace: str = "invoice-dashboard", client: redis.Redis | None = None):
        """
        Args:
            url: Redis-compatible connection URL (e.g., redis://localhost:6379/0)
            namespace: Prefix prepended to every key
            client: Pre-built redis client (tests inject a mock here)

        Raises:
            StorageError: If the server is unreachable
        """
        self.namespace = namespace
        self._client = client if client is not None else redis.from_url(url, decode_responses=True)
        try:
            self._client.ping()
        except redis.RedisError as e:
            raise StorageError(f"Valkey unreachable: {e}") from e
        logger.info("ValkeyStore connected (namespace=%s)", namespace)

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> str | None:
        """Get value by key. Returns None if key doesn't exist."""
        try:
            return self._client.get(self._key(key))
        except redis.RedisError as e:
            raise StorageError(f"Valkey read failed for '{key}': {e}") from e

    def set(self, key: str, value: str) -> None:
        """Set key to value (no expiry; invoices are durable)."""
        try:
            self._client.set(self._key(key), value)
        except redis.RedisError as e:
            raise StorageError(f"Valkey write failed for '{key}': {e}") from e

    def delete(self, key: str) -> bool:
        """Delete key. Returns True if it existed."""
        try:
            return self._client.delete(self._key(key)) > 0
        except redis.RedisError as e:
            raise StorageError(f"Valkey delete failed for '{key}': {e}") from e

    def exists(self, key: str) -> bool:
        """Check if key exists."""
        try:
            return self._client.exists(self._key(key)) > 0
        except redis.RedisError as e:
            raise StorageError(f"Valkey read failed for '{key}': {e}") from e

    def set_json(self, key: str, value: dict | list) -> None:
        """Set key to JSON-serialized value."""
        self.set(key, json.dumps(value))

    def get_json(self, key: str) -> dict | list | None:
        """
        Get and deserialize JSON value.

        Returns None if key doesn't exist.
        Raises StorageError if value is not valid JSON.
        """
        value = self.get(key)
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise StorageError(f"Invalid JSON in key '{key}': {e}") from e

    def close(self) -> None:
        """Close the connection."""
        self._client.close()
        logger.info("ValkeyStore closed")
