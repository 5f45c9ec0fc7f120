"""
Valkey (Redis-compatible) client for shared session persistence.

Thin wrapper around redis-py, used when several client processes on one
machine (or a fleet of workers) should share a login.
Fail-fast: raises on connection failure, never returns fallback values.
"""

import json
import logging

import redis

logger = logging.getLogger(__name__)


class ValkeyClient:
    """
    JSON records in Valkey, one key per record.

    Usage:
        client = ValkeyClient("redis://localhost:6379/0")
        client.set_json("shortlink:auth", {"state": {...}, "version": 0})
        record = client.get_json("shortlink:auth")  # None if missing
    """

    def __init__(self, url: str, socket_timeout: float = 5.0):
        """
        Args:
            url: Connection URL, e.g. redis://localhost:6379/0
            socket_timeout: Seconds before a connect or command gives up

        Raises:
            redis.ConnectionError: Server unreachable
        """
        self._client = redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        self._client.ping()
        logger.info("Connected to Valkey for session storage")

    def ping(self) -> bool:
        self._client.ping()
        return True

    def get(self, key: str) -> str | None:
        """Raw value; None when the key is absent."""
        return self._client.get(key)

    def set(self, key: str, value: str) -> None:
        self._client.set(key, value)

    def delete(self, key: str) -> bool:
        """True if a record was removed."""
        return self._client.delete(key) > 0

    def set_json(self, key: str, value: dict) -> None:
        self.set(key, json.dumps(value))

    def get_json(self, key: str) -> dict | None:
        """
        Stored record decoded from JSON; None when the key is absent.

        Raises ValueError when the stored text is not JSON.
        """
        raw = self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in key '{key}': {e}") from e

    def close(self) -> None:
        self._client.close()
        logger.info("Valkey connection closed")
