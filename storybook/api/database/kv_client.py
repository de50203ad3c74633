"""Async client for the hosted KV store (Upstash / Vercel KV REST API).

Every command is a POST of a JSON array to the endpoint URL, e.g.
``["HSET", "story:123", "title", "Brave Bunny"]``, authorized with a bearer
token. The service answers ``{"result": ...}`` or ``{"error": "..."}``.

Only the commands the story store needs are exposed. There is no retry or
timeout handling beyond what httpx does on its own.
"""

import json
import logging
from typing import Any, Mapping, Optional

import httpx

from ..config import KVConfig

logger = logging.getLogger(__name__)


class KVCommandError(RuntimeError):
    """Raised when the KV service rejects a command."""


def _encode_arg(value: Any) -> str:
    # Non-string values are JSON-encoded, matching the hosted JS client
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _deserialize(value: Any) -> Any:
    """Decode a stored value as JSON if possible, else return it unchanged."""
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except ValueError:
        return value


class KVClient:
    """Client for the hash commands of the hosted KV REST API."""

    def __init__(self, config: KVConfig, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient()

    async def __aenter__(self) -> "KVClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this client created it."""
        if self._owns_http:
            await self._http.aclose()

    async def execute(self, *args: Any) -> Any:
        """Send a single command and return its result.

        Raises:
            KVCommandError: The service returned an error payload.
            httpx.HTTPStatusError: Non-2xx response without an error payload.
            httpx.RequestError: Transport failure.
        """
        command = [_encode_arg(arg) for arg in args]
        logger.debug(f"KV command {command[0]}", extra={"operation": command[0]})
        response = await self._http.post(
            self.config.url,
            json=command,
            headers={"Authorization": f"Bearer {self.config.token}"},
        )

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict) and payload.get("error"):
            raise KVCommandError(f"{command[0]} failed: {payload['error']}")
        response.raise_for_status()
        if not isinstance(payload, dict) or "result" not in payload:
            raise KVCommandError(f"{command[0]} returned an unexpected response")
        return payload["result"]

    async def hset(self, key: str, fields: Mapping[str, Any]) -> int:
        """Set hash fields; returns the number of fields that were added."""
        flat: list[Any] = []
        for field, value in fields.items():
            flat.extend((field, value))
        return await self.execute("HSET", key, *flat)

    async def hgetall(self, key: str) -> Optional[dict[str, Any]]:
        """Get all fields of a hash, or None if the key does not exist."""
        result = await self.execute("HGETALL", key)
        if not result:
            return None

        if isinstance(result, dict):
            data = dict(result)
        else:
            # Flat [field, value, field, value, ...] list
            data = dict(zip(result[::2], result[1::2]))

        if self.config.automatic_deserialization:
            data = {field: _deserialize(value) for field, value in data.items()}
        return data

    async def exists(self, key: str) -> int:
        """Return 1 if the key exists, else 0."""
        return await self.execute("EXISTS", key)

    async def delete(self, key: str) -> int:
        """Delete a key; returns the number of keys removed."""
        return await self.execute("DEL", key)

    async def keys(self, pattern: str) -> list[str]:
        """Return all keys matching a glob-style pattern."""
        result = await self.execute("KEYS", pattern)
        return list(result or [])
