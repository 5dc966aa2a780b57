"""Shared protocol and serialization for weather cache backends."""

import json
from typing import Any, Optional, Protocol

from app.errors import CacheUnavailable

RawWeatherPayload = dict[str, Any]


class WeatherCacheStore(Protocol):
    """Protocol for TTL-capable stores holding raw provider payloads."""

    def get(self, key: str) -> Optional[RawWeatherPayload]:
        """Return the payload for `key`, or None if absent or expired."""

    def set(self, key: str, payload: RawWeatherPayload, ttl_seconds: int) -> None:
        """Store `payload` under `key`, expiring after `ttl_seconds`."""

    def delete(self, key: str) -> None:
        """Remove `key` without raising if it is absent."""

    def ping(self) -> bool:
        """Return True if the backing store answers."""

    def close(self) -> None:
        """Release any connections held by the store."""


def dump_payload(payload: RawWeatherPayload) -> bytes:
    """Serialize a raw payload to the JSON bytes kept in the store."""
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")


def load_payload(raw: bytes | str, *, key: str) -> RawWeatherPayload:
    """Deserialize stored bytes, raising CacheUnavailable on corrupt entries."""
    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        data = json.loads(raw)
    except (UnicodeDecodeError, ValueError) as exc:
        raise CacheUnavailable(f"Corrupt cache entry for key: {key}", key=key) from exc
    if not isinstance(data, dict):
        raise CacheUnavailable(f"Corrupt cache entry for key: {key}", key=key)
    return data


def check_ttl(ttl_seconds: int) -> int:
    """Reject TTLs a store cannot honour."""
    if ttl_seconds <= 0:
        raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
    return int(ttl_seconds)
