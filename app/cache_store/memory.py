"""In-memory weather cache with TTL, intended for development and tests."""

import threading
import time
from typing import Optional

from app.cache_store.base import RawWeatherPayload, WeatherCacheStore, check_ttl, dump_payload, load_payload
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="cache_store/in_memory_weather_cache")


class InMemoryWeatherCache(WeatherCacheStore):
    """Thread-safe, TTL-aware in-memory store (dev/test)."""

    def __init__(self) -> None:
        logger.debug("Initializing InMemoryWeatherCache")
        # key -> (monotonic expiry, serialized payload)
        self._entries: dict[str, tuple[float, bytes]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[RawWeatherPayload]:
        """Return the payload, or None if missing/expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, raw = entry
            if expires_at <= time.monotonic():
                self._entries.pop(key, None)
                return None
        return load_payload(raw, key=key)

    def set(self, key: str, payload: RawWeatherPayload, ttl_seconds: int) -> None:
        """Store a payload with a fresh expiry."""
        ttl = check_ttl(ttl_seconds)
        raw = dump_payload(payload)
        with self._lock:
            self._entries[key] = (time.monotonic() + ttl, raw)

    def delete(self, key: str) -> None:
        """Remove an entry if it exists."""
        with self._lock:
            self._entries.pop(key, None)

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        self.clear()

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()
