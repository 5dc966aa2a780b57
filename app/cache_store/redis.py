"""Redis-backed weather cache with per-key expiry."""

from typing import Optional

from redis.exceptions import RedisError

from app.cache_store.base import RawWeatherPayload, WeatherCacheStore, check_ttl, dump_payload, load_payload
from app.errors import CacheUnavailable
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="cache_store/redis_weather_cache")

# redis-py surfaces most socket faults as RedisError, but a few paths leak OSError
_STORE_ERRORS = (RedisError, OSError)


class RedisWeatherCache(WeatherCacheStore):
    """Raw provider payloads stored as JSON strings via GET/SETEX/DEL.

    The client is a long-lived handle owned by the caller; this class never
    creates or reconnects it.
    """

    def __init__(self, client) -> None:
        """Initialize with a redis-py client (or anything with the same surface)."""
        logger.debug("Initializing RedisWeatherCache")
        self.client = client

    def get(self, key: str) -> Optional[RawWeatherPayload]:
        """Fetch and decode a payload, or None if the key is absent."""
        try:
            raw = self.client.get(key)
        except _STORE_ERRORS as exc:
            logger.error("Cache get failed", extra={"cache_key": key, "error": str(exc)})
            raise CacheUnavailable(f"Failed to get cache for key: {key}", key=key) from exc
        if raw is None:
            return None
        try:
            return load_payload(raw, key=key)
        except CacheUnavailable:
            logger.error("Corrupt cache entry", extra={"cache_key": key})
            raise

    def set(self, key: str, payload: RawWeatherPayload, ttl_seconds: int) -> None:
        """Serialize and store a payload with an expiry."""
        ttl = check_ttl(ttl_seconds)
        try:
            self.client.setex(key, ttl, dump_payload(payload))
        except _STORE_ERRORS as exc:
            logger.error("Cache set failed", extra={"cache_key": key, "error": str(exc)})
            raise CacheUnavailable(f"Failed to set cache for key: {key}", key=key) from exc

    def delete(self, key: str) -> None:
        """Delete a key; deleting an absent key is not an error."""
        try:
            self.client.delete(key)
        except _STORE_ERRORS as exc:
            logger.error("Cache delete failed", extra={"cache_key": key, "error": str(exc)})
            raise CacheUnavailable(f"Failed to delete cache for key: {key}", key=key) from exc

    def ping(self) -> bool:
        """Return True if Redis answers PING."""
        try:
            return bool(self.client.ping())
        except _STORE_ERRORS as exc:
            logger.warning("Cache ping failed", extra={"error": str(exc)})
            return False

    def close(self) -> None:
        """Close the underlying connection pool."""
        try:
            self.client.close()
        except _STORE_ERRORS as exc:
            logger.warning("Failed to close Redis client", extra={"error": str(exc)})
