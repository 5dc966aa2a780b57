"""Cache-aside weather lookups.

`WeatherLookupService.lookup` resolves a city in one linear pass:

1. derive the cache key,
2. probe the cache; a hit is transformed and returned with source=cache,
3. on a miss fetch from the provider, write the raw payload to the cache,
   then transform and return with source=api.

Classified failures from any step propagate unchanged after being logged with
the cache key and the stage that failed. A cache write failure after a
successful fetch fails the request. Concurrent misses for one key may both go
upstream; the second write simply overwrites the first with an equivalent
payload.
"""
from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

from app.cache_store import WeatherCacheStore
from app.data_sources import WeatherDataSource
from app.domain import DataSource, ResponseEnvelope, Status
from app.errors import InvalidInput, WeatherGatewayError
from app.keys import city_from_key, normalize_city_key
from app.transform import transform_weather
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="lookup_service")


@contextmanager
def _stage(name: str, key: str) -> Iterator[None]:
    """Log classified failures raised inside a pipeline stage, then re-raise."""
    try:
        yield
    except WeatherGatewayError as exc:
        logger.error(
            f"Weather lookup failed at {name} for city {city_from_key(key)!r} ({key}): {exc.message}",
            extra={"cache_key": key, "city": city_from_key(key), "stage": name, "kind": exc.kind.value},
        )
        raise


class WeatherLookupService:
    """Tie the cache store, provider and transformer together."""

    def __init__(self, cache: WeatherCacheStore, data_source: WeatherDataSource, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.cache = cache
        self.data_source = data_source
        self.ttl_seconds = ttl_seconds

    def lookup(self, city: str) -> ResponseEnvelope:
        """Return the weather envelope for `city`, from cache when possible."""
        if not city or not city.strip():
            raise InvalidInput("City name is required and must be a valid string.")
        key = normalize_city_key(city)

        with _stage("cache_get", key):
            cached = self.cache.get(key)

        if cached is not None:
            logger.info("Cache hit", extra={"cache_key": key})
            with _stage("transform", key):
                data = transform_weather(cached)
            return self._envelope(DataSource.CACHE, data)

        logger.info("Cache miss; fetching from provider", extra={"cache_key": key})
        with _stage("upstream_fetch", key):
            raw = self.data_source.fetch(city)
        with _stage("cache_set", key):
            self.cache.set(key, raw, self.ttl_seconds)
        with _stage("transform", key):
            data = transform_weather(raw)
        return self._envelope(DataSource.API, data)

    def invalidate(self, city: str) -> str:
        """Evict the cached payload for `city` and return the key removed."""
        if not city or not city.strip():
            raise InvalidInput("City name is required and must be a valid string.")
        key = normalize_city_key(city)
        with _stage("cache_delete", key):
            self.cache.delete(key)
        logger.info("Cache entry invalidated", extra={"cache_key": key})
        return key

    @staticmethod
    def _envelope(source: DataSource, data) -> ResponseEnvelope:
        return ResponseEnvelope(
            status=Status.SUCCESS,
            source=source,
            data=data,
            timestamp=datetime.now(timezone.utc),
        )
