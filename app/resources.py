"""Process-scoped handles (cache connection, HTTP session) and their lifecycle."""
from __future__ import annotations

from dataclasses import dataclass

import redis
from redis.exceptions import RedisError

from app import config
from app.cache_store import InMemoryWeatherCache, RedisWeatherCache, WeatherCacheStore
from app.data_sources import VisualCrossingClient, WeatherDataSource
from app.lookup_service import WeatherLookupService
from utils.logging_utils import get_tagged_logger, mask_url_secrets

logger = get_tagged_logger(__name__, tag="resources")


@dataclass
class GatewayResources:
    """Everything a request needs, built once at startup."""
    cache: WeatherCacheStore
    data_source: WeatherDataSource
    lookup_service: WeatherLookupService

    def close(self) -> None:
        """Release the cache connection and HTTP session."""
        logger.info("Closing gateway resources")
        self.data_source.close()
        self.cache.close()


def build_cache_store(settings: config.Settings | None = None) -> WeatherCacheStore:
    """Initialize the cache backend based on configuration."""
    settings = settings or config.settings
    redis_url = settings.cache_redis_url
    if not redis_url:
        logger.info("No Redis URL configured; using InMemoryWeatherCache")
        return InMemoryWeatherCache()

    masked = mask_url_secrets(redis_url)
    client = redis.Redis.from_url(
        redis_url,
        socket_timeout=settings.cache_socket_timeout_seconds,
        socket_connect_timeout=settings.cache_socket_timeout_seconds,
    )
    try:
        client.ping()
    except (RedisError, OSError) as exc:
        logger.warning(
            "Falling back to InMemoryWeatherCache (Redis unavailable)",
            extra={"redis_url": masked, "error": str(exc)},
        )
        client.close()
        return InMemoryWeatherCache()
    logger.info("Using RedisWeatherCache", extra={"redis_url": masked})
    return RedisWeatherCache(client)


def build_data_source(settings: config.Settings | None = None) -> WeatherDataSource:
    """Instantiate the upstream provider client."""
    settings = settings or config.settings
    if not settings.api_key:
        logger.warning("WEATHER_API_KEY is not set; upstream lookups will fail")
    return VisualCrossingClient(
        settings.upstream_base_url,
        settings.api_key,
        timeout_seconds=settings.upstream_timeout_seconds,
    )


def build_resources(settings: config.Settings | None = None) -> GatewayResources:
    """Build the cache, provider client and lookup service for this process."""
    settings = settings or config.settings
    cache = build_cache_store(settings)
    data_source = build_data_source(settings)
    service = WeatherLookupService(cache, data_source, ttl_seconds=settings.cache_ttl_seconds)
    return GatewayResources(cache=cache, data_source=data_source, lookup_service=service)
