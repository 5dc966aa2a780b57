"""Weather cache storage backends."""

from .base import RawWeatherPayload, WeatherCacheStore
from .memory import InMemoryWeatherCache
from .redis import RedisWeatherCache

__all__ = [
    "RawWeatherPayload",
    "WeatherCacheStore",
    "InMemoryWeatherCache",
    "RedisWeatherCache",
]
