"""Upstream weather providers."""

from .base import WeatherDataSource
from .visual_crossing_client import VisualCrossingClient

__all__ = [
    "WeatherDataSource",
    "VisualCrossingClient",
]
