"""Stable external schemas for weather lookups.

`NormalizedWeather` is the public contract derived from a provider payload;
`ResponseEnvelope` wraps it with status/source metadata. Nothing in this module
talks to the cache or the provider.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt

# Provider numbers pass through as sent: ints stay ints, strings are rejected.
Number = Union[StrictInt, StrictFloat]


class _StrictBaseModel(BaseModel):
    """Base model with strict extra handling."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class Status(str, Enum):
    """Outcome marker carried by every envelope."""
    SUCCESS = "success"
    FAIL = "fail"


class DataSource(str, Enum):
    """Where the data in an envelope came from."""
    CACHE = "cache"
    API = "api"


class NormalizedWeather(_StrictBaseModel):
    """Representative-day weather for one resolved location."""
    city: str
    latitude: Number
    longitude: Number
    timezone: str
    date: Optional[str] = None
    temperature: Optional[Number] = None
    description: Optional[str] = None
    humidity: Optional[Number] = None
    wind_speed: Optional[Number] = Field(default=None, alias="windSpeed")


class ResponseEnvelope(_StrictBaseModel):
    """Successful lookup response."""
    status: Status = Status.SUCCESS
    source: DataSource
    data: NormalizedWeather
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Failure body returned for classified errors."""
    error: str
    message: str
    status: Optional[Status] = None
    details: Optional[List[Any]] = None


class InvalidationResponse(BaseModel):
    """Result of evicting a city from the cache."""
    status: Status = Status.SUCCESS
    key: str
