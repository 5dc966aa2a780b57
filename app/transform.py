"""Map raw provider payloads onto the `NormalizedWeather` contract."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import ValidationError

from app.domain import NormalizedWeather
from app.errors import MalformedUpstreamData
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="transform")

REQUIRED_LOCATION_FIELDS = ("resolvedAddress", "latitude", "longitude", "timezone")


def transform_weather(raw: Optional[Mapping[str, Any]]) -> NormalizedWeather:
    """Build the normalized view of `raw` from its first ("today") forecast day.

    Raises MalformedUpstreamData when the payload is absent, has no forecast
    days, lacks a location field, or carries values of the wrong type. Units are
    passed through as-is; the upstream request already asks for metric.
    """
    if not raw or not isinstance(raw, Mapping):
        raise MalformedUpstreamData()

    days = raw.get("days")
    if not days or not isinstance(days, list) or not isinstance(days[0], Mapping):
        raise MalformedUpstreamData()

    missing = [field for field in REQUIRED_LOCATION_FIELDS if raw.get(field) is None]
    if missing:
        raise MalformedUpstreamData(f"Weather data missing fields: {', '.join(missing)}")

    day = days[0]
    try:
        return NormalizedWeather(
            city=raw["resolvedAddress"],
            latitude=raw["latitude"],
            longitude=raw["longitude"],
            timezone=raw["timezone"],
            date=day.get("datetime"),
            temperature=day.get("temp"),
            description=day.get("conditions"),
            humidity=day.get("humidity"),
            wind_speed=day.get("windspeed"),
        )
    except ValidationError as exc:
        logger.warning("Rejected weather payload", extra={"errors": exc.error_count()})
        raise MalformedUpstreamData("Weather data has invalid field values") from exc
