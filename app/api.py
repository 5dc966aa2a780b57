"""HTTP API for city weather lookups."""

import re

from fastapi import APIRouter, Depends, Request

from app.domain import ErrorResponse, InvalidationResponse, ResponseEnvelope
from app.errors import InvalidInput
from app.lookup_service import WeatherLookupService
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="app/api")

CITY_MIN_CHARS = 2
CITY_MAX_CHARS = 25
# Letters (including Latin-1/Latin Extended diacritics), whitespace and a few separators.
_CITY_PATTERN = re.compile(r"^[a-zA-Z\u0080-\u024F\s/\-)(`.\"']+$")

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid city name"},
    500: {"model": ErrorResponse, "description": "Upstream, cache or data failure"},
}


def validate_city(city: str) -> str:
    """Return the trimmed city, or raise InvalidInput listing every rule it breaks."""
    trimmed = (city or "").strip()
    details = []
    if not trimmed:
        details.append({"field": "city", "msg": "City name is required"})
    elif not CITY_MIN_CHARS <= len(trimmed) <= CITY_MAX_CHARS:
        details.append({
            "field": "city",
            "msg": f"City name must be between {CITY_MIN_CHARS}-{CITY_MAX_CHARS} characters",
        })
    if trimmed and not _CITY_PATTERN.match(trimmed):
        details.append({"field": "city", "msg": "City name contains invalid characters"})
    if details:
        logger.debug("Rejected city parameter", extra={"details": details})
        raise InvalidInput(details[0]["msg"], details=details)
    return trimmed


def get_lookup_service(request: Request) -> WeatherLookupService:
    """Return the lookup service built at startup."""
    return request.app.state.resources.lookup_service


router = APIRouter(responses=_ERROR_RESPONSES)


@router.get("/weather/{city}", response_model=ResponseEnvelope)
def get_weather(city: str, service: WeatherLookupService = Depends(get_lookup_service)):
    """Return today's weather for a city, from cache when available."""
    city = validate_city(city)
    envelope = service.lookup(city)
    logger.info(f"Served weather for {city!r} from {envelope.source.value}")
    return envelope


@router.delete("/weather/{city}", response_model=InvalidationResponse)
def invalidate_weather(city: str, service: WeatherLookupService = Depends(get_lookup_service)):
    """Evict a city's cached payload so the next lookup goes upstream."""
    city = validate_city(city)
    key = service.invalidate(city)
    return InvalidationResponse(key=key)
