"""Client for the Visual Crossing timeline weather API."""
from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from app.errors import MalformedUpstreamData, UpstreamClientError, UpstreamHTTPError, UpstreamUnreachable
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="visual_crossing_client")

UNIT_GROUP = "metric"
UNKNOWN_PROVIDER_ERROR = "Unknown error"
_MAX_PROVIDER_MESSAGE_CHARS = 200


def _provider_message(resp: requests.Response) -> str:
    """Pull a human-readable error out of a failed provider response."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    text = (resp.text or "").strip()
    if text:
        return text[:_MAX_PROVIDER_MESSAGE_CHARS]
    return UNKNOWN_PROVIDER_ERROR


class VisualCrossingClient:
    """Fetch raw timeline payloads for a city.

    One attempt per call; retrying is left to the caller. The API key is sent
    as a query parameter and never logged.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        *,
        timeout_seconds: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def build_url(self, city: str) -> str:
        """Return the request URL for `city`, without query parameters."""
        return f"{self.base_url}/{quote(city, safe='')}"

    def fetch(self, city: str) -> Dict[str, Any]:
        """Return the provider's JSON body for `city`."""
        if not city or not city.strip():
            raise UpstreamClientError("city name is required")
        if not self.api_key:
            raise UpstreamClientError("weather API key is not configured")

        url = self.build_url(city)
        params = {"key": self.api_key, "unitGroup": UNIT_GROUP}
        logger.debug("Requesting weather", extra={"url": url})

        try:
            resp = self.session.get(url, params=params, timeout=self.timeout_seconds)
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.warning("Weather provider unreachable", extra={"url": url, "error": type(exc).__name__})
            raise UpstreamUnreachable() from exc
        except requests.RequestException as exc:
            logger.error("Weather request failed", extra={"url": url, "error": type(exc).__name__})
            raise UpstreamClientError(type(exc).__name__) from exc

        if not 200 <= resp.status_code < 300:
            message = _provider_message(resp)
            logger.warning(
                "Weather provider returned an error",
                extra={"url": url, "status_code": resp.status_code, "provider_message": message},
            )
            raise UpstreamHTTPError(resp.status_code, message)

        try:
            data = resp.json()
        except ValueError as exc:
            raise MalformedUpstreamData("Weather provider returned a non-JSON body") from exc
        if not isinstance(data, dict):
            raise MalformedUpstreamData("Weather provider returned an unexpected body")
        return data

    def close(self) -> None:
        """Release pooled HTTP connections."""
        self.session.close()
