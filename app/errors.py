"""Classified failures raised by the lookup pipeline.

Every failure the gateway can surface is one `WeatherGatewayError` subclass,
tagged with an `ErrorKind` and carrying the HTTP status the API layer maps it
to. Callers branch on the class (or `kind`), never on message text.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Tag identifying which stage of the pipeline failed and how."""
    INVALID_INPUT = "invalid_input"
    UPSTREAM_UNREACHABLE = "upstream_unreachable"
    UPSTREAM_HTTP_ERROR = "upstream_http_error"
    UPSTREAM_CLIENT_ERROR = "upstream_client_error"
    MALFORMED_UPSTREAM_DATA = "malformed_upstream_data"
    CACHE_UNAVAILABLE = "cache_unavailable"


class WeatherGatewayError(Exception):
    """Base class for classified gateway failures."""

    kind: ErrorKind
    http_status: int = 500
    error_label: str = "Internal server error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Return the `{error, message}` body sent to API clients."""
        return {"error": self.error_label, "message": self.message}


class InvalidInput(WeatherGatewayError):
    """The city is blank or fails the routing-layer format rules."""
    kind = ErrorKind.INVALID_INPUT
    http_status = 400
    error_label = "Invalid input"

    def __init__(self, message: str, *, details: list | None = None) -> None:
        super().__init__(message)
        self.details = details or []

    def to_dict(self) -> dict:
        return {"status": "fail", **super().to_dict(), "details": self.details}


class UpstreamUnreachable(WeatherGatewayError):
    """No response from the provider (connection failure or timeout)."""
    kind = ErrorKind.UPSTREAM_UNREACHABLE

    def __init__(self, message: str = "Connection error") -> None:
        super().__init__(message)


class UpstreamHTTPError(WeatherGatewayError):
    """The provider answered with a non-2xx status."""
    kind = ErrorKind.UPSTREAM_HTTP_ERROR

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"API Error: {status_code} - {message}")
        self.status_code = status_code
        self.provider_message = message


class UpstreamClientError(WeatherGatewayError):
    """A local fault before or during the upstream call."""
    kind = ErrorKind.UPSTREAM_CLIENT_ERROR

    def __init__(self, detail: str) -> None:
        super().__init__(f"Internal error: {detail}")
        self.detail = detail


class MalformedUpstreamData(WeatherGatewayError):
    """A raw payload is missing required structure (e.g. no forecast days)."""
    kind = ErrorKind.MALFORMED_UPSTREAM_DATA

    def __init__(self, message: str = "No weather data available") -> None:
        super().__init__(message)


class CacheUnavailable(WeatherGatewayError):
    """The cache store is unreachable or holds an unreadable entry."""
    kind = ErrorKind.CACHE_UNAVAILABLE

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


__all__ = [
    "ErrorKind",
    "WeatherGatewayError",
    "InvalidInput",
    "UpstreamUnreachable",
    "UpstreamHTTPError",
    "UpstreamClientError",
    "MalformedUpstreamData",
    "CacheUnavailable",
]
