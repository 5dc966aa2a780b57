"""Interface for upstream weather providers."""

from __future__ import annotations

from typing import Any, Dict, Protocol


class WeatherDataSource(Protocol):
    """Anything that can return a raw provider payload for a city."""

    def fetch(self, city: str) -> Dict[str, Any]:
        """Return the raw payload, raising a classified upstream error on failure."""
        ...

    def close(self) -> None:
        """Release any pooled connections."""
        ...
