from __future__ import annotations

from typing import Protocol


class GeolocationAdapterError(RuntimeError):
    """Raised when the geolocation provider cannot name a city."""


class GeolocationAdapter(Protocol):
    def get_city(self) -> str:
        """Return the city the provider derives from the caller's IP address."""
