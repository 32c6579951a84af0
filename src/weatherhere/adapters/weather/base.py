from __future__ import annotations

from typing import Protocol

from ...domain.models import ResolvedWeather

UNKNOWN_ERROR_MESSAGE = "Unknown error while communicating with Weather API"


class WeatherAdapterError(RuntimeError):
    """Raised when a weather provider request cannot be completed.

    ``detail`` holds the bare reason; the exception message carries the
    normalized ``Weather API error: <detail>`` text shown to API callers.
    """

    def __init__(self, detail: str | None = None) -> None:
        self.detail = (detail or "").strip() or UNKNOWN_ERROR_MESSAGE
        super().__init__(f"Weather API error: {self.detail}")


class InvalidInputError(WeatherAdapterError):
    """Raised before any network call when the location query is empty."""


class IncompleteUpstreamResponse(WeatherAdapterError):
    """Raised when the provider answered but the payload lacked required fields."""


class ProviderReportedError(WeatherAdapterError):
    def __init__(self, detail: str | None = None, *, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.status_code = status_code


class UpstreamTransportError(WeatherAdapterError):
    """Raised when the provider could not be reached or answered without a usable error."""


class WeatherAdapter(Protocol):
    def fetch(self, query: str) -> ResolvedWeather:
        """Fetch current conditions and the daily forecast for a location query."""
