from __future__ import annotations

import json
import logging
from http.client import HTTPException
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from ...domain.models import ResolvedWeather
from .base import (
    IncompleteUpstreamResponse,
    InvalidInputError,
    ProviderReportedError,
    UpstreamTransportError,
)

WEATHERAPI_BASE_URL = "https://api.weatherapi.com/v1"
DEFAULT_TIMEOUT_SECONDS = 10
INCOMPLETE_RESPONSE_MESSAGE = "Incomplete or unexpected response from Weather API"

LOGGER = logging.getLogger(__name__)


def _provider_error_message(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if not isinstance(error, dict):
        return None
    message = error.get("message")
    if isinstance(message, str) and message.strip():
        return message.strip()
    return None


def _http_error_payload(exc: HTTPError) -> Any:
    try:
        return json.loads(exc.read().decode("utf-8"))
    except (OSError, ValueError):
        return None


def _transport_message(exc: Exception) -> str:
    if isinstance(exc, URLError) and not isinstance(exc, HTTPError):
        return str(exc.reason)
    return str(exc)


def _fetch_json(url: str, *, timeout: float) -> Any:
    request = Request(url, headers={"User-Agent": "weatherhere/0.1"})
    try:
        with urlopen(request, timeout=timeout) as response:
            return json.loads(response.read().decode("utf-8"))
    except HTTPError as exc:
        provider_message = _provider_error_message(_http_error_payload(exc))
        if provider_message is not None:
            raise ProviderReportedError(provider_message, status_code=exc.code) from exc
        raise UpstreamTransportError(_transport_message(exc)) from exc
    except (OSError, HTTPException) as exc:
        raise UpstreamTransportError(_transport_message(exc)) from exc
    except ValueError as exc:
        raise IncompleteUpstreamResponse(INCOMPLETE_RESPONSE_MESSAGE) from exc


def _require_number(block: dict[str, Any], key: str) -> int | float:
    value = block.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise IncompleteUpstreamResponse(INCOMPLETE_RESPONSE_MESSAGE)
    return value


def _require_text(block: dict[str, Any], key: str) -> str:
    value = block.get(key)
    if not isinstance(value, str):
        raise IncompleteUpstreamResponse(INCOMPLETE_RESPONSE_MESSAGE)
    return value


class WeatherApiAdapter:
    """Client for the weatherapi.com ``forecast.json`` endpoint."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = WEATHERAPI_BASE_URL,
        days: int = 7,
        lang: str = "cz",
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._days = days
        self._lang = lang
        self._timeout_seconds = timeout_seconds

    def build_url(self, query: str) -> str:
        params = {
            "key": self._api_key,
            "q": query,
            "days": str(self._days),
            "aqi": "no",
            "alerts": "no",
            "lang": self._lang,
        }
        return f"{self._base_url}/forecast.json?{urlencode(params)}"

    def fetch(self, query: str) -> ResolvedWeather:
        if query is None or not query.strip():
            raise InvalidInputError("A query (city name or lat,lon) is required to fetch weather")

        payload = _fetch_json(self.build_url(query), timeout=self._timeout_seconds)

        # weatherapi.com can also report failures inside a 200 body.
        provider_message = _provider_error_message(payload)
        if provider_message is not None:
            raise ProviderReportedError(provider_message)

        if not isinstance(payload, dict):
            LOGGER.error("Weather API returned a non-object payload for query %r", query)
            raise IncompleteUpstreamResponse(INCOMPLETE_RESPONSE_MESSAGE)

        current = payload.get("current")
        location = payload.get("location")
        forecast = payload.get("forecast")
        forecast_days = forecast.get("forecastday") if isinstance(forecast, dict) else None

        if (
            not isinstance(current, dict)
            or not isinstance(location, dict)
            or not isinstance(forecast_days, list)
            or not forecast_days
        ):
            LOGGER.error("Weather API returned incomplete data for query %r: %s", query, payload)
            raise IncompleteUpstreamResponse(INCOMPLETE_RESPONSE_MESSAGE)

        condition = current.get("condition")
        if not isinstance(condition, dict):
            LOGGER.error("Weather API response for query %r had no current condition", query)
            raise IncompleteUpstreamResponse(INCOMPLETE_RESPONSE_MESSAGE)

        name = location.get("name")
        return ResolvedWeather(
            city=name if isinstance(name, str) else None,
            temperature_celsius=_require_number(current, "temp_c"),
            condition_text=_require_text(condition, "text"),
            condition_icon_url=_require_text(condition, "icon"),
            wind_kph=_require_number(current, "wind_kph"),
            humidity_percent=_require_number(current, "humidity"),
            forecast=[day for day in forecast_days if isinstance(day, dict)],
        )
