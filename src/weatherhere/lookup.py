from __future__ import annotations

import logging
from dataclasses import dataclass

from .adapters.weather import WeatherAdapter, WeatherAdapterError, WeatherApiAdapter
from .domain.models import LocationSource, ResolvedWeather, WeatherResponse
from .location.service import LocationResolver, build_location_resolver
from .settings import AppSettings

LOGGER = logging.getLogger(__name__)

QUERY_PARAMETER_SOURCE: LocationSource = "query parameter"
IP_ADDRESS_SOURCE: LocationSource = "IP address"


class WeatherLookupError(RuntimeError):
    """Raised when the weather for a determined query could not be fetched."""

    def __init__(self, query: str | None, source: LocationSource, details: str) -> None:
        self.query = query
        self.source = source
        self.details = details
        super().__init__(self.user_message)

    @property
    def user_message(self) -> str:
        if not self.query:
            return "Failed to load weather for your location."
        if self.source == IP_ADDRESS_SOURCE:
            return f'Failed to load weather for your location ("{self.query}").'
        return f'Failed to load weather for "{self.query}".'


@dataclass(slots=True)
class WeatherLookupResult:
    query: str
    source: LocationSource
    response: WeatherResponse


def shape_weather_response(weather: ResolvedWeather, query: str) -> WeatherResponse:
    # "lat,lon" queries have no canonical name, so keep the part before the comma.
    city = weather.city or query.split(",")[0].strip()
    return WeatherResponse(
        city=city,
        temp=weather.temperature_celsius,
        description=weather.condition_text,
        icon=weather.condition_icon_url,
        wind_speed=weather.wind_kph,
        humidity=weather.humidity_percent,
        forecast=weather.forecast or [],
    )


class WeatherLookupService:
    def __init__(self, resolver: LocationResolver, fetcher: WeatherAdapter) -> None:
        self._resolver = resolver
        self._fetcher = fetcher

    def determine_query(self, q: str | None) -> tuple[str, LocationSource]:
        if q is not None and q.strip():
            return q, QUERY_PARAMETER_SOURCE
        return self._resolver.resolve_from_ip(), IP_ADDRESS_SOURCE

    def lookup(self, q: str | None) -> WeatherLookupResult:
        query, source = self.determine_query(q)
        try:
            weather = self._fetcher.fetch(query)
        except WeatherAdapterError as exc:
            LOGGER.error(
                "Weather lookup for %r (source: %s) failed: %s",
                query,
                source,
                exc,
            )
            raise WeatherLookupError(query, source, str(exc)) from exc

        LOGGER.info("Weather lookup for %r (source: %s) succeeded", query, source)
        return WeatherLookupResult(
            query=query,
            source=source,
            response=shape_weather_response(weather, query),
        )


def build_lookup_service(settings: AppSettings) -> WeatherLookupService:
    weather = settings.yaml.weather
    fetcher = WeatherApiAdapter(
        api_key=settings.env.weather_api_key,
        base_url=weather.base_url,
        days=weather.days,
        lang=weather.lang,
        timeout_seconds=weather.timeout_seconds,
    )
    return WeatherLookupService(build_location_resolver(settings), fetcher)
