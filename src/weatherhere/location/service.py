from __future__ import annotations

import logging

from ..adapters.geolocation import GeolocationAdapter, GeolocationAdapterError, IpinfoGeolocationAdapter
from ..settings import DEFAULT_FALLBACK_CITY, AppSettings

LOGGER = logging.getLogger(__name__)


class LocationResolver:
    """Turns the caller's IP address into a city name.

    ``resolve_from_ip`` never raises: when the geolocation provider fails for
    any reason the configured fallback city is returned instead, so the
    weather lookup always has a query to work with.
    """

    def __init__(self, adapter: GeolocationAdapter, *, fallback_city: str = DEFAULT_FALLBACK_CITY) -> None:
        self._adapter = adapter
        self._fallback_city = fallback_city

    @property
    def fallback_city(self) -> str:
        return self._fallback_city

    def resolve_from_ip(self) -> str:
        try:
            return self._adapter.get_city()
        except GeolocationAdapterError as exc:
            LOGGER.warning("IP geolocation failed: %s", exc)
        except Exception:  # pragma: no cover - defensive fallback
            LOGGER.exception("IP geolocation failed unexpectedly")

        LOGGER.warning("Using default location '%s' because IP geolocation failed", self._fallback_city)
        return self._fallback_city


def build_location_resolver(settings: AppSettings) -> LocationResolver:
    adapter = IpinfoGeolocationAdapter(
        token=settings.env.ipinfo_api_key,
        url=settings.yaml.geolocation.url,
        timeout_seconds=settings.yaml.geolocation.timeout_seconds,
    )
    return LocationResolver(adapter, fallback_city=settings.yaml.location.fallback_city)
