from .base import (
    IncompleteUpstreamResponse,
    InvalidInputError,
    ProviderReportedError,
    UpstreamTransportError,
    WeatherAdapter,
    WeatherAdapterError,
)
from .weatherapi import WeatherApiAdapter

__all__ = [
    "IncompleteUpstreamResponse",
    "InvalidInputError",
    "ProviderReportedError",
    "UpstreamTransportError",
    "WeatherAdapter",
    "WeatherAdapterError",
    "WeatherApiAdapter",
]
