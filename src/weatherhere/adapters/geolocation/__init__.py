from .base import GeolocationAdapter, GeolocationAdapterError
from .ipinfo import IpinfoGeolocationAdapter

__all__ = ["GeolocationAdapter", "GeolocationAdapterError", "IpinfoGeolocationAdapter"]
