"""Current weather and a 7-day forecast for an IP-derived or requested location."""

__version__ = "0.1.0"
