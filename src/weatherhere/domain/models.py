from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

LocationSource = Literal["query parameter", "IP address"]

# weatherapi.com forecastday entries are passed through as delivered.
DailyForecast = dict[str, Any]


class ResolvedWeather(BaseModel):
    model_config = ConfigDict(extra="ignore")

    city: str | None = None
    temperature_celsius: int | float
    condition_text: str
    condition_icon_url: str
    wind_kph: int | float
    humidity_percent: int | float
    forecast: list[DailyForecast] = Field(default_factory=list)

    @field_validator("city")
    @classmethod
    def validate_city(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        return text or None


class WeatherResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    city: str
    temp: int | float
    description: str
    icon: str
    wind_speed: int | float
    humidity: int | float
    forecast: list[DailyForecast] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    error: str
    details: str
