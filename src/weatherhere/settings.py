from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_FALLBACK_CITY = "Prague"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

LOGGER = logging.getLogger(__name__)


def _validate_http_url(value: str, *, field_name: str) -> str:
    text = value.strip().rstrip("/")
    parsed = urlparse(text)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"{field_name} must be an absolute http(s) URL")
    return text


class UiSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = "Weather here"


class LocationSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    fallback_city: str = DEFAULT_FALLBACK_CITY

    @field_validator("fallback_city")
    @classmethod
    def validate_fallback_city(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("location.fallback_city must not be empty")
        return text


class GeolocationSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: str = "https://ipinfo.io"
    timeout_seconds: float = Field(default=10, gt=0, le=120)

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        return _validate_http_url(value, field_name="geolocation.url")


class WeatherSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    base_url: str = "https://api.weatherapi.com/v1"
    days: int = Field(default=7, ge=1, le=14)
    lang: str = "cz"
    timeout_seconds: float = Field(default=10, gt=0, le=120)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        return _validate_http_url(value, field_name="weather.base_url")

    @field_validator("lang")
    @classmethod
    def validate_lang(cls, value: str) -> str:
        text = value.strip().lower()
        if not text:
            raise ValueError("weather.lang must not be empty")
        return text


class WeatherhereYamlSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ui: UiSettings = Field(default_factory=UiSettings)
    location: LocationSettings = Field(default_factory=LocationSettings)
    geolocation: GeolocationSettings = Field(default_factory=GeolocationSettings)
    weather: WeatherSettings = Field(default_factory=WeatherSettings)


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    weather_api_key: str
    ipinfo_api_key: str
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    weatherhere_env: Literal["dev", "test", "prod"] = "dev"
    weatherhere_log_level: str = "INFO"
    weatherhere_config_path: Path = Path("config/weatherhere.yaml")

    @field_validator("weather_api_key", "ipinfo_api_key")
    @classmethod
    def validate_api_key(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("API key must not be empty")
        return text

    @field_validator("weatherhere_log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level


class AppSettings(BaseModel):
    env: EnvSettings
    yaml: WeatherhereYamlSettings
    project_root: Path
    config_path: Path


def _resolve_project_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (PROJECT_ROOT / path).resolve()


def _load_yaml_settings(path: Path) -> WeatherhereYamlSettings:
    if not path.exists():
        LOGGER.info("Config file %s not found, using defaults", path)
        return WeatherhereYamlSettings()

    raw_config = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ValueError("Weatherhere config must be a YAML mapping/object at the top level")
    return WeatherhereYamlSettings.model_validate(raw_config)


def load_settings(env: EnvSettings | None = None) -> AppSettings:
    env = env or EnvSettings()
    config_path = _resolve_project_path(env.weatherhere_config_path)
    return AppSettings(
        env=env,
        yaml=_load_yaml_settings(config_path),
        project_root=PROJECT_ROOT,
        config_path=config_path,
    )
