from __future__ import annotations

from pathlib import Path

import pytest

from weatherhere.adapters.geolocation import ipinfo
from weatherhere.adapters.weather import weatherapi
from weatherhere.settings import AppSettings, EnvSettings, load_settings

from .upstream import FakeUpstream


@pytest.fixture
def upstream(monkeypatch: pytest.MonkeyPatch) -> FakeUpstream:
    fake = FakeUpstream()
    monkeypatch.setattr(weatherapi, "urlopen", fake)
    monkeypatch.setattr(ipinfo, "urlopen", fake)
    return fake


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    env = EnvSettings(
        _env_file=None,
        weather_api_key="weather-key",
        ipinfo_api_key="ipinfo-key",
        weatherhere_env="test",
        weatherhere_config_path=tmp_path / "missing.yaml",
    )
    return load_settings(env)
