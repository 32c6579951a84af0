from __future__ import annotations

from http.client import IncompleteRead
from urllib.error import URLError

import pytest
from fastapi.testclient import TestClient

from weatherhere.main import create_app

from .upstream import IPINFO_URL_PREFIX, WEATHER_URL_PREFIX, http_error, make_forecast_payload


@pytest.fixture
def client(settings, upstream):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


def test_weather_for_query(client, upstream):
    upstream.route(WEATHER_URL_PREFIX, make_forecast_payload(name="Brno", temp_c=21.5, text="Clear"))

    response = client.get("/api/weather", params={"q": "Brno"})

    assert response.status_code == 200
    body = response.json()
    assert body["city"] == "Brno"
    assert body["temp"] == 21.5
    assert body["description"] == "Clear"
    assert body["icon"] == "//cdn.weatherapi.com/weather/64x64/day/113.png"
    assert body["wind_speed"] == 12.2
    assert body["humidity"] == 40
    assert len(body["forecast"]) == 7
    assert set(body) == {"city", "temp", "description", "icon", "wind_speed", "humidity", "forecast"}
    assert upstream.calls_to(IPINFO_URL_PREFIX) == []


def test_coordinate_query_without_name(client, upstream):
    upstream.route(WEATHER_URL_PREFIX, make_forecast_payload(name=None))

    response = client.get("/api/weather", params={"q": "50.08,14.43"})

    assert response.status_code == 200
    assert response.json()["city"] == "50.08"


def test_weather_for_ip_location(client, upstream):
    upstream.route(IPINFO_URL_PREFIX, {"city": "Ostrava"})
    upstream.route(WEATHER_URL_PREFIX, make_forecast_payload(name="Ostrava"))

    response = client.get("/api/weather")

    assert response.status_code == 200
    assert response.json()["city"] == "Ostrava"
    assert len(upstream.calls_to(IPINFO_URL_PREFIX)) == 1
    assert "q=Ostrava" in upstream.calls_to(WEATHER_URL_PREFIX)[0]
    assert upstream.calls[0].startswith(IPINFO_URL_PREFIX)


def test_unreachable_provider_without_query(client, upstream):
    upstream.route(IPINFO_URL_PREFIX, URLError("Network is unreachable"))
    upstream.route(WEATHER_URL_PREFIX, URLError("Network is unreachable"))

    response = client.get("/api/weather")

    assert response.status_code == 500
    body = response.json()
    assert set(body) == {"error", "details"}
    assert "your location" in body["error"]
    assert body["details"] == "Weather API error: Network is unreachable"
    assert "q=Prague" in upstream.calls_to(WEATHER_URL_PREFIX)[0]


def test_provider_error_is_surfaced(client, upstream):
    upstream.route(
        WEATHER_URL_PREFIX,
        http_error(WEATHER_URL_PREFIX, 400, {"error": {"code": 1006, "message": "No matching location found."}}),
    )

    response = client.get("/api/weather", params={"q": "Atlantis"})

    assert response.status_code == 500
    assert response.json() == {
        "error": 'Failed to load weather for "Atlantis".',
        "details": "Weather API error: No matching location found.",
    }


def test_incomplete_provider_response_is_surfaced(client, upstream):
    payload = make_forecast_payload()
    del payload["forecast"]
    upstream.route(WEATHER_URL_PREFIX, payload)

    response = client.get("/api/weather", params={"q": "Brno"})

    assert response.status_code == 500
    assert response.json()["details"] == "Weather API error: Incomplete or unexpected response from Weather API"


def test_index_page(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "<title>Weather here</title>" in response.text
    assert "/static/app.js" in response.text


def test_static_assets(client):
    assert client.get("/static/app.js").status_code == 200
    assert client.get("/static/style.css").status_code == 200


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["service"] == "weatherhere"
    assert body["environment"] == "test"


def test_truncated_provider_body_returns_json_error(client, upstream):
    upstream.route(WEATHER_URL_PREFIX, IncompleteRead(b"par"))

    response = client.get("/api/weather", params={"q": "Brno"})

    assert response.status_code == 500
    assert response.headers["content-type"] == "application/json"
    body = response.json()
    assert body["error"] == 'Failed to load weather for "Brno".'
    assert body["details"].startswith("Weather API error: ")


def test_os_error_from_provider_returns_json_error(client, upstream):
    upstream.route(WEATHER_URL_PREFIX, OSError("Network down"))

    response = client.get("/api/weather", params={"q": "Brno"})

    assert response.status_code == 500
    assert response.json()["details"] == "Weather API error: Network down"


def test_integer_readings_pass_through_unchanged(client, upstream):
    upstream.route(WEATHER_URL_PREFIX, make_forecast_payload(temp_c=21, wind_kph=12, humidity=40))

    response = client.get("/api/weather", params={"q": "Brno"})

    body = response.json()
    assert isinstance(body["humidity"], int) and body["humidity"] == 40
    assert isinstance(body["temp"], int) and body["temp"] == 21
    assert isinstance(body["wind_speed"], int) and body["wind_speed"] == 12
    assert '"humidity":40,' in response.text
