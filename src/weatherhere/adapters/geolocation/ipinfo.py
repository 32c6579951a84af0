from __future__ import annotations

import json
from http.client import HTTPException
from typing import Any
from urllib.error import HTTPError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from .base import GeolocationAdapterError

IPINFO_URL = "https://ipinfo.io"
DEFAULT_TIMEOUT_SECONDS = 10


def _error_body(exc: HTTPError) -> str:
    try:
        return exc.read().decode("utf-8", errors="replace").strip()
    except OSError:
        return ""


def _fetch_json(url: str, *, timeout: float) -> dict[str, Any]:
    request = Request(url, headers={"User-Agent": "weatherhere/0.1", "Accept": "application/json"})
    try:
        with urlopen(request, timeout=timeout) as response:
            payload = json.loads(response.read().decode("utf-8"))
    except HTTPError as exc:
        body = _error_body(exc)
        raise GeolocationAdapterError(f"ipinfo.io answered HTTP {exc.code}: {body or exc.reason}") from exc
    except (OSError, HTTPException) as exc:
        raise GeolocationAdapterError(f"ipinfo.io request failed: {exc}") from exc
    except ValueError as exc:
        raise GeolocationAdapterError("ipinfo.io returned a malformed response") from exc

    if not isinstance(payload, dict):
        raise GeolocationAdapterError("Unexpected ipinfo.io response shape")
    return payload


class IpinfoGeolocationAdapter:
    def __init__(
        self,
        *,
        token: str,
        url: str = IPINFO_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._token = token
        self._url = url.rstrip("/")
        self._timeout_seconds = timeout_seconds

    def get_city(self) -> str:
        # No IP parameter: ipinfo.io answers for the address the request came from.
        payload = _fetch_json(
            f"{self._url}?{urlencode({'token': self._token})}",
            timeout=self._timeout_seconds,
        )
        city = payload.get("city")
        if not isinstance(city, str) or not city.strip():
            raise GeolocationAdapterError("ipinfo.io did not return a city name")
        return city
