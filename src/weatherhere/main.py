from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from .domain.models import ErrorResponse, WeatherResponse
from .lookup import WeatherLookupError, WeatherLookupService, build_lookup_service
from .settings import AppSettings, load_settings

BASE_DIR = Path(__file__).resolve().parent
WEB_DIR = BASE_DIR / "web"
TEMPLATES_DIR = WEB_DIR / "templates"
STATIC_DIR = WEB_DIR / "static"

LOGGER = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def _get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def _get_lookup_service(request: Request) -> WeatherLookupService:
    return request.app.state.lookup_service


@asynccontextmanager
async def lifespan(application: FastAPI):
    settings: AppSettings = application.state.settings
    application.state.started_at_utc = datetime.now(timezone.utc)
    LOGGER.info(
        "Weatherhere started (environment: %s, config: %s)",
        settings.env.weatherhere_env,
        settings.config_path,
    )
    yield


def create_app(
    settings: AppSettings,
    *,
    lookup_service: WeatherLookupService | None = None,
) -> FastAPI:
    application = FastAPI(title="Weatherhere", version="0.1.0", lifespan=lifespan)
    application.state.settings = settings
    application.state.lookup_service = lookup_service or build_lookup_service(settings)
    application.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    @application.get("/", response_class=HTMLResponse)
    async def index_page(request: Request) -> HTMLResponse:
        settings = _get_settings(request)
        return templates.TemplateResponse(
            request,
            "index.html",
            {"title": settings.yaml.ui.title},
        )

    @application.get("/health", response_class=JSONResponse)
    async def health(request: Request) -> JSONResponse:
        settings = _get_settings(request)
        return JSONResponse(
            {
                "status": "ok",
                "service": "weatherhere",
                "environment": settings.env.weatherhere_env,
                "timestamp_utc": datetime.now(timezone.utc).isoformat(),
            }
        )

    # Plain ``def`` so the blocking upstream calls run in the threadpool.
    @application.get(
        "/api/weather",
        response_model=WeatherResponse,
        responses={500: {"model": ErrorResponse}},
    )
    def weather(request: Request, q: str | None = None) -> JSONResponse:
        service = _get_lookup_service(request)
        try:
            result = service.lookup(q)
        except WeatherLookupError as exc:
            body = ErrorResponse(error=exc.user_message, details=exc.details)
            return JSONResponse(body.model_dump(mode="json"), status_code=500)
        return JSONResponse(result.response.model_dump(mode="json"))

    return application


def run() -> None:
    try:
        settings = load_settings()
    except ValueError as exc:
        logging.basicConfig(level=logging.ERROR)
        LOGGER.critical(
            "Missing or invalid configuration (WEATHER_API_KEY and IPINFO_API_KEY are required): %s",
            exc,
        )
        sys.exit(1)

    logging.basicConfig(
        level=settings.env.weatherhere_log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    LOGGER.info("Server running at http://localhost:%s", settings.env.port)
    uvicorn.run(
        create_app(settings),
        host=settings.env.host,
        port=settings.env.port,
        log_level=settings.env.weatherhere_log_level.lower(),
    )


if __name__ == "__main__":
    run()
