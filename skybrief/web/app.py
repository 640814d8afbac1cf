"""FastAPI application exposing the briefing service."""

import logging
import time
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from skybrief import __version__
from skybrief.config import Settings
from skybrief.errors import DecodeError, DataError, DataErrorKind, SynthesisError
from skybrief.service import BriefingService
from skybrief.web.api import weather, airports, briefing

logger = logging.getLogger(__name__)

ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8000",
    "http://127.0.0.1:8000",
]


def create_app(service: Optional[BriefingService] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Args:
        service: Service to expose; built from ``settings`` when omitted
        settings: Settings used for logging and for building the service
    """
    settings = settings or (service.settings if service else Settings.from_env())
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO), format=settings.log_format)
    service = service or BriefingService.from_settings(settings)

    weather.set_service(service)
    airports.set_service(service)
    briefing.set_service(service)

    app = FastAPI(
        title="Skybrief",
        description="Aviation weather decoding, severity classification and route briefings",
        version=__version__,
    )
    app.state.service = service

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        logger.info(f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s")
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    @app.exception_handler(DecodeError)
    async def decode_error_handler(request: Request, exc: DecodeError):
        return JSONResponse(
            status_code=422,
            content={"error": "decode_error", "message": exc.reason, "raw_text": exc.raw_text},
        )

    @app.exception_handler(DataError)
    async def data_error_handler(request: Request, exc: DataError):
        if exc.kind == DataErrorKind.NOT_FOUND:
            return JSONResponse(status_code=404, content={"error": "not_found", "message": str(exc)})
        logger.error(f"Data acquisition failed for {request.url.path}: {exc}")
        return JSONResponse(status_code=502, content={"error": "provider_failure", "message": str(exc)})

    @app.exception_handler(SynthesisError)
    async def synthesis_error_handler(request: Request, exc: SynthesisError):
        return JSONResponse(
            status_code=400,
            content={"error": exc.kind.value, "icao": exc.icao, "message": exc.message},
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(status_code=400, content={"error": "invalid_request", "message": str(exc)})

    app.include_router(weather.router, prefix="/api/weather", tags=["weather"])
    app.include_router(airports.router, prefix="/api/airports", tags=["airports"])
    app.include_router(briefing.router, prefix="/api/briefing", tags=["briefing"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


def run(host: str = "127.0.0.1", port: int = 8000, settings: Optional[Settings] = None) -> None:
    """Serve the application with uvicorn."""
    settings = settings or Settings.from_env()
    uvicorn.run(create_app(settings=settings), host=host, port=port, log_level=settings.log_level.lower())
