"""Application entry point and FastAPI app factory."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import sys
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config.settings import settings
from .controllers import personas, transform
from .middleware import StructuredLoggingMiddleware, TelemetryMiddleware

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_SHORT_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
_NOISY_LOGGERS = ("botocore", "boto3", "urllib3", "google", "grpc", "httpx", "httpcore")


def _rotating_handler(path: str, max_bytes: int, fmt: str) -> RotatingFileHandler:
    log_path = Path(path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_path,
        maxBytes=max_bytes,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _configure_logging() -> None:
    """Stream logs to stdout and file; pipeline and transcript logs get their own files."""

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(_rotating_handler(settings.log_file, 1_000_000, _LOG_FORMAT))
    root_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

    # Request lines are already formatted and colored by the middleware.
    request_logger = logging.getLogger("aria_relay.middleware.structured")
    request_logger.handlers.clear()
    request_stdout = logging.StreamHandler(sys.stdout)
    request_stdout.setFormatter(logging.Formatter("%(message)s"))
    request_logger.addHandler(request_stdout)
    request_logger.setLevel(logging.INFO)
    request_logger.propagate = False

    dedicated_files = {
        "aria_relay.services.transform_pipeline": settings.pipeline_log_file,
        "aria_relay.logs.transcript": settings.transcript_log_file,
    }
    for name, path in dedicated_files.items():
        dedicated = logging.getLogger(name)
        dedicated.handlers.clear()
        dedicated.addHandler(_rotating_handler(path, 500_000, _SHORT_LOG_FORMAT))
        dedicated.setLevel(logging.INFO)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    _configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        description="Persona voice transformation relay API",
    )

    app.add_middleware(TelemetryMiddleware)
    app.add_middleware(StructuredLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.include_router(transform.router)
    app.include_router(personas.router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, object]:
        """Root endpoint."""

        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "operational",
            "pipeline": [stage.name for stage in transform.PIPELINE_STAGES],
        }

    @app.get("/health", include_in_schema=False)
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""

        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
        }

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose application metrics for Prometheus scraping."""

        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        logger.info("Rejected request body on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid multipart form data."},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "aria_relay.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
