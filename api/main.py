"""FastAPI application for the urshort redirect service."""

import logging
from contextlib import asynccontextmanager

import fastapi
from fastapi import Request
from fastapi.responses import JSONResponse

from core.config import ENV_PREFIX, get_settings, read_environment
from core.logger import configure_logging
from routes import health_router, redirect_router
from services.mapping_loader import load_uri_mappings

_settings = get_settings()

configure_logging(_settings.log_level, json_format=_settings.log_format == "json")
logger = logging.getLogger(__name__)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler for unhandled exceptions."""
    logger.exception(
        "unhandled.exception",
        extra={
            "exc_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method,
        },
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred. Please try again."},
    )


@asynccontextmanager
async def lifespan(app: fastapi.FastAPI):
    """Scan the environment once and publish the immutable redirect snapshot."""
    settings = get_settings()
    result = load_uri_mappings(
        read_environment(settings),
        ENV_PREFIX,
        full_match=settings.pattern_full_match,
        strict_templates=settings.pattern_strict_templates,
    )

    # Published only after the snapshot is fully built; requests before this
    # point see no mappings and answer 503.
    app.state.load_issues = result.issues
    app.state.mappings = result.mappings
    logger.info(
        "init.complete",
        extra={
            "host": settings.host,
            "port": settings.port,
            "redirect_status_code": settings.redirect_status_code,
        },
    )

    yield


app = fastapi.FastAPI(
    title="urshort",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if _settings.docs_enabled else None,
    redoc_url="/redoc" if _settings.docs_enabled else None,
    openapi_url="/openapi.json" if _settings.docs_enabled else None,
)

app.state.mappings = None
app.add_exception_handler(Exception, global_exception_handler)

app.include_router(health_router)
# Must be last: the catch-all redirect route would shadow anything after it
app.include_router(redirect_router)
