"""
Builds the bridge's FastAPI app: dishka container, correlation ids, JSON error bodies.

Endpoints:
- POST /api/discord/interactions, GET /metrics, GET /, GET /health

Run with:
    uvicorn cloud_agent_bridge.fastapi_app:create_fastapi_app --factory
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from cloud_agent_bridge import __version__
from cloud_agent_bridge.adapters.discord import discord_router
from cloud_agent_bridge.config.logging_config import (
    NO_CORRELATION_ID,
    correlation_id_var,
    setup_logging,
)
from cloud_agent_bridge.config.settings import Settings, load_settings
from cloud_agent_bridge.presentation.api import metrics_router
from cloud_agent_bridge.setup.ioc import create_container

logger = logging.getLogger(__name__)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Seed the correlation id from X-Correlation-ID and echo it back."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", NO_CORRELATION_ID)

        # Discord requests carry no header; the route replaces this with the interaction id
        correlation_id_var.set(correlation_id)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


def create_fastapi_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the bridge app around one settings snapshot and one DI container.

    Args:
        settings: Loaded once from the environment when omitted
        transport: Optional HTTP transport for the cloud agent client

    Returns:
        FastAPI application instance
    """
    settings = settings or load_settings()
    setup_logging(settings.log_level, settings.log_path, settings.log_format)

    # Dishka adds middleware, so the container must exist before the app starts
    container = create_container(settings, transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Cloud agent bridge started. DI container initialized.")
        yield
        await container.close()
        logger.info("Cloud agent bridge shutdown. DI container closed.")

    app = FastAPI(
        title="Cloud Agent Bridge",
        description="Discord interactions bridge for Cursor cloud agents",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    setup_dishka(container, app)
    app.add_middleware(CorrelationIdMiddleware)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        logger.info("[VALIDATION ERROR] %s", errors)
        return JSONResponse(
            status_code=400,
            content={"error": "Validation error", "details": jsonable_encoder(errors)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.info("[HTTP ERROR %s] %s", exc.status_code, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("[GLOBAL ERROR] %s", type(exc).__name__)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )

    # Liveness
    @app.get("/", tags=["health"])
    async def root():
        return {"message": "Cloud agent bridge is running."}

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy"}

    app.include_router(discord_router)  # POST /api/discord/interactions
    app.include_router(metrics_router)  # GET /metrics

    return app
