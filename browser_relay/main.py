# Browser Relay - Main Application
"""
FastAPI application for Browser Relay.
Receives console logs from the browser extension and serves them back.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from browser_relay.config import Settings, get_settings
from browser_relay.exceptions import (
    InvalidFilterError,
    PayloadTooLargeError,
    StorageUnavailableError,
)
from browser_relay.ingestion import IngestionService
from browser_relay.models.responses import AllowedDomainsResponse, HealthResponse
from browser_relay.routers import logs_router, tools_router
from browser_relay.storage import LogBroadcaster, LogStore
from browser_relay.tools import ToolAdapter

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging (stderr, stdout stays free for MCP stdio)."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


def create_app(settings: Optional[Settings] = None, store: Optional[LogStore] = None) -> FastAPI:
    """
    Build the HTTP application.

    Args:
        settings: configuration, defaults to environment settings
        store: log store to serve; when omitted one is opened from
            settings.database_url and closed on shutdown
    """
    settings = settings or get_settings()
    owns_store = store is None
    if store is None:
        store = LogStore.from_url(settings.database_url, echo=settings.debug)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        logger.info(f"Starting {settings.service_name} v{settings.service_version}")
        yield
        logger.info(f"Shutting down {settings.service_name}")
        if owns_store:
            store.close()

    app = FastAPI(
        title=settings.service_name,
        version=settings.service_version,
        description="Local relay for browser console logs",
        lifespan=lifespan,
    )

    broadcaster = LogBroadcaster()
    app.state.settings = settings
    app.state.store = store
    app.state.broadcaster = broadcaster
    app.state.ingestion = IngestionService(
        store,
        allowed_levels=settings.allowed_levels,
        broadcaster=broadcaster,
        echo_logs=settings.echo_logs,
    )
    app.state.tool_adapter = ToolAdapter(store)

    # Content scripts post from any page origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PayloadTooLargeError)
    async def payload_too_large_handler(request: Request, exc: PayloadTooLargeError):
        logger.warning(f"Rejected payload: {exc}")
        return JSONResponse(
            status_code=413,
            content={"error": "Payload too large", "detail": str(exc)},
        )

    @app.exception_handler(InvalidFilterError)
    async def invalid_filter_handler(request: Request, exc: InvalidFilterError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid query parameters", "detail": str(exc)},
        )

    @app.exception_handler(StorageUnavailableError)
    async def storage_error_handler(request: Request, exc: StorageUnavailableError):
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Storage unavailable", "detail": str(exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle all unhandled exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)},
        )

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        db_connected = await store.ping()
        return HealthResponse(
            status="healthy" if db_connected else "unhealthy",
            version=settings.service_version,
            database_connected=db_connected,
        )

    @app.get("/allowed-domains", response_model=AllowedDomainsResponse)
    async def allowed_domains():
        """Domains the extension should capture on; disabled means all."""
        domains = settings.allowed_domain_list()
        return AllowedDomainsResponse(enabled=bool(domains), domains=domains)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": settings.service_name,
            "version": settings.service_version,
            "time": datetime.now(timezone.utc).isoformat(),
            "docs": "/docs",
            "health": "/health",
        }

    app.include_router(logs_router)
    app.include_router(tools_router)

    return app
