"""
Tabrik Backend — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance;
       run() starts uvicorn with the configured host and port.
Who:   uvicorn (`uvicorn tabrik.main:app`) or the `tabrik` console script.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌─────────────────┐ ┌──────┐ ┌──────┐              │
    │  │ Request context │→│ GZip │→│ CORS │              │
    │  └─────────────────┘ └──────┘ └──────┘              │
    │                                                     │
    │  Routes:                                            │
    │  /api/orders   /api/media   /health   / (frontend)  │
    │                                                     │
    │  Exception Handlers:                                │
    │  NotFound→404 │ Database→500 │ other→500            │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Single MongoDB connection attempt (failure → degraded mode, never fatal)
    3. Store the connector on app.state for the get_connector dependency

    Shutdown:
    1. Close the MongoDB client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from tabrik import __version__
from tabrik.config import settings
from tabrik.database import MongoConnector
from tabrik.exceptions import (
    DatabaseError,
    NotFoundError,
    TabrikError,
)
from tabrik.middleware.request_context import RequestContextMiddleware, request_id_var
from tabrik.routes import frontend, health, media, orders

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Called once during app startup, before the database connection attempt.
    """
    log_format = (
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Per-operation chatter from these libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Connect to MongoDB on startup and close the client on shutdown.

    The connector is created here, not at import time, so that every app
    instance owns its own connection state.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Tabrik Backend starting up...")

    connector = MongoConnector(settings)
    await connector.connect()
    app.state.mongo = connector

    logger.info("Server running at http://localhost:%d", settings.port)
    logger.info("Environment: %s", settings.environment)
    logger.info("MongoDB: %s", connector.status)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Tabrik Backend shutting down...")
    await connector.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes.

    Every error body has the shape `{"error": <message>, "request_id": ...}`.

        NotFoundError    → 404
        DatabaseError    → 500
        TabrikError      → 500
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        """The driver's message goes back to the client; context stays in the log."""
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(TabrikError)
    async def handle_app_error(request: Request, exc: TabrikError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(
            status_code=500,
            content={
                "error": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all; the process keeps serving subsequent requests."""
        rid = request_id_var.get("")
        logger.error(
            "[%s] Unexpected error: %s",
            rid,
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": str(exc) or type(exc).__name__,
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Tabrik API",
        description=(
            "Backend for the Tabrik song-dedication site: stores order "
            "submissions and text/audio media entries in MongoDB."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition (last added runs first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    app.add_middleware(GZipMiddleware, minimum_size=500)

    app.add_middleware(RequestContextMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(orders.router)
    app.include_router(media.router)
    app.include_router(health.router)
    app.include_router(frontend.router)

    # Static assets last: the mount at "/" matches every remaining path
    app.mount(
        "/",
        StaticFiles(directory=settings.frontend_dir, html=True, check_dir=False),
        name="frontend",
    )

    return app


app = create_app()


def run() -> None:
    """Entry point for the `tabrik` console script."""
    uvicorn.run(
        "tabrik.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
