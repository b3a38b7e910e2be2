"""Application factory and CLI entry point.

``create_app()`` builds the FastAPI application with:
  - Lifespan handler that loads catalogs and the session registry once
  - CORS middleware
  - Global exception handlers (SDK ValueError → 404/409/400)
  - All API routes mounted under ``/api/v1``
  - A ``/health`` endpoint for readiness checks

Report collaborators (chart renderer, delivery channel) are optional
constructor arguments; without them submissions complete with no chart and
``delivered=False``.

The ``cli()`` function is the ``dora-server`` console-script entry point.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from dora_assessment.catalog import CatalogStore
from dora_assessment.interfaces import ChartRenderer, ReportDelivery
from dora_db.config import load_db_settings
from dora_db.engine import configure_engine, dispose_engine, get_engine
from dora_db.repository import DraftRepository, SubmissionRepository

from dora_server.cleanup import run_session_sweeper
from dora_server.config import ServerSettings, load_settings
from dora_server.errors import (
    generic_error_handler,
    key_error_handler,
    value_error_handler,
)
from dora_server.registry import SessionRegistry
from dora_server.routes import register_routes

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Lifespan — runs once at startup/shutdown
# ------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialise shared resources at startup, tear down on shutdown.

    Startup:
      1. Load YAML catalogs into a ``CatalogStore``
         and configure the database engine from ``DatabaseSettings``
      2. Create the live-session registry and the repositories
      3. Stash them on ``app.state`` for dependency injection
      4. Start the idle-session sweeper unless the TTL is 0

    Shutdown:
      1. Cancel the sweeper
      2. Dispose the database engine's connection pool
    """
    settings: ServerSettings = app.state.settings

    catalogs = CatalogStore(catalog_dir=settings.catalog_dir)
    catalogs.load()
    if settings.default_catalog not in catalogs.catalogs:
        logger.warning(
            "Default catalog '%s' not found; sessions must name a catalog_version",
            settings.default_catalog,
        )

    configure_engine(load_db_settings())

    app.state.catalogs = catalogs
    app.state.registry = SessionRegistry()
    app.state.draft_repo = DraftRepository()
    app.state.submission_repo = SubmissionRepository()

    sweeper = None
    if settings.session_idle_ttl_seconds > 0:
        sweeper = asyncio.create_task(
            run_session_sweeper(
                app.state.registry,
                idle_ttl_seconds=settings.session_idle_ttl_seconds,
                interval_seconds=settings.session_sweep_interval_seconds,
            )
        )

    yield

    if sweeper is not None:
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper
    await dispose_engine()
    logger.info("Database engine disposed")


# ------------------------------------------------------------------
# Factory
# ------------------------------------------------------------------

def create_app(
    settings: ServerSettings | None = None,
    *,
    chart_renderer: ChartRenderer | None = None,
    delivery: ReportDelivery | None = None,
) -> FastAPI:
    """Build and return the configured FastAPI application."""
    if settings is None:
        settings = load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="DORA Assessment API",
        description="REST API for the DORA questionnaire sessions, drafts and reports",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.chart_renderer = chart_renderer
    app.state.delivery = delivery

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(KeyError, key_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    @app.get("/health")
    async def health() -> dict:
        """Readiness check — verifies DB connectivity."""
        try:
            async with get_engine().connect() as conn:
                await conn.execute(text("SELECT 1"))
            return {"status": "ok"}
        except Exception as exc:
            logger.error("Health check failed: %s", exc)
            return {"status": "error", "detail": str(exc)}

    register_routes(app)

    return app


# ------------------------------------------------------------------
# Module-level ASGI export (for uvicorn dora_server.app:app)
# ------------------------------------------------------------------
app = create_app()


# ------------------------------------------------------------------
# CLI entry point
# ------------------------------------------------------------------

def cli() -> None:
    """Console-script entry point: ``dora-server``."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "dora_server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )
