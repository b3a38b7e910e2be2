"""Async engine, session factory and a transactional scope for scripts.

The server configures the engine once from ``DatabaseSettings`` at startup
(``configure_engine``); anything that skips that step gets an engine built
from the environment on first use.  Request handlers take sessions through
the server's ``get_db`` dependency, while CLI jobs use ``session_scope``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from dora_db.config import DatabaseSettings, load_db_settings

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def build_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Create an engine for ``settings`` without registering it."""
    return create_async_engine(
        settings.async_url,
        echo=settings.echo,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_recycle=settings.pool_recycle_seconds or -1,
        pool_pre_ping=True,
        connect_args=settings.connect_args(),
    )


def configure_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Replace the shared engine with one built from ``settings``.

    Must run before the first request; an engine already in use is not
    disposed here.
    """
    global _engine, _session_factory
    _engine = build_engine(settings)
    _session_factory = None
    logger.info(
        "Database engine configured: pool_size=%d max_overflow=%d",
        settings.pool_size, settings.max_overflow,
    )
    return _engine


def get_engine() -> AsyncEngine:
    """Return the shared engine, building it from the environment if needed."""
    if _engine is None:
        return configure_engine(load_db_settings())
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """One session and transaction: commit on success, rollback on error."""
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def dispose_engine() -> None:
    """Close the pool; the next ``get_engine`` call builds a fresh engine."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
