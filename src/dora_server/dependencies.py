"""FastAPI dependency injection — DB sessions, registry, catalogs, repositories, identity.

Each request that touches the database gets a fresh ``AsyncSession`` via
``get_db()``.  The session is committed on success and rolled back on
error; repositories only ``flush()``.
"""

import hmac
from typing import AsyncGenerator

from fastapi import Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from dora_assessment.catalog import CatalogStore
from dora_db.engine import get_session_factory
from dora_db.repository import DraftRepository, SubmissionRepository

from dora_server.registry import SessionRegistry


# ------------------------------------------------------------------
# Database session — transaction boundary lives here
# ------------------------------------------------------------------

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session; commit on success, rollback on error."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ------------------------------------------------------------------
# Singletons stashed on app.state during lifespan
# ------------------------------------------------------------------

def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


def get_catalogs(request: Request) -> CatalogStore:
    return request.app.state.catalogs


def get_draft_repo(request: Request) -> DraftRepository:
    return request.app.state.draft_repo


def get_submission_repo(request: Request) -> SubmissionRepository:
    return request.app.state.submission_repo


# ------------------------------------------------------------------
# User identity — extracted from the X-User-ID header
# ------------------------------------------------------------------

async def get_user_id(
    request: Request,
    x_user_id: str | None = Header(None, alias="X-User-ID"),
    x_proxy_secret: str | None = Header(None, alias="X-Proxy-Secret"),
) -> str:
    """Extract caller identity from the ``X-User-ID`` header.

    Returns 401 if the header is missing.  When ``TRUSTED_PROXY_SECRET`` is
    configured the request must also carry a matching ``X-Proxy-Secret``.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="X-User-ID header is required")

    expected_secret: str | None = request.app.state.settings.trusted_proxy_secret
    if expected_secret:
        if not x_proxy_secret:
            raise HTTPException(
                status_code=403,
                detail="X-Proxy-Secret header is required",
            )
        if not hmac.compare_digest(x_proxy_secret, expected_secret):
            raise HTTPException(status_code=403, detail="Invalid proxy secret")

    return x_user_id
