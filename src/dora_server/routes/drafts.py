"""Draft endpoints — save the live session as a draft, list stored drafts."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from dora_assessment.models.session import Draft
from dora_db.repository import DraftRepository
from dora_db.store import SqlDraftStore, row_to_draft

from dora_server.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from dora_server.dependencies import get_db, get_draft_repo, get_registry, get_user_id
from dora_server.registry import SessionRegistry

router = APIRouter(tags=["drafts"])


class StoredDraft(BaseModel):
    """A persisted draft with its storage metadata."""
    id: str
    catalog_version: str
    created_at: datetime
    draft: Draft


@router.post("/sessions/{session_id}/draft", status_code=201)
async def save_draft(
    session_id: str,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    registry: SessionRegistry = Depends(get_registry),
    draft_repo: DraftRepository = Depends(get_draft_repo),
) -> Draft:
    """Snapshot the live session into a new stored draft."""
    live = registry.get(user_id, session_id)
    store = SqlDraftStore(
        db, user_id=user_id, catalog_version=live.catalog_version, repo=draft_repo,
    )
    return await live.session.save_draft(store)


@router.get("/drafts")
async def list_drafts(
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    draft_repo: DraftRepository = Depends(get_draft_repo),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
) -> list[StoredDraft]:
    """List the caller's stored drafts, most recent first."""
    rows = await draft_repo.list_drafts(db, user_id, limit=limit, offset=offset)
    return [
        StoredDraft(
            id=str(row.id),
            catalog_version=row.catalog_version,
            created_at=row.created_at,
            draft=row_to_draft(row),
        )
        for row in rows
    ]
