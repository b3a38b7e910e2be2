"""Session management endpoints — create, get, list, abandon live sessions.

All endpoints require the ``X-User-ID`` header.  Creating a session resumes
the caller's most recent draft for the same respondent and catalog unless
``resume`` is false.
"""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from dora_assessment.catalog import CatalogStore
from dora_assessment.constants import DEFAULT_LANGUAGE
from dora_assessment.models.catalog import Language
from dora_assessment.models.session import Respondent, StepResult
from dora_assessment.session import AssessmentSession
from dora_db.repository import DraftRepository
from dora_db.store import SqlDraftStore

from dora_server.dependencies import (
    get_catalogs,
    get_db,
    get_draft_repo,
    get_registry,
    get_user_id,
)
from dora_server.registry import LiveSession, SessionInfo, SessionRegistry

router = APIRouter(tags=["sessions"])


# ------------------------------------------------------------------
# Request / response models
# ------------------------------------------------------------------

class CreateSessionRequest(BaseModel):
    """Body for POST /sessions."""
    session_id: str
    user_name: str
    provider_name: str
    financial_entity_name: str
    catalog_version: str | None = None
    language: Language = Language(DEFAULT_LANGUAGE)
    resume: bool = True


class SessionResponse(BaseModel):
    session: SessionInfo
    step: StepResult


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/sessions", status_code=201)
async def create_session(
    body: CreateSessionRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    registry: SessionRegistry = Depends(get_registry),
    catalogs: CatalogStore = Depends(get_catalogs),
    draft_repo: DraftRepository = Depends(get_draft_repo),
) -> SessionResponse:
    """Start a live session, resuming the latest stored draft if any.

    Returns 201 on success, 409 if the session id is taken, 404 for an
    unknown catalog version.
    """
    version = body.catalog_version or request.app.state.settings.default_catalog
    catalog = catalogs.get(version)
    respondent = Respondent(
        user_name=body.user_name,
        provider_name=body.provider_name,
        financial_entity_name=body.financial_entity_name,
    )

    draft = None
    if body.resume:
        store = SqlDraftStore(
            db, user_id=user_id, catalog_version=version, repo=draft_repo,
        )
        draft = await store.latest(respondent.user_name)

    session = AssessmentSession(
        catalog,
        respondent,
        language=body.language,
        draft=draft,
        chart_renderer=request.app.state.chart_renderer,
        delivery=request.app.state.delivery,
    )
    live = registry.add(LiveSession(
        user_id=user_id,
        session_id=body.session_id,
        catalog_version=version,
        session=session,
        resumed=draft is not None,
    ))
    return SessionResponse(
        session=SessionInfo.from_live(live), step=session.current_step(),
    )


@router.get("/sessions/{session_id}")
async def get_session(
    session_id: str,
    user_id: str = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
) -> SessionInfo:
    """Get live session info; 404 if it does not exist for this user."""
    return SessionInfo.from_live(registry.get(user_id, session_id))


@router.get("/sessions")
async def list_sessions(
    user_id: str = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
) -> list[SessionInfo]:
    """List the caller's live sessions, most recent first."""
    return [SessionInfo.from_live(s) for s in registry.list_for(user_id)]


@router.delete("/sessions/{session_id}", status_code=204)
async def abandon_session(
    session_id: str,
    user_id: str = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
) -> None:
    """Drop a live session; stored drafts are kept."""
    registry.remove(user_id, session_id)
