"""Submission endpoints — submit a live session, list stored submissions.

The report pipeline runs inside the request.  ``SUBMIT_TIMEOUT_SECONDS``
bounds it; on timeout the session returns to idle and the client gets 504
so the respondent can retry.  Once stored, a completed session is dropped
from the registry.
"""

import asyncio
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from dora_assessment.models.report import CategoryScore
from dora_assessment.models.session import SubmissionOutcome, SubmissionPayload
from dora_assessment.scoring import scores_by_category
from dora_db.repository import DraftRepository, SubmissionRepository

from dora_server.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from dora_server.dependencies import (
    get_db,
    get_draft_repo,
    get_registry,
    get_submission_repo,
    get_user_id,
)
from dora_server.registry import SessionRegistry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["submissions"])


class StoredSubmission(BaseModel):
    """A persisted submission with its scores."""
    id: str
    catalog_version: str
    language: str
    delivered: bool
    created_at: datetime
    payload: SubmissionPayload
    scores: list[CategoryScore]


@router.post("/sessions/{session_id}/submit")
async def submit(
    session_id: str,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    registry: SessionRegistry = Depends(get_registry),
    submission_repo: SubmissionRepository = Depends(get_submission_repo),
    draft_repo: DraftRepository = Depends(get_draft_repo),
) -> SubmissionOutcome:
    """Submit the questionnaire and store the payload on completion.

    The outcome is "completed" even when report delivery failed
    (``delivered`` is false then), "failed" when the payload could not be
    assembled, and "rejected" while another submission is in flight.

    A completed session leaves the registry once its submission is stored.
    If storing fails the session stays registered with the outcome pending,
    and the next submit call stores that same outcome without re-running the
    report pipeline.
    """
    settings = request.app.state.settings
    live = registry.get(user_id, session_id)
    session = live.session

    if live.pending is None:
        timeout = settings.submit_timeout_seconds or None
        try:
            outcome = await asyncio.wait_for(session.submit(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.error(
                "Submission timed out after %.1fs: user_id=%s session_id=%s",
                settings.submit_timeout_seconds, user_id, session_id,
            )
            raise HTTPException(status_code=504, detail="Submission timed out")
        if outcome.type != "completed":
            return outcome
        live.pending = outcome
    else:
        logger.info(
            "Retrying storage of completed submission: user_id=%s session_id=%s",
            user_id, session_id,
        )

    async with live.lock:
        outcome = live.pending
        if outcome is None:
            # Stored by a concurrent retry while this call waited
            raise ValueError(
                f"Session not found: user_id={user_id}, session_id={session_id}"
            )
        await submission_repo.save_submission(
            db,
            user_id=user_id,
            catalog_version=live.catalog_version,
            language=session.language.value,
            payload=outcome.payload,
            scores=scores_by_category(session.catalog, outcome.payload.answers),
            delivered=outcome.delivered,
        )
        if settings.delete_drafts_on_submit:
            await draft_repo.delete_drafts(
                db, user_id, user_name=outcome.payload.user_name,
            )
        await db.commit()
        live.pending = None
        registry.remove(user_id, session_id)
    return outcome


@router.get("/submissions")
async def list_submissions(
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    submission_repo: SubmissionRepository = Depends(get_submission_repo),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
) -> list[StoredSubmission]:
    """List the caller's submissions, most recent first."""
    rows = await submission_repo.list_submissions(
        db, user_id, limit=limit, offset=offset,
    )
    return [
        StoredSubmission(
            id=str(row.id),
            catalog_version=row.catalog_version,
            language=row.language,
            delivered=row.delivered,
            created_at=row.created_at,
            payload=SubmissionPayload(
                provider_name=row.provider_name,
                financial_entity_name=row.financial_entity_name,
                user_name=row.user_name,
                answers=row.answers or {},
                observations=row.observations or {},
                date=row.submitted_at,
            ),
            scores=[CategoryScore(**s) for s in row.scores or []],
        )
        for row in rows
    ]
