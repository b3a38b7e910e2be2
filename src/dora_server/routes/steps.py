"""Step endpoints — read the current step and drive navigation.

Every command returns the step the UI should show next.  Commands on an
empty catalog return 409 ("no questions available"), as do commands on a
completed session.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from dora_assessment.models.report import CategoryScore
from dora_assessment.models.session import StepResult

from dora_server.dependencies import get_registry, get_user_id
from dora_server.registry import SessionRegistry

router = APIRouter(tags=["steps"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class AnswerRequest(BaseModel):
    """Body for POST /sessions/{session_id}/answer.

    Without ``qid`` the current question is answered and the session moves
    on; with ``qid`` the answer is recorded in place.
    """
    value: float
    qid: str | None = None


class ObservationRequest(BaseModel):
    """Body for POST /sessions/{session_id}/observation."""
    text: str
    qid: str | None = None


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("/sessions/{session_id}/step")
async def get_current_step(
    session_id: str,
    user_id: str = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
) -> StepResult:
    """Return the current step: a question, the empty-catalog notice, or the completed payload."""
    return registry.get(user_id, session_id).session.current_step()


@router.post("/sessions/{session_id}/answer")
async def answer(
    session_id: str,
    body: AnswerRequest,
    user_id: str = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
) -> StepResult:
    session = registry.get(user_id, session_id).session
    if body.qid is None:
        return session.answer(body.value)
    return session.record_answer(body.qid, body.value)


@router.post("/sessions/{session_id}/observation")
async def record_observation(
    session_id: str,
    body: ObservationRequest,
    user_id: str = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
) -> StepResult:
    session = registry.get(user_id, session_id).session
    return session.record_observation(body.text, qid=body.qid)


@router.post("/sessions/{session_id}/next")
async def next_question(
    session_id: str,
    user_id: str = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
) -> StepResult:
    return registry.get(user_id, session_id).session.advance()


@router.post("/sessions/{session_id}/previous")
async def previous_question(
    session_id: str,
    user_id: str = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
) -> StepResult:
    return registry.get(user_id, session_id).session.retreat()


@router.get("/sessions/{session_id}/scores")
async def get_scores(
    session_id: str,
    user_id: str = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
) -> list[CategoryScore]:
    """Per-category scores for the answers recorded so far (null = no data)."""
    return registry.get(user_id, session_id).session.scores()
