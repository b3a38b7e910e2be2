"""Session, draft, and step models — the contract between the SDK and callers.

These models define what an ``AssessmentSession`` exposes at each step and
what crosses the boundary to the caller's storage (``Draft``) or to the
report pipeline (``SubmissionPayload``).

Step types:
  - QuestionStep: present the current question
  - EmptyCatalogStep: terminal, the catalog has no questions
  - CompletedStep: terminal, the questionnaire was submitted

The ``StepResult`` union covers all cases so callers can dispatch on ``type``.
"""

from __future__ import annotations

import enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Respondent(BaseModel):
    """Identity of the person and organisations the assessment is about.

    The values are opaque strings; two of them are substituted into
    question prompts.
    """

    model_config = ConfigDict(frozen=True)

    user_name: str
    provider_name: str
    financial_entity_name: str


class StoreSnapshot(BaseModel):
    """Point-in-time copy of the answer and observation maps."""

    model_config = ConfigDict(frozen=True)

    answers: dict[str, float] = Field(default_factory=dict)
    observations: dict[str, str] = Field(default_factory=dict)


class Draft(BaseModel):
    """Resumable snapshot of an in-progress session.

    A new save produces a new ``Draft``; existing drafts are never mutated.
    Completed questionnaires are represented by ``SubmissionPayload``
    instead, so ``is_completed`` is always ``False``.

    ``frozen`` only guards the attributes: ``answers`` and ``observations``
    stay plain dicts so they serialize to JSON unchanged.  Treat them as
    read-only.  The SDK copies them when building and restoring a draft, so
    editing a draft's dict never reaches a live session.
    """

    model_config = ConfigDict(frozen=True)

    provider_name: str
    financial_entity_name: str
    user_name: str
    answers: dict[str, float] = Field(default_factory=dict)
    observations: dict[str, str] = Field(default_factory=dict)
    # ISO-8601 timestamp of the save
    date: str
    last_question_index: int = Field(ge=0)
    is_completed: Literal[False] = False

    @property
    def respondent(self) -> Respondent:
        return Respondent(
            user_name=self.user_name,
            provider_name=self.provider_name,
            financial_entity_name=self.financial_entity_name,
        )


class SubmissionPayload(BaseModel):
    """Terminal, non-resumable record of a completed questionnaire.

    Like ``Draft``, the answer and observation maps are plain dicts copied
    from the session at submit time; treat them as read-only.
    """

    model_config = ConfigDict(frozen=True)

    provider_name: str
    financial_entity_name: str
    user_name: str
    answers: dict[str, float] = Field(default_factory=dict)
    observations: dict[str, str] = Field(default_factory=dict)
    # ISO-8601 timestamp of the submission
    date: str


class SubmissionState(str, enum.Enum):
    """Lifecycle states of the submission orchestrator.

    Transitions:
        idle -> submitting       (submit accepted)
        submitting -> completed  (payload handed off, terminal)
        submitting -> failed     (payload assembly failed)
        failed -> idle           (immediately, so the user can retry)
    """

    IDLE = "idle"
    SUBMITTING = "submitting"
    COMPLETED = "completed"
    FAILED = "failed"


class SubmissionOutcome(BaseModel):
    """Tagged result of a submit command.

    ``type`` is "completed" when the payload was handed off, "failed" when
    payload assembly raised (the session is back to idle and may retry), and
    "rejected" when another submission was in flight or the session was
    already completed.
    """

    type: Literal["completed", "failed", "rejected"]
    state: SubmissionState
    payload: Optional[SubmissionPayload] = None
    # Whether the report collaborator confirmed delivery
    delivered: bool = False
    # Whether a chart image was attached to the report
    chart_attached: bool = False
    error: Optional[str] = None


class OptionPayload(BaseModel):
    """Option flattened to the session language."""

    value: float
    label: str
    selected: bool = False


class QuestionStep(BaseModel):
    """Session step: show the current question."""

    type: Literal["question"] = "question"
    qid: str
    category_id: str
    category_name: str
    question: str
    options: list[OptionPayload]
    selected_value: Optional[float] = None
    observation: Optional[str] = None
    position: int
    total: int
    progress: float
    # "submit" on the last question, "next" otherwise
    available_action: Literal["next", "submit"]
    can_retreat: bool
    submitting: bool = False
    # Localized button and placeholder labels
    labels: dict[str, str] = Field(default_factory=dict)


class EmptyCatalogStep(BaseModel):
    """Session step: nothing to ask, progression is disabled."""

    type: Literal["empty"] = "empty"
    message: str


class CompletedStep(BaseModel):
    """Session step: the questionnaire was submitted."""

    type: Literal["completed"] = "completed"
    payload: SubmissionPayload


# Callers can match on step.type to dispatch rendering logic.
StepResult = QuestionStep | EmptyCatalogStep | CompletedStep
