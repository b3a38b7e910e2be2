"""AssessmentSession — one respondent's run through the questionnaire.

The session owns every piece of mutable state (position, answers,
observations, submission status) and exposes it only through named
commands, so the whole flow can be driven and tested without a UI:

    session = AssessmentSession(catalog, respondent, language=Language.ES)
    step = session.current_step()        # QuestionStep | EmptyCatalogStep | CompletedStep
    session.answer(75)                   # record + move to the next question
    session.record_observation("Policy under review")
    session.retreat()
    draft = await session.save_draft()
    outcome = await session.submit()     # on the last question

Passing ``draft`` to the constructor restores it before the first step is
computed.
"""

from __future__ import annotations

import logging

from dora_assessment.answers import AnswerStore
from dora_assessment.constants import DEFAULT_LANGUAGE, LABELS
from dora_assessment.drafts import DraftManager
from dora_assessment.interfaces import ChartRenderer, DraftStore, ReportDelivery
from dora_assessment.models.catalog import Catalog, Language, Question
from dora_assessment.models.report import CategoryScore
from dora_assessment.models.session import (
    CompletedStep,
    Draft,
    EmptyCatalogStep,
    OptionPayload,
    QuestionStep,
    Respondent,
    StepResult,
    SubmissionOutcome,
    SubmissionState,
)
from dora_assessment.navigation import NavigationController
from dora_assessment.scoring import scores_by_category
from dora_assessment.submission import SubmissionOrchestrator, SubmitHandler
from dora_assessment.templating import replace_variables

logger = logging.getLogger(__name__)

_STEP_LABELS = ("title", "previous", "next", "save_draft", "submit", "submitting", "observations")


class AssessmentSession:
    """Explicit session object wiring navigation, answers, drafts and submission.

    Args:
        catalog: immutable catalog for the session
        respondent: identity fields substituted into prompts and payloads
        language: presentation language
        draft: optional draft to resume from
        strict_drafts: reject drafts that do not match ``catalog``
        chart_renderer, delivery, on_submit: report pipeline collaborators
        draft_store: optional persistence for ``save_draft``
    """

    def __init__(
        self,
        catalog: Catalog,
        respondent: Respondent,
        *,
        language: Language | str = DEFAULT_LANGUAGE,
        draft: Draft | None = None,
        strict_drafts: bool = False,
        chart_renderer: ChartRenderer | None = None,
        delivery: ReportDelivery | None = None,
        on_submit: SubmitHandler | None = None,
        draft_store: DraftStore | None = None,
    ) -> None:
        self.catalog = catalog
        self.respondent = respondent
        self.language = Language(language)

        self.navigator = NavigationController(catalog)
        self.answers = AnswerStore()
        self.drafts = DraftManager(catalog, draft_store)
        self.orchestrator = SubmissionOrchestrator(
            catalog,
            language=self.language,
            chart_renderer=chart_renderer,
            delivery=delivery,
            on_submit=on_submit,
        )

        if draft is not None:
            self.drafts.restore(draft, self.navigator, self.answers, strict=strict_drafts)
            logger.info(
                "Session for user=%s resumed at position %d",
                respondent.user_name, self.navigator.position,
            )

    # ==================================================================
    # Queries
    # ==================================================================

    @property
    def state(self) -> SubmissionState:
        return self.orchestrator.state

    @property
    def is_completed(self) -> bool:
        return self.orchestrator.state is SubmissionState.COMPLETED

    def current_question(self) -> Question | None:
        return self.navigator.current_question()

    def progress(self) -> float:
        return self.navigator.progress(self.answers.answers)

    def scores(self) -> list[CategoryScore]:
        """Per-category scores for the answers recorded so far."""
        return scores_by_category(self.catalog, self.answers.answers)

    def current_step(self) -> StepResult:
        """Describe what the UI should show right now."""
        lang = self.language.value
        if self.is_completed:
            return CompletedStep(payload=self.orchestrator.payload)

        question = self.navigator.current_question()
        if question is None:
            return EmptyCatalogStep(message=LABELS["no_questions"][lang])

        selected = self.answers.answer_for(question.id)
        category = next(c for c in self.catalog.categories if c.id == question.category_id)
        return QuestionStep(
            qid=question.id,
            category_id=category.id,
            category_name=category.name.get(lang),
            question=replace_variables(question.text.get(lang), self.respondent),
            options=[
                OptionPayload(
                    value=o.value,
                    label=o.text.get(lang),
                    selected=selected is not None and selected == o.value,
                )
                for o in question.options
            ],
            selected_value=selected,
            observation=self.answers.observation_for(question.id),
            position=self.navigator.position,
            total=self.navigator.total,
            progress=self.progress(),
            available_action="submit" if self.navigator.is_last else "next",
            can_retreat=not self.navigator.is_first,
            submitting=self.state is SubmissionState.SUBMITTING,
            labels={key: LABELS[key][lang] for key in _STEP_LABELS},
        )

    # ==================================================================
    # Commands
    # ==================================================================

    def answer(self, value: float) -> StepResult:
        """Answer the current question and move to the next one.

        On the last question the position stays put and the step's
        ``available_action`` is "submit".
        """
        question = self._require_question()
        self.answers.record_answer(question.id, value)
        self.navigator.advance()
        return self.current_step()

    def record_answer(self, qid: str, value: float) -> StepResult:
        """Record an answer for any question without moving."""
        self._require_active()
        self.catalog.get_question(qid)
        self.answers.record_answer(qid, value)
        return self.current_step()

    def record_observation(self, text: str, qid: str | None = None) -> StepResult:
        """Store free-text notes for ``qid`` (defaults to the current question)."""
        if qid is None:
            qid = self._require_question().id
        else:
            self._require_active()
            self.catalog.get_question(qid)
        self.answers.record_observation(qid, text)
        return self.current_step()

    def advance(self) -> StepResult:
        self._require_question()
        self.navigator.advance()
        return self.current_step()

    def retreat(self) -> StepResult:
        self._require_question()
        self.navigator.retreat()
        return self.current_step()

    async def save_draft(self, store: DraftStore | None = None) -> Draft:
        """Snapshot the session into a new draft and hand it to the draft store.

        ``store`` overrides the session's draft store for this save.
        """
        self._require_active()
        return await self.drafts.save(
            self.navigator.position,
            self.answers.snapshot(),
            self.respondent,
            store=store,
        )

    async def submit(self) -> SubmissionOutcome:
        """Submit the questionnaire from the last question.

        Submit replaces "next" only on the last question, so it is refused
        anywhere else.  Answering every question first is not required.
        Returns a "rejected" outcome while another submission is in flight
        or after completion.

        Raises:
            ValueError: if the catalog has no questions, or the session is
                not on the last question.
        """
        self._require_question(allow_completed=True)
        if not self.is_completed and not self.navigator.is_last:
            raise ValueError("Submit is only available on the last question")
        return await self.orchestrator.submit(self.answers, self.respondent)

    # ==================================================================
    # Internal
    # ==================================================================

    def _require_active(self) -> None:
        if self.is_completed:
            raise ValueError("Session already completed")

    def _require_question(self, *, allow_completed: bool = False) -> Question:
        if not allow_completed:
            self._require_active()
        question = self.navigator.current_question()
        if question is None:
            raise ValueError("No questions available")
        return question
