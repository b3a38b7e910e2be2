"""AssessmentSession tests: end-to-end flows driven through session commands.

Covers the step payload, navigation through answers, draft save/resume,
and submission from the last question.
"""

import pytest

from dora_assessment.models.catalog import Language
from dora_assessment.models.session import (
    CompletedStep,
    Draft,
    EmptyCatalogStep,
    QuestionStep,
    SubmissionState,
)
from dora_assessment.session import AssessmentSession

from helpers.fakes import MemoryDraftStore, StubChartRenderer, StubDelivery


# =====================================================================
# Step payload
# =====================================================================


class TestCurrentStep:

    def test_first_question(self, two_question_catalog, respondent):
        step = AssessmentSession(two_question_catalog, respondent).current_step()
        assert isinstance(step, QuestionStep)
        assert step.qid == "Q1"
        assert step.category_name == "Category A (es)"
        assert step.question == "Question Q1 about CloudCo (es)"
        assert [o.value for o in step.options] == [1, 2, 3]
        assert step.available_action == "next"
        assert step.can_retreat is False
        assert step.progress == 0.0
        assert step.labels["next"] == "Siguiente"

    def test_portuguese(self, two_question_catalog, respondent):
        session = AssessmentSession(two_question_catalog, respondent, language="pt")
        step = session.current_step()
        assert step.question.endswith("(pt)")
        assert step.labels["next"] == "Seguinte"

    def test_selected_option_is_marked(self, two_question_catalog, respondent):
        session = AssessmentSession(two_question_catalog, respondent)
        step = session.record_answer("Q1", 2)
        assert step.selected_value == 2
        assert [o.selected for o in step.options] == [False, True, False]

    def test_empty_catalog(self, empty_catalog, respondent):
        session = AssessmentSession(empty_catalog, respondent)
        step = session.current_step()
        assert isinstance(step, EmptyCatalogStep)
        assert step.message == "No hay preguntas disponibles."
        assert session.progress() == 0.0

    def test_empty_catalog_blocks_progression(self, empty_catalog, respondent):
        session = AssessmentSession(empty_catalog, respondent)
        with pytest.raises(ValueError, match="No questions available"):
            session.answer(1)
        with pytest.raises(ValueError, match="No questions available"):
            session.advance()


# =====================================================================
# Navigation through answers
# =====================================================================


class TestAnswering:

    def test_answer_advances_until_last(self, two_question_catalog, respondent):
        session = AssessmentSession(two_question_catalog, respondent)
        step = session.answer(2)
        assert step.qid == "Q2"
        assert step.available_action == "submit"
        assert step.can_retreat is True
        assert step.progress == 0.5

        step = session.answer(3)
        assert step.qid == "Q2"
        assert step.progress == 1.0
        assert session.answers.answer_for("Q2") == 3

    def test_retreat_keeps_answers(self, two_question_catalog, respondent):
        session = AssessmentSession(two_question_catalog, respondent)
        session.answer(2)
        step = session.retreat()
        assert step.qid == "Q1"
        assert step.selected_value == 2

    def test_observation_on_current_question(self, two_question_catalog, respondent):
        session = AssessmentSession(two_question_catalog, respondent)
        step = session.record_observation("under review")
        assert step.observation == "under review"
        assert session.answers.observation_for("Q1") == "under review"

    def test_unknown_question_id(self, two_question_catalog, respondent):
        session = AssessmentSession(two_question_catalog, respondent)
        with pytest.raises(KeyError):
            session.record_answer("nope", 1)

    def test_scores(self, two_question_catalog, respondent):
        session = AssessmentSession(two_question_catalog, respondent)
        session.answer(3)
        scores = session.scores()
        assert [s.score for s in scores] == [3.0, None]


# =====================================================================
# Drafts
# =====================================================================


class TestDrafts:

    @pytest.mark.asyncio
    async def test_save_and_resume(self, two_question_catalog, respondent):
        store = MemoryDraftStore()
        session = AssessmentSession(two_question_catalog, respondent, draft_store=store)
        session.answer(2)
        session.record_observation("check contract")
        draft = await session.save_draft()

        assert store.drafts == [draft]
        assert draft.last_question_index == 1
        assert draft.answers == {"Q1": 2}
        assert draft.observations == {"Q2": "check contract"}

        resumed = AssessmentSession(two_question_catalog, draft.respondent, draft=draft)
        step = resumed.current_step()
        assert step.qid == "Q2"
        assert step.observation == "check contract"
        assert resumed.answers.answer_for("Q1") == 2

    @pytest.mark.asyncio
    async def test_draft_does_not_track_later_changes(self, two_question_catalog, respondent):
        session = AssessmentSession(two_question_catalog, respondent)
        session.record_answer("Q1", 1)
        draft = await session.save_draft()
        session.record_answer("Q1", 3)
        assert draft.answers == {"Q1": 1}

    def test_strict_resume_rejects_stale_draft(self, two_question_catalog, respondent):
        draft = Draft(
            provider_name="CloudCo",
            financial_entity_name="BancoX",
            user_name="ana",
            answers={"gone": 1},
            date="2026-10-18T09:00:00+00:00",
            last_question_index=0,
        )
        with pytest.raises(ValueError, match="Stale draft"):
            AssessmentSession(two_question_catalog, respondent, draft=draft, strict_drafts=True)


# =====================================================================
# Submission
# =====================================================================


class TestSubmit:

    @pytest.mark.asyncio
    async def test_submit_from_last_question(self, two_question_catalog, respondent):
        delivery = StubDelivery()
        handed_off = []
        session = AssessmentSession(
            two_question_catalog,
            respondent,
            chart_renderer=StubChartRenderer(),
            delivery=delivery,
            on_submit=handed_off.append,
        )
        session.answer(1)
        session.answer(3)

        outcome = await session.submit()

        assert outcome.type == "completed"
        assert session.is_completed
        assert session.state is SubmissionState.COMPLETED
        assert handed_off[0].answers == {"Q1": 1, "Q2": 3}

        step = session.current_step()
        assert isinstance(step, CompletedStep)
        assert step.payload == outcome.payload

    @pytest.mark.asyncio
    async def test_partial_answers_can_be_submitted(self, two_question_catalog, respondent):
        session = AssessmentSession(two_question_catalog, respondent)
        session.advance()
        outcome = await session.submit()
        assert outcome.type == "completed"
        assert outcome.payload.answers == {}

    @pytest.mark.asyncio
    async def test_completed_session_rejects_commands(self, two_question_catalog, respondent):
        session = AssessmentSession(two_question_catalog, respondent)
        session.advance()
        await session.submit()

        with pytest.raises(ValueError, match="already completed"):
            session.answer(1)
        with pytest.raises(ValueError, match="already completed"):
            await session.save_draft()

        again = await session.submit()
        assert again.type == "rejected"

    @pytest.mark.asyncio
    async def test_submit_refused_before_last_question(self, two_question_catalog, respondent):
        handed_off = []
        session = AssessmentSession(two_question_catalog, respondent, on_submit=handed_off.append)
        session.record_answer("Q1", 2)

        with pytest.raises(ValueError, match="only available on the last question"):
            await session.submit()
        assert session.state is SubmissionState.IDLE
        assert handed_off == []

        session.advance()
        outcome = await session.submit()
        assert outcome.type == "completed"

    @pytest.mark.asyncio
    async def test_empty_catalog_cannot_submit(self, empty_catalog, respondent):
        session = AssessmentSession(empty_catalog, respondent, language=Language.PT)
        with pytest.raises(ValueError, match="No questions available"):
            await session.submit()
