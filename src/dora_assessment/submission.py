"""SubmissionOrchestrator — the submit-vs-draft lifecycle's terminal step.

State machine::

    idle ──► submitting ──► completed   (terminal)
      ▲           │
      └── failed ◄┘        (assembly error, immediately back to idle)

``submit`` is accepted only in ``idle``, which is the single concurrency
guard: while a submission awaits the report collaborator, further triggers
are rejected.

Failure policy:
  - payload assembly or scoring raises: ``failed``, error recorded, back to
    ``idle``; nothing is handed off.
  - chart renderer missing, returning ``None`` or a non-string, or raising:
    logged, the report goes out without a chart.
  - delivery returning ``False`` or raising: logged, the submission still
    completes and ``on_submit`` still fires.
  - any other error while building the report: logged, the submission
    completes with ``delivered=False``.  Only cancellation leaves
    ``submitting`` without completing.

Timeouts around the delivery call belong to the caller: wrap ``submit`` in
``asyncio.wait_for``.  A cancelled submission returns to ``idle``.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Union

from dora_assessment.answers import AnswerStore
from dora_assessment.drafts import utc_now_iso
from dora_assessment.interfaces import ChartRenderer, ReportDelivery
from dora_assessment.models.catalog import Catalog, Language
from dora_assessment.models.report import CategoryScore, ChartData, ReportRequest
from dora_assessment.models.session import (
    Respondent,
    SubmissionOutcome,
    SubmissionPayload,
    SubmissionState,
)
from dora_assessment.report import ReportRenderer
from dora_assessment.scoring import scores_by_category

logger = logging.getLogger(__name__)

# Caller handoff; may be a plain function or a coroutine function.
SubmitHandler = Callable[[SubmissionPayload], Union[None, Awaitable[None]]]


class SubmissionOrchestrator:
    """Assembles the submission payload and drives the report pipeline.

    Args:
        catalog: the session's catalog
        language: language for chart labels and the report summary
        chart_renderer: optional chart collaborator; without one every
            report is sent without a chart
        delivery: optional report collaborator; without one the
            submission completes with ``delivered=False``
        on_submit: caller handoff, invoked once after the report step
        renderer: optional :class:`ReportRenderer` override
    """

    def __init__(
        self,
        catalog: Catalog,
        *,
        language: Language,
        chart_renderer: ChartRenderer | None = None,
        delivery: ReportDelivery | None = None,
        on_submit: SubmitHandler | None = None,
        renderer: ReportRenderer | None = None,
    ) -> None:
        self._catalog = catalog
        self._language = Language(language)
        self._chart_renderer = chart_renderer
        self._delivery = delivery
        self._on_submit = on_submit
        self._renderer = renderer or ReportRenderer()

        self._state = SubmissionState.IDLE
        self._last_error: str | None = None
        self._payload: SubmissionPayload | None = None

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def last_error(self) -> str | None:
        """Message of the most recent assembly failure, if any."""
        return self._last_error

    @property
    def payload(self) -> SubmissionPayload | None:
        """The handed-off payload once the submission completed."""
        return self._payload

    async def submit(
        self, answers: AnswerStore, respondent: Respondent
    ) -> SubmissionOutcome:
        """Run one submission attempt.

        Returns a ``SubmissionOutcome`` tagged "completed", "failed" or
        "rejected"; assembly and collaborator errors are never raised.
        """
        if self._state is not SubmissionState.IDLE:
            logger.warning(
                "Submit rejected for user=%s: orchestrator is %s",
                respondent.user_name, self._state.value,
            )
            return SubmissionOutcome(type="rejected", state=self._state)

        self._state = SubmissionState.SUBMITTING
        logger.info("Submission started for user=%s", respondent.user_name)

        # --- Assembly: any error here fails the attempt ---
        try:
            payload = self._assemble(answers, respondent)
            scores = scores_by_category(self._catalog, payload.answers)
            chart = self._renderer.build_chart_data(
                self._catalog, scores, self._language,
            )
        except Exception as exc:
            logger.exception("Submission payload assembly failed")
            self._last_error = str(exc) or exc.__class__.__name__
            self._state = SubmissionState.IDLE
            return SubmissionOutcome(
                type="failed",
                state=SubmissionState.FAILED,
                error=self._last_error,
            )

        # --- Report pipeline: best effort, never blocks completion ---
        try:
            delivered, chart_attached = await self._report(payload, scores, chart)
        except asyncio.CancelledError:
            logger.warning("Submission cancelled for user=%s", respondent.user_name)
            self._state = SubmissionState.IDLE
            raise
        except Exception:
            logger.exception(
                "Report stage failed for user=%s; completing without a report",
                respondent.user_name,
            )
            delivered, chart_attached = False, False

        self._state = SubmissionState.COMPLETED
        self._payload = payload
        self._last_error = None
        await self._handoff(payload)

        return SubmissionOutcome(
            type="completed",
            state=self._state,
            payload=payload,
            delivered=delivered,
            chart_attached=chart_attached,
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _assemble(
        self, answers: AnswerStore, respondent: Respondent
    ) -> SubmissionPayload:
        snapshot = answers.snapshot()
        return SubmissionPayload(
            provider_name=respondent.provider_name,
            financial_entity_name=respondent.financial_entity_name,
            user_name=respondent.user_name,
            answers=snapshot.answers,
            observations=snapshot.observations,
            date=utc_now_iso(),
        )

    async def _report(
        self,
        payload: SubmissionPayload,
        scores: list[CategoryScore],
        chart: ChartData,
    ) -> tuple[bool, bool]:
        """Render the chart and summary, then deliver.

        Returns ``(delivered, chart_attached)``.
        """
        chart_image = await self._render_chart(chart)
        request = ReportRequest(
            payload=payload,
            catalog=self._catalog,
            language=self._language,
            scores=scores,
            chart_image=chart_image,
            summary=self._render_summary(payload, scores),
        )
        delivered = await self._deliver(request)
        return delivered, chart_image is not None

    async def _render_chart(self, chart: ChartData) -> str | None:
        if self._chart_renderer is None:
            logger.warning("No chart renderer configured; report has no chart")
            return None
        try:
            image = await self._chart_renderer.render(chart)
        except Exception:
            logger.exception("Chart rendering failed; report has no chart")
            return None
        if image is None:
            logger.warning("Chart image unavailable; report has no chart")
            return None
        if not isinstance(image, str):
            logger.warning(
                "Chart renderer returned %s instead of a data URI; report has no chart",
                type(image).__name__,
            )
            return None
        return image

    def _render_summary(self, payload, scores) -> str | None:
        try:
            return self._renderer.render_summary(
                payload, self._catalog, scores, self._language,
            )
        except Exception:
            logger.exception("Report summary rendering failed")
            return None

    async def _deliver(self, request: ReportRequest) -> bool:
        if self._delivery is None:
            logger.warning("No report delivery configured; report not sent")
            return False
        try:
            delivered = bool(await self._delivery.deliver(request))
        except Exception:
            logger.exception("Report delivery raised")
            return False
        if delivered:
            logger.info("Report delivered for user=%s", request.payload.user_name)
        else:
            logger.error("Report delivery failed for user=%s", request.payload.user_name)
        return delivered

    async def _handoff(self, payload: SubmissionPayload) -> None:
        if self._on_submit is None:
            return
        result = self._on_submit(payload)
        if inspect.isawaitable(result):
            await result
