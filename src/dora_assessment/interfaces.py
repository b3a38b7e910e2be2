"""Abstract interfaces for the collaborators around the assessment core.

These ABCs define the contract that external implementations must fulfil.
The SDK ships no chart renderer or delivery channel; ``dora_db`` provides a
database-backed ``DraftStore``.

Typical integration flow::

    session = AssessmentSession(
        catalog, respondent,
        language=Language.ES,
        chart_renderer=MyChartRenderer(),
        delivery=MyPdfMailer(),
        draft_store=SqlDraftStore(db, user_id=uid, catalog_version="dora_v1"),
        on_submit=handle_payload,
    )
    session.answer(75)
    ...
    outcome = await session.submit()
"""

from abc import ABC, abstractmethod

from dora_assessment.models.report import ChartData, ReportRequest
from dora_assessment.models.session import Draft


class ChartRenderer(ABC):
    """Renders the per-category score chart into an image.

    Implementations may return ``None`` (or raise) when no image can be
    produced; the submission continues without a chart in that case.
    """

    @abstractmethod
    async def render(self, chart: ChartData) -> str | None:
        """Render ``chart`` and return the image as a base64 data URI.

        Parameters
        ----------
        chart:
            Category labels and scores in catalog order.  Categories without
            data carry ``None`` and should be drawn as "no data", not as 0.
        """
        ...


class ReportDelivery(ABC):
    """Assembles the final report (e.g. a PDF) and sends it to a channel."""

    @abstractmethod
    async def deliver(self, request: ReportRequest) -> bool:
        """Build and deliver the report.

        Returns
        -------
        bool
            ``True`` if the channel accepted the report.  ``False`` or an
            exception are both treated as a non-fatal delivery failure.
        """
        ...


class DraftStore(ABC):
    """Persists drafts on behalf of the caller.

    The SDK never decides draft identity or resolves conflicts between
    drafts; it only hands over new ``Draft`` values and asks for the most
    recent one on resume.
    """

    @abstractmethod
    async def save(self, draft: Draft) -> None:
        """Persist ``draft``."""
        ...

    @abstractmethod
    async def latest(self, user_name: str) -> Draft | None:
        """Return the most recent draft for ``user_name``, if any."""
        ...
