"""In-memory collaborators for the report pipeline and draft storage.

Each fake records its calls so tests can assert on what the orchestrator
handed over.  ``HangingDelivery`` blocks until released, which makes the
``submitting`` state observable from a test.
"""

import asyncio
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from dora_assessment.interfaces import ChartRenderer, DraftStore, ReportDelivery
from dora_assessment.models.report import ChartData, ReportRequest
from dora_assessment.models.session import Draft

CHART_IMAGE = "data:image/png;base64,iVBORw0KGgo="


class StubChartRenderer(ChartRenderer):
    """Returns a fixed image, ``None``, or raises, as configured."""

    def __init__(self, image: str | None = CHART_IMAGE, error: Exception | None = None):
        self._image = image
        self._error = error
        self.charts: list[ChartData] = []

    async def render(self, chart: ChartData) -> str | None:
        self.charts.append(chart)
        if self._error is not None:
            raise self._error
        return self._image


class StubDelivery(ReportDelivery):
    """Returns ``result`` (or raises ``error``) and records every request."""

    def __init__(self, result: bool = True, error: Exception | None = None):
        self._result = result
        self._error = error
        self.requests: list[ReportRequest] = []

    async def deliver(self, request: ReportRequest) -> bool:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        return self._result


class HangingDelivery(ReportDelivery):
    """Blocks in ``deliver`` until ``release()`` is called."""

    def __init__(self, result: bool = True):
        self._result = result
        self.started = asyncio.Event()
        self._release = asyncio.Event()
        self.calls = 0

    def release(self) -> None:
        self._release.set()

    async def deliver(self, request: ReportRequest) -> bool:
        self.calls += 1
        self.started.set()
        await self._release.wait()
        return self._result


class MemoryDraftStore(DraftStore):
    """Keeps drafts in a list; ``latest`` returns the newest per user name."""

    def __init__(self):
        self.drafts: list[Draft] = []

    async def save(self, draft: Draft) -> None:
        self.drafts.append(draft)

    async def latest(self, user_name: str) -> Draft | None:
        for draft in reversed(self.drafts):
            if draft.user_name == user_name:
                return draft
        return None


# =====================================================================
# Repository doubles for the server layer
# =====================================================================


@dataclass
class MockDraftRow:
    """In-memory stand-in for the AssessmentDraft ORM model."""

    user_id: str
    catalog_version: str
    user_name: str
    provider_name: str
    financial_entity_name: str
    answers: dict
    observations: dict
    last_question_index: int
    draft_date: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class MockSubmissionRow:
    """In-memory stand-in for the AssessmentSubmission ORM model."""

    user_id: str
    catalog_version: str
    language: str
    user_name: str
    provider_name: str
    financial_entity_name: str
    answers: dict
    observations: dict
    scores: list
    delivered: bool
    submitted_at: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class MockDraftRepository:
    """Mirrors DraftRepository's interface over a list of MockDraftRow."""

    def __init__(self):
        self.rows: list[MockDraftRow] = []

    async def save_draft(self, db, *, user_id, catalog_version, draft):
        row = MockDraftRow(
            user_id=user_id,
            catalog_version=catalog_version,
            user_name=draft.user_name,
            provider_name=draft.provider_name,
            financial_entity_name=draft.financial_entity_name,
            answers=dict(draft.answers),
            observations=dict(draft.observations),
            last_question_index=draft.last_question_index,
            draft_date=draft.date,
        )
        self.rows.append(row)
        return row

    async def get_latest_draft(self, db, user_id, *, user_name=None, catalog_version=None):
        for row in reversed(self.rows):
            if row.user_id != user_id:
                continue
            if user_name is not None and row.user_name != user_name:
                continue
            if catalog_version is not None and row.catalog_version != catalog_version:
                continue
            return row
        return None

    async def list_drafts(self, db, user_id, *, limit=20, offset=0):
        rows = [r for r in reversed(self.rows) if r.user_id == user_id]
        return rows[offset:offset + limit]

    async def delete_drafts(self, db, user_id, *, user_name=None):
        keep = [
            r for r in self.rows
            if r.user_id != user_id or (user_name is not None and r.user_name != user_name)
        ]
        removed = len(self.rows) - len(keep)
        self.rows = keep
        return removed

    async def purge_old_drafts(self, db, *, older_than_days):
        cutoff = datetime.now(timezone.utc) - timedelta(days=older_than_days)
        keep = [r for r in self.rows if older_than_days > 0 and r.created_at >= cutoff]
        removed = len(self.rows) - len(keep)
        self.rows = keep
        return removed


class MockSubmissionRepository:
    """Mirrors SubmissionRepository's interface over a list of MockSubmissionRow."""

    def __init__(self):
        self.rows: list[MockSubmissionRow] = []

    async def save_submission(
        self, db, *, user_id, catalog_version, language, payload, scores, delivered,
    ):
        row = MockSubmissionRow(
            user_id=user_id,
            catalog_version=catalog_version,
            language=language,
            user_name=payload.user_name,
            provider_name=payload.provider_name,
            financial_entity_name=payload.financial_entity_name,
            answers=dict(payload.answers),
            observations=dict(payload.observations),
            scores=[s.model_dump() for s in scores],
            delivered=delivered,
            submitted_at=payload.date,
        )
        self.rows.append(row)
        return row

    async def list_submissions(self, db, user_id, *, limit=20, offset=0):
        rows = [r for r in reversed(self.rows) if r.user_id == user_id]
        return rows[offset:offset + limit]


class FlakySubmissionRepository(MockSubmissionRepository):
    """Raises on the first ``failures`` saves, then behaves normally."""

    def __init__(self, failures: int = 1):
        super().__init__()
        self.failures = failures

    async def save_submission(self, db, **kwargs):
        if self.failures > 0:
            self.failures -= 1
            raise RuntimeError("db down")
        return await super().save_submission(db, **kwargs)
