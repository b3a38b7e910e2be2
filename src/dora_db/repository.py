"""Async CRUD repositories for drafts and submissions.

All public methods accept an ``AsyncSession`` so the caller controls
transaction boundaries: methods ``flush()`` but never ``commit()``.

The repositories deliberately avoid business-logic validation — that
belongs in the SDK layer.
"""

from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from dora_assessment.models.report import CategoryScore
from dora_assessment.models.session import Draft, SubmissionPayload

from dora_db.models.draft import AssessmentDraft
from dora_db.models.submission import AssessmentSubmission


class DraftRepository:
    """Async read/write operations on the ``assessment_drafts`` table."""

    async def save_draft(
        self,
        db: AsyncSession,
        *,
        user_id: str,
        catalog_version: str,
        draft: Draft,
    ) -> AssessmentDraft:
        """Insert a new draft row; existing rows are left untouched."""
        row = AssessmentDraft(
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
        db.add(row)
        await db.flush()
        return row

    async def get_latest_draft(
        self,
        db: AsyncSession,
        user_id: str,
        *,
        user_name: str | None = None,
        catalog_version: str | None = None,
    ) -> AssessmentDraft | None:
        """Return the newest draft for ``user_id``, optionally narrowed."""
        stmt = select(AssessmentDraft).where(AssessmentDraft.user_id == user_id)
        if user_name is not None:
            stmt = stmt.where(AssessmentDraft.user_name == user_name)
        if catalog_version is not None:
            stmt = stmt.where(AssessmentDraft.catalog_version == catalog_version)
        stmt = stmt.order_by(AssessmentDraft.created_at.desc()).limit(1)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_drafts(
        self,
        db: AsyncSession,
        user_id: str,
        *,
        limit: int = 20,
        offset: int = 0,
    ) -> list[AssessmentDraft]:
        """List drafts for a user, most recent first."""
        stmt = (
            select(AssessmentDraft)
            .where(AssessmentDraft.user_id == user_id)
            .order_by(AssessmentDraft.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def delete_drafts(
        self, db: AsyncSession, user_id: str, *, user_name: str | None = None,
    ) -> int:
        """Delete a user's drafts (e.g. after submission).  Returns the row count."""
        stmt = delete(AssessmentDraft).where(AssessmentDraft.user_id == user_id)
        if user_name is not None:
            stmt = stmt.where(AssessmentDraft.user_name == user_name)
        result = await db.execute(stmt)
        await db.flush()
        return result.rowcount or 0

    async def purge_old_drafts(self, db: AsyncSession, *, older_than_days: int) -> int:
        """Delete drafts created more than ``older_than_days`` days ago.

        ``older_than_days=0`` deletes every draft.  Returns the row count.
        """
        stmt = delete(AssessmentDraft)
        if older_than_days > 0:
            cutoff = datetime.now(timezone.utc) - timedelta(days=older_than_days)
            stmt = stmt.where(AssessmentDraft.created_at < cutoff)
        result = await db.execute(stmt)
        await db.flush()
        return result.rowcount or 0


class SubmissionRepository:
    """Async read/write operations on the ``assessment_submissions`` table."""

    async def save_submission(
        self,
        db: AsyncSession,
        *,
        user_id: str,
        catalog_version: str,
        language: str,
        payload: SubmissionPayload,
        scores: list[CategoryScore],
        delivered: bool,
    ) -> AssessmentSubmission:
        """Insert the terminal record of a completed assessment."""
        row = AssessmentSubmission(
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
        db.add(row)
        await db.flush()
        return row

    async def list_submissions(
        self,
        db: AsyncSession,
        user_id: str,
        *,
        limit: int = 20,
        offset: int = 0,
    ) -> list[AssessmentSubmission]:
        """List a user's submissions, most recent first."""
        stmt = (
            select(AssessmentSubmission)
            .where(AssessmentSubmission.user_id == user_id)
            .order_by(AssessmentSubmission.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())
