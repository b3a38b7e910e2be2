"""SqlDraftStore — the ``DraftStore`` collaborator backed by ``DraftRepository``.

One store instance is bound to a single request's ``AsyncSession`` and
caller identity; the request dependency commits the transaction.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from dora_assessment.interfaces import DraftStore
from dora_assessment.models.session import Draft

from dora_db.models.draft import AssessmentDraft
from dora_db.repository import DraftRepository


def row_to_draft(row: AssessmentDraft) -> Draft:
    """Map an ORM row back to the SDK ``Draft`` value."""
    return Draft(
        provider_name=row.provider_name,
        financial_entity_name=row.financial_entity_name,
        user_name=row.user_name,
        answers=row.answers or {},
        observations=row.observations or {},
        date=row.draft_date,
        last_question_index=row.last_question_index,
    )


class SqlDraftStore(DraftStore):
    """Persists drafts for one caller into ``assessment_drafts``.

    Args:
        db: the request-scoped session
        user_id: caller identity owning the drafts
        catalog_version: catalog the drafts belong to
        repo: optional repository override (tests inject an in-memory one)
    """

    def __init__(
        self,
        db: AsyncSession,
        *,
        user_id: str,
        catalog_version: str,
        repo: DraftRepository | None = None,
    ) -> None:
        self._db = db
        self._user_id = user_id
        self._catalog_version = catalog_version
        self._repo = repo or DraftRepository()

    async def save(self, draft: Draft) -> None:
        await self._repo.save_draft(
            self._db,
            user_id=self._user_id,
            catalog_version=self._catalog_version,
            draft=draft,
        )

    async def latest(self, user_name: str) -> Draft | None:
        row = await self._repo.get_latest_draft(
            self._db,
            self._user_id,
            user_name=user_name,
            catalog_version=self._catalog_version,
        )
        if row is None:
            return None
        return row_to_draft(row)
