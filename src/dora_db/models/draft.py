"""AssessmentDraft ORM model — one immutable row per saved draft.

Saving a draft always inserts; rows are never updated.  Resuming picks the
newest row for the (user_id, user_name) pair, so older drafts stay around
as history until ``dora-cleanup`` purges them.
"""

from sqlalchemy import CheckConstraint, Index, SmallInteger, Text
from sqlalchemy.orm import Mapped, mapped_column

from dora_db.models.base import AssessmentRecord, Base


class AssessmentDraft(AssessmentRecord, Base):
    """A resumable snapshot of an in-progress assessment."""

    __tablename__ = "assessment_drafts"

    last_question_index: Mapped[int] = mapped_column(
        SmallInteger, nullable=False, default=0,
    )
    # ISO-8601 timestamp carried by the Draft value itself
    draft_date: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        CheckConstraint("last_question_index >= 0", name="ck_draft_position"),
        # Newest-draft lookup on resume
        Index("ix_drafts_owner_created", "user_id", "user_name", "created_at"),
        # Retention purge
        Index("ix_drafts_created", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<AssessmentDraft(id={self.id!s}, user={self.user_id!r}, "
            f"respondent={self.user_name!r}, position={self.last_question_index})>"
        )
