"""AssessmentSubmission ORM model — the terminal record of a completed assessment."""

from sqlalchemy import Boolean, Index, Text, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from dora_db.models.base import AssessmentRecord, Base


class AssessmentSubmission(AssessmentRecord, Base):
    """One row per completed questionnaire."""

    __tablename__ = "assessment_submissions"

    language: Mapped[str] = mapped_column(Text, nullable=False)
    # [{category_id, score, answered, total}] in catalog order; score null = no data
    scores: Mapped[list] = mapped_column(
        JSONB, nullable=False, server_default=text("'[]'::jsonb"),
    )
    # Whether the report collaborator confirmed delivery
    delivered: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false"),
    )
    submitted_at: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        # History listing, newest first
        Index("ix_submissions_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<AssessmentSubmission(id={self.id!s}, user={self.user_id!r}, "
            f"respondent={self.user_name!r}, delivered={self.delivered})>"
        )
