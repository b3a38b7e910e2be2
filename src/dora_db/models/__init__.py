"""ORM models for dora_db."""

from dora_db.models.base import Base
from dora_db.models.draft import AssessmentDraft
from dora_db.models.submission import AssessmentSubmission

__all__ = ["Base", "AssessmentDraft", "AssessmentSubmission"]
