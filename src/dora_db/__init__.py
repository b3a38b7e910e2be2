"""dora_db — PostgreSQL persistence for assessment drafts and submissions.

This package provides the ORM models, async engine factory, repositories,
and the ``SqlDraftStore`` implementation of the SDK's ``DraftStore``
interface.  It is consumed by the FastAPI server.
"""

from dora_db.config import DatabaseSettings, load_db_settings
from dora_db.engine import configure_engine, get_engine, get_session_factory, session_scope
from dora_db.models.draft import AssessmentDraft
from dora_db.models.submission import AssessmentSubmission
from dora_db.repository import DraftRepository, SubmissionRepository
from dora_db.store import SqlDraftStore

__all__ = [
    "AssessmentDraft",
    "AssessmentSubmission",
    "DatabaseSettings",
    "DraftRepository",
    "SqlDraftStore",
    "SubmissionRepository",
    "configure_engine",
    "get_engine",
    "get_session_factory",
    "load_db_settings",
    "session_scope",
]
