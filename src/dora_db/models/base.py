"""Declarative base and the columns every assessment table shares.

Drafts and submissions both record who answered (the caller's ``user_id``
and the respondent identity), which catalog version they answered, and the
two answer maps.  ``AssessmentRecord`` holds those columns once so the two
tables cannot drift apart.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import MetaData, Text, text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Deterministic constraint names so autogenerated migrations are stable.
# Check constraints are named explicitly on the table.
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_N_name)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssessmentRecord:
    """Mixin: id, ownership, respondent identity, answer maps and created_at."""

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )

    # --- Ownership ---
    # Caller identity from the X-User-ID header
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    # Catalog version the answers refer to
    catalog_version: Mapped[str] = mapped_column(Text, nullable=False)

    # --- Respondent identity ---
    user_name: Mapped[str] = mapped_column(Text, nullable=False)
    provider_name: Mapped[str] = mapped_column(Text, nullable=False)
    financial_entity_name: Mapped[str] = mapped_column(Text, nullable=False)

    # --- Answers ---
    # {qid: value}
    answers: Mapped[dict] = mapped_column(
        JSONB, nullable=False, server_default=text("'{}'::jsonb"),
    )
    # {qid: text}
    observations: Mapped[dict] = mapped_column(
        JSONB, nullable=False, server_default=text("'{}'::jsonb"),
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=_utcnow,
    )
