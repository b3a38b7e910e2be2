"""Create assessment_drafts and assessment_submissions.

Drafts are insert-only snapshots (newest row wins on resume); submissions
hold the terminal payload plus the category scores computed at submit time.
Constraint names follow the naming convention in ``dora_db.models.base``.

Revision ID: 20261018_initial
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

# revision identifiers, used by Alembic.
revision = "20261018_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # --- Drafts ---
    op.create_table(
        "assessment_drafts",
        sa.Column("id", UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("catalog_version", sa.Text(), nullable=False),
        sa.Column("user_name", sa.Text(), nullable=False),
        sa.Column("provider_name", sa.Text(), nullable=False),
        sa.Column("financial_entity_name", sa.Text(), nullable=False),
        sa.Column(
            "answers", JSONB(), nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "observations", JSONB(), nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("last_question_index", sa.SmallInteger(), nullable=False),
        sa.Column("draft_date", sa.Text(), nullable=False),
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False),
        sa.CheckConstraint("last_question_index >= 0", name="ck_draft_position"),
        sa.PrimaryKeyConstraint("id", name="pk_assessment_drafts"),
    )
    op.create_index(
        "ix_drafts_owner_created",
        "assessment_drafts",
        ["user_id", "user_name", "created_at"],
    )
    op.create_index("ix_drafts_created", "assessment_drafts", ["created_at"])

    # --- Submissions ---
    op.create_table(
        "assessment_submissions",
        sa.Column("id", UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("catalog_version", sa.Text(), nullable=False),
        sa.Column("language", sa.Text(), nullable=False),
        sa.Column("user_name", sa.Text(), nullable=False),
        sa.Column("provider_name", sa.Text(), nullable=False),
        sa.Column("financial_entity_name", sa.Text(), nullable=False),
        sa.Column(
            "answers", JSONB(), nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "observations", JSONB(), nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "scores", JSONB(), nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column(
            "delivered", sa.Boolean(), nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column("submitted_at", sa.Text(), nullable=False),
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_assessment_submissions"),
    )
    op.create_index(
        "ix_submissions_user_created",
        "assessment_submissions",
        ["user_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_submissions_user_created", table_name="assessment_submissions")
    op.drop_table("assessment_submissions")
    op.drop_index("ix_drafts_created", table_name="assessment_drafts")
    op.drop_index("ix_drafts_owner_created", table_name="assessment_drafts")
    op.drop_table("assessment_drafts")
