"""Initial schema for cases, case documents and verdicts."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    case_status = sa.Enum("uploaded", "analyzing", "completed", "failed", name="case_status")

    op.create_table(
        "cases",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("status", case_status, nullable=False, server_default="uploaded"),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "case_documents",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("case_id", sa.String(length=36), sa.ForeignKey("cases.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("filename", sa.String(length=255), nullable=False),
        sa.Column("content_type", sa.String(length=100), nullable=False),
        sa.Column("party", sa.String(length=100), nullable=False, server_default="Unknown"),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("bucket", sa.String(length=63), nullable=False, server_default="case-documents"),
        sa.Column("object_key", sa.String(length=512), nullable=False),
        sa.Column("raw_text", sa.Text(), nullable=True),
        sa.Column("analysis", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_case_documents_case_position", "case_documents", ["case_id", "position"])

    op.create_table(
        "verdicts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("case_id", sa.String(length=36), sa.ForeignKey("cases.id", ondelete="CASCADE"), nullable=False),
        sa.Column("model_used", sa.String(length=80), nullable=False),
        sa.Column("verdict", sa.Text(), nullable=False),
        sa.Column("confidence", sa.String(length=255), nullable=False),
        sa.Column("result", sa.JSON(), nullable=False),
        sa.Column("artifact_bucket", sa.String(length=63), nullable=False, server_default="verdicts"),
        sa.Column("artifact_key", sa.String(length=512), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_verdicts_case_created", "verdicts", ["case_id", "created_at"])


def downgrade() -> None:
    op.drop_index("idx_verdicts_case_created", table_name="verdicts")
    op.drop_table("verdicts")
    op.drop_index("idx_case_documents_case_position", table_name="case_documents")
    op.drop_table("case_documents")
    op.drop_table("cases")
    op.execute("DROP TYPE IF EXISTS case_status")
