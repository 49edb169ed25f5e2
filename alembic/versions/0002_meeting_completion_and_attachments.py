"""Add meeting archival, point completion/notes and log attachments

Revision ID: 0002_meeting_completion_and_attachments
Revises: 0001_baseline
Create Date: 2025-01-01
"""

from __future__ import annotations
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision = "0002_meeting_completion_and_attachments"
down_revision = "0001_baseline"
branch_labels = None
depends_on = None


def _has_column(bind, table_name: str, column_name: str) -> bool:
    insp = inspect(bind)
    cols = [c["name"] for c in insp.get_columns(table_name)]
    return column_name in cols


def _has_index(bind, table_name: str, index_name: str) -> bool:
    insp = inspect(bind)
    return index_name in {ix["name"] for ix in insp.get_indexes(table_name)}


def upgrade() -> None:
    bind = op.get_bind()
    with op.batch_alter_table("meetings") as batch:
        if not _has_column(bind, "meetings", "archived"):
            batch.add_column(
                sa.Column(
                    "archived",
                    sa.Boolean(),
                    nullable=False,
                    server_default=sa.text("0"),
                )
            )
        if not _has_column(bind, "meetings", "archived_at"):
            batch.add_column(sa.Column("archived_at", sa.DateTime(), nullable=True))
    if not _has_index(bind, "meetings", "ix_meetings_archived"):
        op.create_index("ix_meetings_archived", "meetings", ["archived"])
    with op.batch_alter_table("meeting_points") as batch:
        if not _has_column(bind, "meeting_points", "completed"):
            batch.add_column(
                sa.Column(
                    "completed",
                    sa.Boolean(),
                    nullable=False,
                    server_default=sa.text("0"),
                )
            )
        if not _has_column(bind, "meeting_points", "completed_at"):
            batch.add_column(sa.Column("completed_at", sa.DateTime(), nullable=True))
        if not _has_column(bind, "meeting_points", "notes"):
            batch.add_column(sa.Column("notes", sa.Text(), nullable=True))

    if "log_attachments" not in set(inspect(bind).get_table_names()):
        op.create_table(
            "log_attachments",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column(
                "log_id",
                sa.Integer(),
                sa.ForeignKey("log_messages.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("filename", sa.String(length=255), nullable=False),
            sa.Column("original_name", sa.String(length=255), nullable=False),
            sa.Column("mime_type", sa.String(length=128), nullable=False),
            sa.Column("size", sa.Integer(), nullable=False),
            sa.Column("url", sa.String(length=512), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
        )
        op.create_index("ix_log_attachments_log_id", "log_attachments", ["log_id"])


def downgrade() -> None:
    bind = op.get_bind()
    if _has_index(bind, "meetings", "ix_meetings_archived"):
        op.drop_index("ix_meetings_archived", table_name="meetings")
    if "log_attachments" in set(inspect(bind).get_table_names()):
        op.drop_table("log_attachments")
    with op.batch_alter_table("meeting_points") as batch:
        for col in ("notes", "completed_at", "completed"):
            if _has_column(bind, "meeting_points", col):
                batch.drop_column(col)
    with op.batch_alter_table("meetings") as batch:
        for col in ("archived_at", "archived"):
            if _has_column(bind, "meetings", col):
                batch.drop_column(col)
