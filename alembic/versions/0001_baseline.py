"""Initial schema creation

Revision ID: 0001_baseline
Revises:
Create Date: 2024-11-29
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_baseline"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # posts
    op.create_table(
        "log_messages",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("author", sa.String(length=128), nullable=False),
        sa.Column("version", sa.String(length=32), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column(
            "pinned", sa.Boolean(), nullable=False, server_default=sa.text("0")
        ),
        sa.Column("unpinned_at", sa.DateTime(), nullable=True),
        sa.Column(
            "archived", sa.Boolean(), nullable=False, server_default=sa.text("0")
        ),
        sa.Column("archived_at", sa.DateTime(), nullable=True),
        sa.Column("image_url", sa.String(length=512), nullable=True),
    )
    op.create_index("ix_log_messages_created_at", "log_messages", ["created_at"])
    op.create_index("ix_log_messages_archived", "log_messages", ["archived"])
    op.create_index("ix_log_messages_archived_at", "log_messages", ["archived_at"])

    # read signatures, one per (log, name)
    op.create_table(
        "read_signatures",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column(
            "log_id",
            sa.Integer(),
            sa.ForeignKey("log_messages.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("log_id", "name", name="uq_read_signature_log_name"),
    )
    op.create_index("ix_read_signatures_log_id", "read_signatures", ["log_id"])

    # comments and replies
    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("author", sa.String(length=128), nullable=False),
        sa.Column(
            "log_id",
            sa.Integer(),
            sa.ForeignKey("log_messages.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "parent_id",
            sa.Integer(),
            sa.ForeignKey("comments.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_comments_log_id", "comments", ["log_id"])
    op.create_index("ix_comments_parent_id", "comments", ["parent_id"])

    # reactions (no uniqueness, counts accumulate)
    op.create_table(
        "reactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("emoji", sa.String(length=32), nullable=False),
        sa.Column(
            "log_id",
            sa.Integer(),
            sa.ForeignKey("log_messages.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_reactions_log_id", "reactions", ["log_id"])

    # meetings
    op.create_table(
        "meetings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("scheduled_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_meetings_scheduled_at", "meetings", ["scheduled_at"])

    op.create_table(
        "meeting_points",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("author", sa.String(length=128), nullable=False),
        sa.Column(
            "meeting_id",
            sa.Integer(),
            sa.ForeignKey("meetings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_meeting_points_meeting_id", "meeting_points", ["meeting_id"])

    # administrators
    op.create_table(
        "admins",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=64), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("admins")
    op.drop_table("meeting_points")
    op.drop_table("meetings")
    op.drop_table("reactions")
    op.drop_table("comments")
    op.drop_table("read_signatures")
    op.drop_table("log_messages")
