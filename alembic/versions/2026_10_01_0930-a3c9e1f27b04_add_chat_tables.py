"""add chat tables

Revision ID: a3c9e1f27b04
Revises: initialize_database
Create Date: 2026-10-01 09:30:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a3c9e1f27b04"
down_revision: Union[str, None] = "initialize_database"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema: chat_messages, chat_read_cursors and chat_session_status."""
    op.create_table(
        "chat_messages",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("session_id", sa.Text(), nullable=False),
        sa.Column("author_account_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column(
            "is_staff", sa.Boolean(), nullable=False, server_default=sa.text("false")
        ),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("origin_ip", sa.String(length=64), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["author_account_id"], ["users.id"], ondelete="SET NULL"
        ),
    )
    op.create_index(
        "ix_chat_messages_session_id", "chat_messages", ["session_id"], unique=False
    )
    op.create_index(
        "ix_chat_messages_created_at", "chat_messages", ["created_at"], unique=False
    )
    op.create_index(
        "ix_chat_messages_session_id_created_at",
        "chat_messages",
        ["session_id", "created_at"],
        unique=False,
    )
    op.create_index(
        "ix_chat_messages_author_account_id",
        "chat_messages",
        ["author_account_id"],
        unique=False,
    )

    op.create_table(
        "chat_read_cursors",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("session_id", sa.Text(), nullable=False),
        sa.Column("account_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("is_staff", sa.Boolean(), nullable=False),
        sa.Column("last_read_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["account_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "ix_chat_read_cursors_session_id",
        "chat_read_cursors",
        ["session_id"],
        unique=False,
    )
    op.create_index(
        "ix_chat_read_cursors_account_id",
        "chat_read_cursors",
        ["account_id"],
        unique=False,
    )
    op.create_index(
        "uq_chat_read_cursors_session_account_role",
        "chat_read_cursors",
        ["session_id", "account_id", "is_staff"],
        unique=True,
        postgresql_where=sa.text("account_id IS NOT NULL"),
    )
    op.create_index(
        "uq_chat_read_cursors_session_anonymous_role",
        "chat_read_cursors",
        ["session_id", "is_staff"],
        unique=True,
        postgresql_where=sa.text("account_id IS NULL"),
    )

    op.create_table(
        "chat_session_status",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("session_id", sa.Text(), nullable=False),
        sa.Column(
            "is_completed",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "completed_by_account_id", postgresql.UUID(as_uuid=True), nullable=True
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["completed_by_account_id"], ["users.id"], ondelete="SET NULL"
        ),
    )
    op.create_index(
        "ix_chat_session_status_session_id",
        "chat_session_status",
        ["session_id"],
        unique=True,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(
        "ix_chat_session_status_session_id", table_name="chat_session_status"
    )
    op.drop_table("chat_session_status")
    op.drop_index(
        "uq_chat_read_cursors_session_anonymous_role", table_name="chat_read_cursors"
    )
    op.drop_index(
        "uq_chat_read_cursors_session_account_role", table_name="chat_read_cursors"
    )
    op.drop_index("ix_chat_read_cursors_account_id", table_name="chat_read_cursors")
    op.drop_index("ix_chat_read_cursors_session_id", table_name="chat_read_cursors")
    op.drop_table("chat_read_cursors")
    op.drop_index(
        "ix_chat_messages_author_account_id", table_name="chat_messages"
    )
    op.drop_index(
        "ix_chat_messages_session_id_created_at", table_name="chat_messages"
    )
    op.drop_index("ix_chat_messages_created_at", table_name="chat_messages")
    op.drop_index("ix_chat_messages_session_id", table_name="chat_messages")
    op.drop_table("chat_messages")
