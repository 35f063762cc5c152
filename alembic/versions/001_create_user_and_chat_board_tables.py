"""Create chat_board and user tables

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "chat_board",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(length=256), nullable=False),
        sa.Column("username", sa.String(length=128), nullable=False),
        sa.Column("password_hash", sa.String(length=256), nullable=False),
        sa.Column("is_email_verified", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("email_verification_token", sa.String(length=128), nullable=True),
        sa.Column("email_verification_token_expires", sa.DateTime(), nullable=True),
        sa.Column("forgot_password_token", sa.String(length=128), nullable=True),
        sa.Column("forgot_password_expiry", sa.DateTime(), nullable=True),
        sa.Column("refresh_token", sa.String(length=1024), nullable=True),
        sa.Column("chat_board_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["chat_board_id"], ["chat_board.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("chat_board_id"),
    )
    op.create_index(op.f("ix_user_email"), "user", ["email"], unique=True)
    op.create_index(op.f("ix_user_username"), "user", ["username"], unique=True)
    op.create_index(op.f("ix_user_email_verification_token"), "user", ["email_verification_token"], unique=False)
    op.create_index(op.f("ix_user_forgot_password_token"), "user", ["forgot_password_token"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_user_forgot_password_token"), table_name="user")
    op.drop_index(op.f("ix_user_email_verification_token"), table_name="user")
    op.drop_index(op.f("ix_user_username"), table_name="user")
    op.drop_index(op.f("ix_user_email"), table_name="user")
    op.drop_table("user")
    op.drop_table("chat_board")
