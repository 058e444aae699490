"""Create users and notes tables

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates `users` (credential store) and `notes` (owned by users.id).
How:   IF NOT EXISTS semantics are not used: databases created by hand before
       migrations existed should be stamped with `alembic stamp 001` instead.

Rollback: downgrade() drops both tables (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "email",
            sa.String(255),
            nullable=False,
            comment="Login identifier (unique)",
        ),
        sa.Column(
            "password",
            sa.Text(),
            nullable=False,
            comment="bcrypt digest of the user's password",
        ),
        sa.Column(
            "city",
            sa.String(255),
            nullable=False,
            server_default=sa.text("''"),
            comment="Free-text city used for the weather widget",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "notes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "title",
            sa.Text(),
            nullable=False,
            server_default=sa.text("'Untitled'"),
            comment="Note title; 'Untitled' when submitted blank",
        ),
        sa.Column(
            "content",
            sa.Text(),
            nullable=False,
            server_default=sa.text("''"),
            comment="Note body",
        ),
        sa.Column(
            "creator",
            sa.Integer(),
            nullable=False,
            comment="Owning user; immutable after creation",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["creator"], ["users.id"], name="fk_notes_creator_users", ondelete="CASCADE"
        ),
    )

    # Every note query filters on creator
    op.create_index("idx_notes_creator", "notes", ["creator"])


def downgrade() -> None:
    op.drop_index("idx_notes_creator", table_name="notes")
    op.drop_table("notes")
    op.drop_table("users")
