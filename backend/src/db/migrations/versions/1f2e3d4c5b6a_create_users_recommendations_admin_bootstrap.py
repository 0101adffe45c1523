"""
Create users, recommendations and admin_bootstrap tables.

Revision ID: 1f2e3d4c5b6a
Revises:
Create Date: 2026-10-19 10:12:41.204117

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "1f2e3d4c5b6a"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False,
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(255),
            nullable=False,
            comment="'sub' claim - unique identifier from the identity provider",
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column(
            "role", sa.String(16), nullable=False, comment="'admin' or 'user', never changed",
        ),
        *_timestamps(),
    )
    op.create_index("ix_users_user_id", "users", ["user_id"], unique=True)
    op.create_index("ix_users_created_at", "users", ["created_at"])

    op.create_table(
        "recommendations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("genre", sa.String(50), nullable=False),
        sa.Column("link", sa.String(2048), nullable=False),
        sa.Column("blurb", sa.Text(), nullable=False),
        sa.Column(
            "user_id",
            sa.String(255),
            sa.ForeignKey("users.user_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("author_name", sa.Text(), nullable=False),
        sa.Column("is_staff_pick", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_recommendations_genre", "recommendations", ["genre"])
    op.create_index("ix_recommendations_user_id", "recommendations", ["user_id"])
    op.create_index("ix_recommendations_created_at", "recommendations", ["created_at"])

    # Single row (id=1) claimed by the first user ever provisioned
    op.create_table(
        "admin_bootstrap",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_admin_bootstrap_created_at", "admin_bootstrap", ["created_at"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_admin_bootstrap_created_at", table_name="admin_bootstrap")
    op.drop_table("admin_bootstrap")
    op.drop_index("ix_recommendations_created_at", table_name="recommendations")
    op.drop_index("ix_recommendations_user_id", table_name="recommendations")
    op.drop_index("ix_recommendations_genre", table_name="recommendations")
    op.drop_table("recommendations")
    op.drop_index("ix_users_created_at", table_name="users")
    op.drop_index("ix_users_user_id", table_name="users")
    op.drop_table("users")
