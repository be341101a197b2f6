"""initial_role_user_role_permission

Revision ID: 3f7c2a91d0b4
Revises:
Create Date: 2026-10-18 09:12:44.218305

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f7c2a91d0b4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema - role, app_user, role_permission."""

    op.create_table(
        "role",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_system", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_role_name"),
        sa.UniqueConstraint("slug", name="uq_role_slug"),
    )

    op.create_table(
        "app_user",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="VIEWER"),
        sa.Column("role_id", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["role_id"], ["role.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("email", name="uq_app_user_email"),
        sa.CheckConstraint(
            "role IN ('ADMIN','MANAGER','DISPATCHER','ACCOUNTANT','AGENT_MANAGER',"
            "'REP','DRIVER','SUPPLIER','VIEWER')",
            name="ck_app_user_role",
        ),
    )
    op.create_index("ix_app_user_role", "app_user", ["role"])
    op.create_index("ix_app_user_role_id", "app_user", ["role_id"])

    op.create_table(
        "role_permission",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("role_id", sa.String(), nullable=False),
        sa.Column("permission_key", sa.String(length=200), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["role_id"], ["role.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "role_id", "permission_key", name="uq_role_permission_key"
        ),
    )
    op.create_index("ix_role_permission_role_id", "role_permission", ["role_id"])


def downgrade() -> None:
    """Downgrade schema - drop role_permission, app_user, role."""
    op.drop_index("ix_role_permission_role_id", table_name="role_permission")
    op.drop_table("role_permission")
    op.drop_index("ix_app_user_role_id", table_name="app_user")
    op.drop_index("ix_app_user_role", table_name="app_user")
    op.drop_table("app_user")
    op.drop_table("role")
