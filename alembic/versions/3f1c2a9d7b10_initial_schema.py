"""initial schema: users, auth tokens, projects, material presets

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-18 09:30:00.000000

Tables may already exist when the app created them with
Base.metadata.create_all() first, so each one is created only if missing.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _table_exists(table_name):
    """Check if a table exists."""
    bind = op.get_bind()
    insp = inspect(bind)
    return table_name in insp.get_table_names()


def upgrade() -> None:
    if not _table_exists("users"):
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("email", sa.String(), nullable=False, unique=True),
            sa.Column("password_hash", sa.String(), nullable=False),
            sa.Column("name", sa.String(), nullable=False, server_default=""),
            sa.Column("role", sa.String(), nullable=True),
            sa.Column("subscription_status", sa.String(), nullable=True),
            sa.Column("subscription_expiry", sa.DateTime(), nullable=True),
            sa.Column("company_name", sa.String(), nullable=True),
            sa.Column("company_logo_url", sa.String(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
        )
        op.create_index("ix_users_id", "users", ["id"])

    if not _table_exists("auth_tokens"):
        op.create_table(
            "auth_tokens",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("token_hash", sa.String(), nullable=False),
            sa.Column("token_type", sa.String(), nullable=True),
            sa.Column("expires_at", sa.DateTime(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=True),
        )
        op.create_index("ix_auth_tokens_id", "auth_tokens", ["id"])

    if not _table_exists("projects"):
        op.create_table(
            "projects",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("data", sa.JSON(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
        )
        op.create_index("ix_projects_id", "projects", ["id"])
        op.create_index("ix_projects_user_id", "projects", ["user_id"])

    if not _table_exists("material_presets"):
        op.create_table(
            "material_presets",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("name", sa.String(), nullable=False, unique=True),
            sa.Column("cement_kg_per_m3", sa.Float(), nullable=False),
            sa.Column("sand_m3_per_m3", sa.Float(), nullable=False),
            sa.Column("gravel_m3_per_m3", sa.Float(), nullable=False),
            sa.Column("water_l_per_m3", sa.Float(), nullable=False),
            sa.Column("steel_kg_per_m3_min", sa.Float(), nullable=False),
            sa.Column("steel_kg_per_m3_max", sa.Float(), nullable=False),
            sa.Column("cost_concrete_per_m3", sa.Float(), nullable=True),
            sa.Column("cost_steel_per_kg", sa.Float(), nullable=True),
            sa.Column("notes", sa.String(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
        )
        op.create_index("ix_material_presets_id", "material_presets", ["id"])


def downgrade() -> None:
    op.drop_table("material_presets")
    op.drop_table("projects")
    op.drop_table("auth_tokens")
    op.drop_table("users")
