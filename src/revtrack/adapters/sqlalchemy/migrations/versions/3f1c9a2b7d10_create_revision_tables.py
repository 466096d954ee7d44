"""create service_revision and service_tag tables

Revision ID: 3f1c9a2b7d10
Revises:
Create Date: 2025-03-02 10:14:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from revtrack.adapters.sqlalchemy.mappings import UTCDateTime

revision = "3f1c9a2b7d10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "service_revision",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("service_name", sa.String(length=200), nullable=False),
        sa.Column("rev_id", sa.String(length=64), nullable=True),
        sa.Column("commit_id", sa.String(length=16), nullable=True),
        sa.Column("deployed", sa.SmallInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_service_revision")),
        sa.UniqueConstraint("service_name", name=op.f("uq_service_revision_service_name")),
    )
    op.create_table(
        "service_tag",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("service_name", sa.String(length=200), nullable=False),
        sa.Column("tag", sa.String(length=50), nullable=False),
        sa.Column("uat", sa.SmallInteger(), nullable=False),
        sa.Column("prod_beta", sa.SmallInteger(), nullable=False),
        sa.Column("prod_alpha", sa.SmallInteger(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_service_tag")),
        sa.UniqueConstraint("service_name", name=op.f("uq_service_tag_service_name")),
    )


def downgrade() -> None:
    op.drop_table("service_tag")
    op.drop_table("service_revision")
