"""create saved_vehicle table

Revision ID: 0001
Revises:
Create Date: 2026-09-28 10:12:41
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from kentekenpy.adapters.sqlalchemy.mappings import UTCDateTime

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "saved_vehicle",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("identifier", sa.String(length=32), nullable=False),
        sa.Column("fields", sa.JSON(), nullable=False),
        sa.Column("fields_version", sa.Integer(), nullable=False),
        sa.Column("added_by", sa.String(length=255), nullable=False),
        sa.Column("added_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_saved_vehicle")),
        sa.UniqueConstraint("identifier", name=op.f("uq_saved_vehicle_identifier")),
    )
    op.create_index("ix_saved_vehicle_added_by", "saved_vehicle", ["added_by"])


def downgrade() -> None:
    op.drop_index("ix_saved_vehicle_added_by", table_name="saved_vehicle")
    op.drop_table("saved_vehicle")
