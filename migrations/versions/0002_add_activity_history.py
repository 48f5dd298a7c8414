"""add activity history table"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0002_add_activity_history"
down_revision = "0001_create_activities"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "activity_history",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "activity_id",
            sa.Integer(),
            sa.ForeignKey("activities.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("reference_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="PENDENTE"),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint(
            "activity_id", "reference_date", name="uq_activity_history_reference"
        ),
    )
    op.create_index("ix_activity_history_activity_id", "activity_history", ["activity_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_activity_history_activity_id", table_name="activity_history")
    op.drop_table("activity_history")
