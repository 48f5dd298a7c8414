"""create condominiums and activities tables"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_create_activities"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "condominiums",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("delivery_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_condominiums_company_id", "condominiums", ["company_id"], unique=False)

    op.create_table(
        "activities",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column(
            "condominium_id",
            sa.Integer(),
            sa.ForeignKey("condominiums.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column(
            "frequency", sa.String(length=255), nullable=False, server_default="Não se repete"
        ),
        sa.Column("expected_date", sa.Date(), nullable=True),
        sa.Column("start_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("completion_date", sa.Date(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_activities_company_id", "activities", ["company_id"], unique=False)
    op.create_index("ix_activities_condominium_id", "activities", ["condominium_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_activities_condominium_id", table_name="activities")
    op.drop_index("ix_activities_company_id", table_name="activities")
    op.drop_table("activities")
    op.drop_index("ix_condominiums_company_id", table_name="condominiums")
    op.drop_table("condominiums")
