"""create_emission_results_table

Revision ID: 8c4d2b6e1a97
Revises: 3f9a1c2e7b10
Create Date: 2025-12-01 09:05:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "8c4d2b6e1a97"
down_revision = "3f9a1c2e7b10"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "emission_results",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False, comment="Company the emissions belong to"),
        sa.Column("scope", sa.String(length=20), nullable=False, comment="GHG Protocol scope"),
        sa.Column(
            "source_type",
            sa.String(length=100),
            nullable=False,
            comment="Emission source tag (e.g., 'stationary_combustion')",
        ),
        sa.Column(
            "activity_type",
            sa.String(length=200),
            nullable=False,
            comment="e.g. 'diesel', 'uk', 'landfill'",
        ),
        sa.Column("activity_value", sa.Numeric(precision=20, scale=6), nullable=False),
        sa.Column("activity_unit", sa.String(length=50), nullable=False),
        sa.Column(
            "co2e",
            sa.Numeric(precision=20, scale=3),
            nullable=False,
            comment="Calculated CO2e in kg",
        ),
        sa.Column("unit", sa.String(length=20), nullable=False),
        sa.Column(
            "emission_factor",
            sa.Numeric(precision=14, scale=6),
            nullable=False,
            comment="Effective factor applied",
        ),
        sa.Column("emission_factor_unit", sa.String(length=50), nullable=False),
        sa.Column("emission_factor_source", sa.String(length=200), nullable=False),
        sa.Column("emission_factor_year", sa.Integer(), nullable=True),
        sa.Column(
            "calculation_metadata",
            sa.JSON(),
            nullable=True,
            comment="Calculation string, data quality and source-specific details",
        ),
        sa.Column("reporting_period", sa.String(length=50), nullable=True, comment="e.g. '2025-Q1'"),
        sa.Column("recorded_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        comment="Stored emission calculation results",
    )
    op.create_index(op.f("ix_emission_results_company_id"), "emission_results", ["company_id"], unique=False)
    op.create_index(
        "ix_emission_results_company_scope",
        "emission_results",
        ["company_id", "scope"],
        unique=False,
    )
    op.create_index("ix_emission_results_created_desc", "emission_results", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_emission_results_created_desc", table_name="emission_results")
    op.drop_index("ix_emission_results_company_scope", table_name="emission_results")
    op.drop_index(op.f("ix_emission_results_company_id"), table_name="emission_results")
    op.drop_table("emission_results")
