"""create_emission_factors_table

Revision ID: 3f9a1c2e7b10
Revises:
Create Date: 2025-12-01 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f9a1c2e7b10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "emission_factors",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "category",
            sa.String(length=100),
            nullable=False,
            comment="Factor category (e.g., 'fuels', 'electricity', 'refrigerants')",
        ),
        sa.Column(
            "subcategory",
            sa.String(length=200),
            nullable=False,
            comment="Factor type within the category (e.g., 'diesel', 'r-134a')",
        ),
        sa.Column(
            "name",
            sa.String(length=200),
            nullable=False,
            comment="Display name (e.g., 'Diesel (average biofuel blend)')",
        ),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column(
            "factor",
            sa.Numeric(precision=14, scale=6),
            nullable=False,
            comment="Emission factor value (kgCO2e per unit)",
        ),
        sa.Column(
            "unit",
            sa.String(length=50),
            nullable=False,
            comment="Factor unit (e.g., kgCO2e/litre, kgCO2e/kWh)",
        ),
        sa.Column(
            "scope",
            sa.String(length=20),
            nullable=False,
            comment="GHG Protocol scope (scope1, scope2 or scope3)",
        ),
        sa.Column(
            "source",
            sa.String(length=200),
            nullable=False,
            comment="Provenance of the factor (e.g., 'DEFRA 2025', 'IEA')",
        ),
        sa.Column(
            "gwp_version",
            sa.String(length=10),
            nullable=True,
            comment="IPCC Assessment Report of the GWP values (AR4, AR5, AR6)",
        ),
        sa.Column(
            "region",
            sa.String(length=100),
            nullable=False,
            comment="Region the factor applies to (UK, EU, US, Global, ...)",
        ),
        sa.Column(
            "version",
            sa.String(length=20),
            nullable=False,
            comment="Factor set version, normally the publication year",
        ),
        sa.Column("valid_from", sa.DateTime(), nullable=False),
        sa.Column("valid_to", sa.DateTime(), nullable=True, comment="NULL while current"),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        comment="Versioned emission factors for CO2e calculations",
    )
    op.create_index(op.f("ix_emission_factors_category"), "emission_factors", ["category"], unique=False)
    op.create_index(op.f("ix_emission_factors_subcategory"), "emission_factors", ["subcategory"], unique=False)
    op.create_index(op.f("ix_emission_factors_region"), "emission_factors", ["region"], unique=False)
    op.create_index(op.f("ix_emission_factors_is_active"), "emission_factors", ["is_active"], unique=False)
    op.create_index(
        "ix_emission_factors_lookup",
        "emission_factors",
        ["category", "subcategory", "is_active"],
        unique=False,
    )
    op.create_index(
        "ix_emission_factors_region_active",
        "emission_factors",
        ["region", "is_active"],
        unique=False,
    )
    op.create_index(
        "ix_emission_factors_validity",
        "emission_factors",
        ["valid_from", "valid_to"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_emission_factors_validity", table_name="emission_factors")
    op.drop_index("ix_emission_factors_region_active", table_name="emission_factors")
    op.drop_index("ix_emission_factors_lookup", table_name="emission_factors")
    op.drop_index(op.f("ix_emission_factors_is_active"), table_name="emission_factors")
    op.drop_index(op.f("ix_emission_factors_region"), table_name="emission_factors")
    op.drop_index(op.f("ix_emission_factors_subcategory"), table_name="emission_factors")
    op.drop_index(op.f("ix_emission_factors_category"), table_name="emission_factors")
    op.drop_table("emission_factors")
