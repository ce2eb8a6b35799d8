"""
EmissionFactor SQLAlchemy model.

Versioned emission factors keyed by category, subcategory and region.
"""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Index, Numeric, String, Uuid

from app.database import Base
from app.utils.constants import DEFAULT_REGION


class EmissionFactorDBModel(Base):
    """
    Emission factor store.

    Several versions of the same (category, subcategory, region) may exist;
    the current one is the active row with the highest version whose validity
    window contains today. Rows are written by the seeding/admin process and
    are read-only to the calculation engine.
    """

    __tablename__ = "emission_factors"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    category = Column(
        String(100),
        nullable=False,
        index=True,
        comment="Factor category (e.g., 'fuels', 'electricity', 'refrigerants')",
    )

    subcategory = Column(
        String(200),
        nullable=False,
        index=True,
        comment="Factor type within the category (e.g., 'diesel', 'r-134a')",
    )

    name = Column(
        String(200),
        nullable=False,
        comment="Display name (e.g., 'Diesel (average biofuel blend)')",
    )

    description = Column(String, nullable=True)

    factor = Column(
        Numeric(14, 6),
        nullable=False,
        comment="Emission factor value (kgCO2e per unit)",
    )

    unit = Column(
        String(50),
        nullable=False,
        comment="Factor unit (e.g., kgCO2e/litre, kgCO2e/kWh)",
    )

    scope = Column(
        String(20),
        nullable=False,
        comment="GHG Protocol scope (scope1, scope2 or scope3)",
    )

    source = Column(
        String(200),
        nullable=False,
        default="DEFRA 2025",
        comment="Provenance of the factor (e.g., 'DEFRA 2025', 'IEA')",
    )

    gwp_version = Column(
        String(10),
        nullable=True,
        default="AR5",
        comment="IPCC Assessment Report of the GWP values (AR4, AR5, AR6)",
    )

    region = Column(
        String(100),
        nullable=False,
        default=DEFAULT_REGION,
        index=True,
        comment="Region the factor applies to (UK, EU, US, Global, ...)",
    )

    version = Column(
        String(20),
        nullable=False,
        default="2025",
        comment="Factor set version, normally the publication year",
    )

    valid_from = Column(DateTime, nullable=False, default=datetime.utcnow)
    valid_to = Column(DateTime, nullable=True, comment="NULL while current")
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_emission_factors_lookup", "category", "subcategory", "is_active"),
        Index("ix_emission_factors_region_active", "region", "is_active"),
        Index("ix_emission_factors_validity", "valid_from", "valid_to"),
        {"comment": "Versioned emission factors for CO2e calculations"},
    )

    def __repr__(self):
        return (
            f"<EmissionFactorDBModel: {self.category}/{self.subcategory} "
            f"({self.region}, v{self.version})>"
        )
