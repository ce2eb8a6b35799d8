"""
EmissionResult SQLAlchemy model.

Stores calculation results a caller chose to keep against a company.
"""
import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Index, Integer, Numeric, String, Uuid

from app.database import Base
from app.utils.constants import CO2E_UNIT


class EmissionResultDBModel(Base):
    """
    Calculated emission result.

    A snapshot of a ``CalculationResult``: the factor value and provenance are
    copied, not referenced, so later factor updates do not rewrite history.
    """

    __tablename__ = "emission_results"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    company_id = Column(
        Uuid(as_uuid=True),
        nullable=False,
        index=True,
        comment="Company the emissions belong to",
    )

    scope = Column(String(20), nullable=False, comment="GHG Protocol scope")
    source_type = Column(
        String(100),
        nullable=False,
        comment="Emission source tag (e.g., 'stationary_combustion')",
    )
    activity_type = Column(String(200), nullable=False, comment="e.g. 'diesel', 'uk', 'landfill'")
    activity_value = Column(Numeric(20, 6), nullable=False)
    activity_unit = Column(String(50), nullable=False)

    # Rounded to 3 places by the calculator
    co2e = Column(Numeric(20, 3), nullable=False, comment="Calculated CO2e in kg")
    unit = Column(String(20), nullable=False, default=CO2E_UNIT)

    emission_factor = Column(Numeric(14, 6), nullable=False, comment="Effective factor applied")
    emission_factor_unit = Column(String(50), nullable=False)
    emission_factor_source = Column(String(200), nullable=False)
    emission_factor_year = Column(Integer, nullable=True)

    calculation_metadata = Column(
        JSON,
        nullable=True,
        default=dict,
        comment="Calculation string, data quality and source-specific details",
    )

    reporting_period = Column(String(50), nullable=True, comment="e.g. '2025-Q1'")
    recorded_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_emission_results_company_scope", "company_id", "scope"),
        Index("ix_emission_results_created_desc", "created_at"),
        {"comment": "Stored emission calculation results"},
    )

    def __repr__(self):
        return f"<EmissionResultDBModel: {self.co2e} {self.unit} ({self.scope}/{self.source_type})>"
