"""
Pydantic models for EmissionFactor following kkb_fastapi pattern.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.utils.constants import DEFAULT_REGION


class EmissionFactorRecord(BaseModel):
    """
    A resolved emission factor with its provenance.

    Produced by the factor resolver from either the factor store
    (``data_quality="high"``) or the compiled defaults (``"medium"``).
    """

    model_config = ConfigDict(frozen=True)

    category: str
    type: str
    factor: Decimal = Field(..., ge=0, description="kgCO2e per activity unit")
    unit: str = Field(..., examples=["kgCO2e/litre"])
    scope: str = Field(..., examples=["scope1"])
    source: str = Field(..., examples=["DEFRA 2025"])
    year: int | None = None
    gwp_version: str | None = None
    data_quality: str = Field(..., examples=["high", "medium"])
    region: str | None = None

    @property
    def activity_unit(self) -> str:
        """Denominator of the factor unit, e.g. ``litre`` for ``kgCO2e/litre``."""
        _, _, denominator = self.unit.partition("/")
        return denominator or self.unit


class EmissionFactorBase(BaseModel):
    """Base emission factor model."""

    category: str = Field(..., max_length=100, description="Factor category", examples=["fuels"])
    subcategory: str = Field(..., max_length=200, description="Factor type", examples=["diesel"])
    name: str = Field(..., max_length=200, description="Display name")
    description: Optional[str] = Field(None, description="Additional notes")
    factor: Decimal = Field(..., ge=0, description="CO2e emission factor value")
    unit: str = Field(..., max_length=50, description="Factor unit", examples=["kgCO2e/litre"])
    scope: str = Field(..., max_length=20, description="GHG Protocol scope", examples=["scope1"])
    source: str = Field("DEFRA 2025", max_length=200, description="Source of emission factor")
    gwp_version: Optional[str] = Field(None, max_length=10)
    region: str = Field(DEFAULT_REGION, max_length=100)
    version: str = Field("2025", max_length=20)
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    is_active: bool = True


class EmissionFactorCreate(EmissionFactorBase):
    """Model for creating emission factor."""
    pass


class EmissionFactorPydModel(EmissionFactorBase):
    """Model for emission factor response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime
    updated_at: datetime


class DefaultFactorPydModel(BaseModel):
    """A compiled default factor as listed by the factors API."""

    type: str
    factor: Decimal
    unit: str
    scope: str
    source: str
    year: int | None = None
    gwp_version: str | None = None
