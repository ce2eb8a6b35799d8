"""
Pydantic models for Emission Calculations and Results following kkb_fastapi pattern.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.utils.constants import CO2E_UNIT, CalculationSource


class CalculationResult(BaseModel):
    """
    Result of a single emissions calculation.

    Attributes are snake_case; serialising with ``by_alias=True`` (as FastAPI
    does for responses) yields the camelCase wire schema.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    co2e: Decimal = Field(
        ...,
        alias="co2e",
        ge=0,
        description="kgCO2e, rounded to 3 places",
        examples=[Decimal("254.600")],
    )
    unit: str = Field(CO2E_UNIT, examples=[CO2E_UNIT])
    scope: str = Field(..., examples=["scope1"])
    source_type: str = Field(..., examples=["stationary_combustion"])
    activity_type: str = Field(..., examples=["diesel"])
    activity_value: Decimal = Field(..., description="Quantity the factor was applied to")
    activity_unit: str = Field(..., examples=["litre"])
    emission_factor: Decimal = Field(..., description="Effective factor applied")
    emission_factor_unit: str = Field(..., examples=["kgCO2e/litre"])
    emission_factor_source: str = Field(..., examples=["DEFRA 2025"])
    emission_factor_year: int | None = Field(None, examples=[2025])
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Calculation string, data quality, provenance and source-specific details",
        examples=[{"calculation": "100 × 2.546 = 254.600 kgCO2e", "data_quality": "medium"}],
    )


class CalculationRequestBase(BaseModel):
    """
    Fields shared by every calculation request.

    Numeric inputs are passed through untyped and validated by the
    calculator, which reports the offending field.
    """

    company_id: UUID | None = Field(
        None, description="When set, the result is stored against this company"
    )
    reporting_period: str | None = Field(None, max_length=50, examples=["2025-Q1"])

    def calculator_inputs(self) -> dict[str, Any]:
        return self.model_dump(exclude={"company_id", "reporting_period"})


class StationaryCombustionRequest(CalculationRequestBase):
    fuel_type: str = Field(..., examples=["diesel"])
    quantity: Any = Field(..., examples=[100])
    biofuel_blend: Any = Field(0, description="Biofuel share in percent (0-100)")


class MobileCombustionRequest(CalculationRequestBase):
    fuel_type: str = Field(..., examples=["petrol"])
    fuel_used: Any = Field(None, description="Litres consumed")
    distance: Any = Field(None, description="Distance travelled")
    fuel_consumption: Any = Field(None, description="Litres per distance unit")


class FugitiveEmissionsRequest(CalculationRequestBase):
    refrigerant_type: str = Field(..., examples=["R-410A"])
    quantity: Any = Field(..., description="kg of refrigerant released")
    gwp_version: str = Field("AR5", examples=["AR5"])


class SupplierCertificate(BaseModel):
    """Contractual instrument backing a market-based electricity factor."""

    valid: bool = False
    retired: bool = False
    factor: Any = Field(None, description="kgCO2e/kWh stated on the certificate")
    certificate_id: str | None = None
    issuer: str | None = None


class ElectricityRequest(CalculationRequestBase):
    consumption: Any = Field(..., description="kWh consumed", examples=[1000])
    region: str = Field("uk", examples=["uk", "eu", "us"])
    method: str = Field("location", examples=["location", "market"])
    supplier_certificate: SupplierCertificate | None = None


class RoadTransportRequest(CalculationRequestBase):
    vehicle_type: str = Field(..., examples=["car-medium-petrol"])
    distance: Any = Field(..., description="km travelled")


class AirTravelRequest(CalculationRequestBase):
    flight_class: str = Field(..., examples=["long-haul-economy"])
    distance: Any = Field(..., description="km flown")


class AccommodationRequest(CalculationRequestBase):
    nights: Any = Field(..., examples=[3])


class WasteRequest(CalculationRequestBase):
    waste_type: str = Field(..., examples=["landfill"])
    weight: Any = Field(..., description="kg of waste")


class WaterRequest(CalculationRequestBase):
    volume: Any = Field(..., description="m³ of water")
    include_wastewater: Any = Field(True, description="Add wastewater treatment emissions")


class BatchCalculationEntry(BaseModel):
    source: CalculationSource
    inputs: dict[str, Any] = Field(default_factory=dict)


class BatchCalculationRequest(BaseModel):
    entries: list[BatchCalculationEntry] = Field(..., min_length=1)
    fail_fast: bool = Field(False, description="Stop at the first failing entry")


class BatchScopeStatistics(BaseModel):
    count: int
    total_co2e: Decimal


class BatchStatistics(BaseModel):
    total_entries: int
    total_processed: int
    total_errors: int
    success_rate: str = Field(..., examples=["100.00%"])
    total_co2e: Decimal
    by_scope: dict[str, BatchScopeStatistics]


class BatchError(BaseModel):
    index: int
    source: str
    error: str
    field: str | None = None


class BatchCalculationResponse(BaseModel):
    results: list[CalculationResult]
    statistics: BatchStatistics
    errors: list[BatchError]


class EmissionResultPydModel(BaseModel):
    """Stored calculation result."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    scope: str
    source_type: str
    activity_type: str
    activity_value: Decimal
    activity_unit: str
    co2e: Decimal
    unit: str
    emission_factor: Decimal
    emission_factor_unit: str
    emission_factor_source: str
    emission_factor_year: int | None = None
    calculation_metadata: dict[str, Any] | None = None
    reporting_period: str | None = None
    recorded_at: datetime
    created_at: datetime
    updated_at: datetime


class EmissionTotals(BaseModel):
    """Stored emissions for a company summed by scope."""

    company_id: UUID
    total_co2e: Decimal = Field(..., description="kgCO2e across all scopes")
    by_scope: dict[str, Decimal]
    count: int
