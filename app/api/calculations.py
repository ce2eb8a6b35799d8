"""
Emissions Calculations API router.

One endpoint per emission source plus a batch endpoint. Results are returned
as calculated; when the request carries a ``company_id`` they are also stored.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db_session, get_emissions_calculator
from app.database.repositories import EmissionResultRepository
from app.pydantic_models.calculation import (
    AccommodationRequest,
    AirTravelRequest,
    BatchCalculationRequest,
    BatchCalculationResponse,
    CalculationRequestBase,
    CalculationResult,
    ElectricityRequest,
    FugitiveEmissionsRequest,
    MobileCombustionRequest,
    RoadTransportRequest,
    StationaryCombustionRequest,
    WasteRequest,
    WaterRequest,
)
from app.services.calculators.emissions_calculator import EmissionsCalculator
from app.utils.constants import CalculationSource

router = APIRouter(
    prefix="/api/v1/calculations",
    tags=["Calculations"],
)

logger = logging.getLogger(__name__)


async def _calculate(
    source: CalculationSource,
    request: CalculationRequestBase,
    calculator: EmissionsCalculator,
    session: AsyncSession,
) -> CalculationResult:
    result = await calculator.calculate(source, **request.calculator_inputs())

    if request.company_id is not None:
        repo = EmissionResultRepository(session)
        stored = await repo.create_from_result(
            request.company_id, result, reporting_period=request.reporting_period
        )
        await session.commit()
        logger.info(f"Stored {source.value} result {stored.id} for company {request.company_id}")

    return result


@router.post("/stationary-combustion", response_model=CalculationResult)
async def calculate_stationary_combustion(
    request: StationaryCombustionRequest,
    calculator: EmissionsCalculator = Depends(get_emissions_calculator),
    session: AsyncSession = Depends(get_db_session),
):
    """
    Scope 1 emissions from fuel burnt in owned equipment.

    Example:
        ```
        POST /api/v1/calculations/stationary-combustion
        {"fuel_type": "diesel", "quantity": 100, "biofuel_blend": 10}
        ```
    """
    return await _calculate(CalculationSource.STATIONARY_COMBUSTION, request, calculator, session)


@router.post("/mobile-combustion", response_model=CalculationResult)
async def calculate_mobile_combustion(
    request: MobileCombustionRequest,
    calculator: EmissionsCalculator = Depends(get_emissions_calculator),
    session: AsyncSession = Depends(get_db_session),
):
    """Scope 1 emissions from owned vehicles, by fuel used or distance."""
    return await _calculate(CalculationSource.MOBILE_COMBUSTION, request, calculator, session)


@router.post("/fugitive-emissions", response_model=CalculationResult)
async def calculate_fugitive_emissions(
    request: FugitiveEmissionsRequest,
    calculator: EmissionsCalculator = Depends(get_emissions_calculator),
    session: AsyncSession = Depends(get_db_session),
):
    """Scope 1 emissions from refrigerant leaks."""
    return await _calculate(CalculationSource.FUGITIVE_EMISSIONS, request, calculator, session)


@router.post("/electricity", response_model=CalculationResult)
async def calculate_electricity(
    request: ElectricityRequest,
    calculator: EmissionsCalculator = Depends(get_emissions_calculator),
    session: AsyncSession = Depends(get_db_session),
):
    """
    Scope 2 emissions from purchased electricity.

    ``method`` is ``location`` (grid average) or ``market`` (supplier
    certificate, else residual mix).
    """
    return await _calculate(CalculationSource.ELECTRICITY, request, calculator, session)


@router.post("/road-transport", response_model=CalculationResult)
async def calculate_road_transport(
    request: RoadTransportRequest,
    calculator: EmissionsCalculator = Depends(get_emissions_calculator),
    session: AsyncSession = Depends(get_db_session),
):
    return await _calculate(CalculationSource.ROAD_TRANSPORT, request, calculator, session)


@router.post("/air-travel", response_model=CalculationResult)
async def calculate_air_travel(
    request: AirTravelRequest,
    calculator: EmissionsCalculator = Depends(get_emissions_calculator),
    session: AsyncSession = Depends(get_db_session),
):
    return await _calculate(CalculationSource.AIR_TRAVEL, request, calculator, session)


@router.post("/accommodation", response_model=CalculationResult)
async def calculate_accommodation(
    request: AccommodationRequest,
    calculator: EmissionsCalculator = Depends(get_emissions_calculator),
    session: AsyncSession = Depends(get_db_session),
):
    return await _calculate(CalculationSource.ACCOMMODATION, request, calculator, session)


@router.post("/waste", response_model=CalculationResult)
async def calculate_waste(
    request: WasteRequest,
    calculator: EmissionsCalculator = Depends(get_emissions_calculator),
    session: AsyncSession = Depends(get_db_session),
):
    """Scope 3 emissions from waste disposal; ``weight`` in kg."""
    return await _calculate(CalculationSource.WASTE, request, calculator, session)


@router.post("/water", response_model=CalculationResult)
async def calculate_water(
    request: WaterRequest,
    calculator: EmissionsCalculator = Depends(get_emissions_calculator),
    session: AsyncSession = Depends(get_db_session),
):
    return await _calculate(CalculationSource.WATER, request, calculator, session)


@router.post("/batch", response_model=BatchCalculationResponse)
async def calculate_batch(
    request: BatchCalculationRequest,
    calculator: EmissionsCalculator = Depends(get_emissions_calculator),
):
    """
    Calculate a list of entries of mixed source types.

    Failed entries are reported in ``errors`` unless ``fail_fast`` is set,
    in which case the first failure is returned as the response error.

    Example:
        ```
        POST /api/v1/calculations/batch
        {
            "entries": [
                {"source": "waste", "inputs": {"waste_type": "landfill", "weight": 1000}},
                {"source": "accommodation", "inputs": {"nights": 2}}
            ]
        }
        ```
    """
    logger.info(f"Batch calculation request with {len(request.entries)} entries")
    entries = [entry.model_dump() for entry in request.entries]
    return await calculator.calculate_batch(entries, fail_fast=request.fail_fast)
