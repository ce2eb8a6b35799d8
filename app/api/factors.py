"""
Emission Factors API router.

Stored factors, compiled defaults and factor resolution.
"""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db_session, get_factor_resolver
from app.database.repositories import EmissionFactorRepository
from app.pydantic_models.emission_factor import (
    DefaultFactorPydModel,
    EmissionFactorPydModel,
    EmissionFactorRecord,
)
from app.services.factors.resolver import FactorResolver

router = APIRouter(
    prefix="/api/v1/factors",
    tags=["Emission Factors"],
)

logger = logging.getLogger(__name__)


@router.get("/", response_model=list[EmissionFactorPydModel])
async def list_emission_factors(
    skip: int = 0,
    limit: int = 100,
    category: str | None = None,
    region: str | None = None,
    session: AsyncSession = Depends(get_db_session),
):
    """
    List stored, active emission factors.

    Args:
        skip: Number of records to skip
        limit: Maximum number of records to return
        category: Filter by category (optional)
        region: Filter by region (optional)
    """
    repo = EmissionFactorRepository(session)
    return await repo.get_filtered(category=category, region=region, skip=skip, limit=limit)


@router.get("/resolve", response_model=EmissionFactorRecord)
async def resolve_emission_factor(
    category: str,
    type: str,
    region: str | None = None,
    resolver: FactorResolver = Depends(get_factor_resolver),
):
    """
    Resolve a factor the way calculations do: cache, store, then defaults.
    """
    record = await resolver.resolve(category, type, region)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No emission factor for {category}/{type}"
            + (f" in region {region}" if region else ""),
        )
    return record


@router.get("/defaults", response_model=dict[str, list[str]])
async def list_default_categories(resolver: FactorResolver = Depends(get_factor_resolver)):
    """Compiled default factor categories and the types in each."""
    table = resolver.table
    return {category: table.types(category) for category in table.categories()}


@router.get("/defaults/{category}", response_model=list[DefaultFactorPydModel])
async def list_default_factors(
    category: str,
    resolver: FactorResolver = Depends(get_factor_resolver),
):
    entries = resolver.table.entries(category)
    if not entries:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown factor category: {category}",
        )
    return [
        DefaultFactorPydModel(type=name, **entry.model_dump())
        for name, entry in entries.items()
    ]


@router.post("/cache/clear")
async def clear_factor_cache(resolver: FactorResolver = Depends(get_factor_resolver)):
    """Drop every cached factor, e.g. after the factor table was updated."""
    cleared = len(resolver.cache)
    resolver.clear_cache()
    logger.info(f"Cleared {cleared} cached emission factors")
    return {"cleared": cleared}


@router.get("/{factor_id}", response_model=EmissionFactorPydModel)
async def get_emission_factor(
    factor_id: UUID,
    session: AsyncSession = Depends(get_db_session),
):
    """
    Get emission factor by ID.
    """
    repo = EmissionFactorRepository(session)
    factor = await repo.get_by_id(factor_id)

    if not factor:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Emission factor {factor_id} not found",
        )

    return factor
