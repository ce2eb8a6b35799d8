"""
Stored Emissions API router.

Read-only access to calculation results stored against a company.
"""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db_session
from app.database.repositories import EmissionResultRepository
from app.pydantic_models.calculation import EmissionResultPydModel, EmissionTotals
from app.utils.constants import ScopeEnum

router = APIRouter(
    prefix="/api/v1/emissions",
    tags=["Emissions"],
)

logger = logging.getLogger(__name__)


@router.get("/", response_model=list[EmissionResultPydModel])
async def list_emissions(
    company_id: UUID,
    scope: ScopeEnum | None = None,
    skip: int = 0,
    limit: int = 100,
    session: AsyncSession = Depends(get_db_session),
):
    """
    List a company's stored results, newest first.

    Args:
        company_id: Company to list results for
        scope: Filter by GHG scope (optional)
    """
    repo = EmissionResultRepository(session)
    return await repo.get_by_company(
        company_id, scope=scope.value if scope else None, skip=skip, limit=limit
    )


@router.get("/totals", response_model=EmissionTotals)
async def get_emission_totals(
    company_id: UUID,
    session: AsyncSession = Depends(get_db_session),
):
    """Total stored kgCO2e for a company, overall and per scope."""
    repo = EmissionResultRepository(session)
    totals = await repo.get_totals_by_scope(company_id)
    return EmissionTotals(company_id=company_id, **totals)
