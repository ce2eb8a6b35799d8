"""
Repository for EmissionResult database operations.

Handles all database interactions for stored calculation results.
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.repositories.base import BaseRepository
from app.database.schemas import EmissionResultDBModel
from app.pydantic_models.calculation import CalculationResult


class EmissionResultRepository(BaseRepository[EmissionResultDBModel]):
    """Repository for emission result operations."""

    def __init__(self, session: AsyncSession):
        """
        Initialize emission result repository.

        Args:
            session: Async database session
        """
        super().__init__(EmissionResultDBModel, session)

    async def create_from_result(
        self, company_id: UUID, result: CalculationResult, **additional: Any
    ) -> EmissionResultDBModel:
        """
        Store a calculation result against a company.

        Args:
            company_id: Owning company
            result: Calculation result to store
            **additional: Extra column values (e.g., reporting_period)

        Returns:
            Created emission result
        """
        metadata = result.model_dump(mode="json", include={"metadata"})["metadata"]
        return await self.create(
            company_id=company_id,
            scope=result.scope,
            source_type=result.source_type,
            activity_type=result.activity_type,
            activity_value=result.activity_value,
            activity_unit=result.activity_unit,
            co2e=result.co2e,
            unit=result.unit,
            emission_factor=result.emission_factor,
            emission_factor_unit=result.emission_factor_unit,
            emission_factor_source=result.emission_factor_source,
            emission_factor_year=result.emission_factor_year,
            calculation_metadata=metadata,
            **additional,
        )

    async def get_by_company(
        self,
        company_id: UUID,
        scope: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[EmissionResultDBModel]:
        """
        Get a company's stored results, newest first.

        Args:
            company_id: Company UUID
            scope: Optional scope filter (e.g., 'scope1')
            skip: Number of records to skip
            limit: Maximum number of records to return
        """
        stmt = select(self.model).where(self.model.company_id == company_id)
        if scope:
            stmt = stmt.where(self.model.scope == scope)

        stmt = stmt.order_by(self.model.recorded_at.desc()).offset(skip).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_totals_by_scope(self, company_id: UUID) -> Dict[str, Any]:
        """
        Sum a company's stored emissions by scope.

        Returns:
            Dict with total_co2e, by_scope {scope: kgCO2e} and count
        """
        stmt = (
            select(
                self.model.scope,
                func.sum(self.model.co2e),
                func.count(self.model.id),
            )
            .where(self.model.company_id == company_id)
            .group_by(self.model.scope)
        )
        result = await self.session.execute(stmt)

        by_scope: Dict[str, Decimal] = {}
        count = 0
        for scope, total, scope_count in result.all():
            by_scope[scope] = Decimal(str(total or 0))
            count += scope_count

        return {
            "total_co2e": sum(by_scope.values(), Decimal("0")),
            "by_scope": by_scope,
            "count": count,
        }
