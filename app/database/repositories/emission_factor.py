"""
Repository for EmissionFactor database operations.

Handles all database interactions for emission factors.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Integer, cast, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.repositories.base import BaseRepository
from app.database.schemas import EmissionFactorDBModel


class EmissionFactorRepository(BaseRepository[EmissionFactorDBModel]):
    """Repository for emission factor operations."""

    def __init__(self, session: AsyncSession):
        """
        Initialize emission factor repository.

        Args:
            session: Async database session
        """
        super().__init__(EmissionFactorDBModel, session)

    async def get_current_factor(
        self,
        category: str,
        subcategory: str,
        region: str,
        now: Optional[datetime] = None,
    ) -> Optional[EmissionFactorDBModel]:
        """
        Get the currently valid factor for a category, subcategory and region.

        A row is current when it is active and ``valid_from <= now`` and
        ``valid_to`` is unset or ``>= now``. Subcategory and region match
        case-insensitively. The highest version wins, compared as an
        integer since versions are publication years.

        Args:
            category: Factor category (e.g., 'fuels')
            subcategory: Factor type (e.g., 'diesel')
            region: Region code (e.g., 'UK')
            now: Reference time, defaults to utcnow

        Returns:
            The current emission factor, or None
        """
        now = now or datetime.utcnow()
        stmt = (
            select(self.model)
            .where(
                self.model.category == category,
                func.lower(self.model.subcategory) == subcategory.lower(),
                func.lower(self.model.region) == region.lower(),
                self.model.is_active.is_(True),
                self.model.valid_from <= now,
                or_(self.model.valid_to.is_(None), self.model.valid_to >= now),
            )
            .order_by(cast(self.model.version, Integer).desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_filtered(
        self,
        category: Optional[str] = None,
        region: Optional[str] = None,
        active_only: bool = True,
        skip: int = 0,
        limit: int = 100,
    ) -> List[EmissionFactorDBModel]:
        """
        List stored factors with optional category/region filters.

        Args:
            category: Filter by category (optional)
            region: Filter by region, case-insensitive (optional)
            active_only: Exclude inactive rows
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of emission factors ordered by category and subcategory
        """
        stmt = select(self.model)

        if category:
            stmt = stmt.where(self.model.category == category)
        if region:
            stmt = stmt.where(func.lower(self.model.region) == region.lower())
        if active_only:
            stmt = stmt.where(self.model.is_active.is_(True))

        stmt = (
            stmt.order_by(
                self.model.category,
                self.model.subcategory,
                cast(self.model.version, Integer).desc(),
            )
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_all(self) -> int:
        """
        Delete every stored factor.

        Returns:
            Number of rows deleted
        """
        stmt = delete(self.model)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
