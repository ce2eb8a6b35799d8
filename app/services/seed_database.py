"""
Database seeding service for loading the default emission factors.

Usage:
    from app.services.seed_database import FactorSeeder

    async with FactorSeeder() as seeder:
        stats = await seeder.seed_all(clear_existing=True)
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.database.repositories import EmissionFactorRepository
from app.database.session_manager.db_session import Database
from app.services.factors.default_factors import DefaultFactorTable, FactorEntry
from app.utils.constants import DEFAULT_REGION, ElectricityFactorType, FactorCategory

logger = logging.getLogger(__name__)


class FactorSeeder:
    """Loads a ``DefaultFactorTable`` into the ``emission_factors`` table."""

    def __init__(
        self,
        session: AsyncSession | None = None,
        table: DefaultFactorTable | None = None,
        default_region: str = DEFAULT_REGION,
    ):
        """
        Initialize the factor seeder.

        Args:
            session: Optional async database session. If not provided, will create one.
            table: Factors to load, the compiled DEFRA defaults when None
            default_region: Region assigned to non-electricity factors
        """
        self._session = session
        self._external_session = session is not None
        self.table = table or DefaultFactorTable()
        self.default_region = default_region

    async def __aenter__(self):
        """Context manager entry."""
        if not self._external_session:
            db = Database()
            self._session = await db.__aenter__()
            self._db_context = db
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        if not self._external_session and hasattr(self, "_db_context"):
            await self._db_context.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def session(self) -> AsyncSession:
        """Get the database session."""
        if not self._session:
            raise RuntimeError("Session not initialized. Use as context manager.")
        return self._session

    def factor_rows(self) -> list[dict[str, Any]]:
        """
        Rows for every default factor.

        Electricity factors are keyed by region in the default table; they are
        stored as grid-average rows for that region.
        """
        rows = []
        for category in self.table.categories():
            for name, entry in self.table.entries(category).items():
                if category == FactorCategory.ELECTRICITY:
                    rows.append(
                        self._row(category, ElectricityFactorType.GRID_AVERAGE, name.upper(), entry)
                    )
                else:
                    rows.append(self._row(category, name, self.default_region, entry))
        return rows

    @staticmethod
    def _row(category: str, subcategory: str, region: str, entry: FactorEntry) -> dict[str, Any]:
        return {
            "category": category,
            "subcategory": subcategory,
            "name": f"{subcategory.replace('-', ' ').title()} ({region})",
            "factor": entry.factor,
            "unit": entry.unit,
            "scope": entry.scope,
            "source": entry.source,
            "gwp_version": entry.gwp_version,
            "region": region,
            "version": str(entry.year) if entry.year else "1",
        }

    async def seed_all(self, clear_existing: bool = False) -> dict[str, Any]:
        """
        Seed the default factors.

        Args:
            clear_existing: If True, delete stored factors before seeding

        Returns:
            Dictionary with seeding statistics
        """
        logger.info("Starting emission factor seeding")
        repo = EmissionFactorRepository(self.session)
        stats: dict[str, Any] = {"cleared": 0, "emission_factors": 0, "by_category": {}}

        try:
            if clear_existing:
                stats["cleared"] = await repo.delete_all()
                logger.info(f"Cleared {stats['cleared']} existing emission factors")

            rows = self.factor_rows()
            await repo.bulk_create(rows)
            await self.session.commit()
        except Exception as e:
            logger.error(f"Error during emission factor seeding: {e}", exc_info=True)
            await self.session.rollback()
            raise

        stats["emission_factors"] = len(rows)
        for row in rows:
            stats["by_category"][row["category"]] = stats["by_category"].get(row["category"], 0) + 1

        logger.info(f"Emission factor seeding completed: {stats}")
        return stats
