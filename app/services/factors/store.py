"""
Persistent factor store adapters.

The resolver only depends on the ``FactorStore`` protocol; the database
adapter is one implementation, tests use in-memory fakes.
"""
import logging
from typing import Any, Protocol

from app.database.repositories import EmissionFactorRepository
from app.database.session_manager.db_session import Database

logger = logging.getLogger(__name__)


class FactorStore(Protocol):
    async def get_current_factor(
        self, category: str, subtype: str, region: str
    ) -> dict[str, Any] | None:
        """
        Return the current factor as a dict with keys ``factor``, ``unit``,
        ``source``, ``version``, ``gwp_version`` and ``scope``, or None.
        """
        ...


class DatabaseFactorStore:
    """
    ``FactorStore`` over the ``emission_factors`` table.

    Opens a short-lived session per lookup, so it can be shared by the
    application-wide resolver. Raises ``DatabaseNotInitialized`` when the
    database has not been set up; the resolver treats that as a miss.
    """

    async def get_current_factor(
        self, category: str, subtype: str, region: str
    ) -> dict[str, Any] | None:
        async with Database() as session:
            repo = EmissionFactorRepository(session)
            row = await repo.get_current_factor(category, subtype, region)

        if row is None:
            logger.debug(f"No stored factor for {category}/{subtype} in {region}")
            return None

        return {
            "factor": row.factor,
            "unit": row.unit,
            "source": row.source,
            "version": row.version,
            "gwp_version": row.gwp_version,
            "scope": row.scope,
        }
