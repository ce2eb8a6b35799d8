"""
Factor resolution strategies.

Each strategy answers one lookup tier with ``try_resolve(key)`` and returns
an ``EmissionFactorRecord`` or None. The resolver runs them in order.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal

from app.pydantic_models.emission_factor import EmissionFactorRecord
from app.services.factors.default_factors import DefaultFactorTable, FactorEntry
from app.services.factors.store import FactorStore
from app.utils.constants import DEFAULT_REGION, DataQuality, FactorCategory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FactorKey:
    category: str
    type: str
    region: str | None = None


def _year_from_version(version) -> int | None:
    try:
        return int(version)
    except (TypeError, ValueError):
        return None


def record_from_entry(
    key: FactorKey, entry: FactorEntry, region: str | None = None
) -> EmissionFactorRecord:
    return EmissionFactorRecord(
        category=key.category,
        type=key.type,
        factor=entry.factor,
        unit=entry.unit,
        scope=entry.scope,
        source=entry.source,
        year=entry.year,
        gwp_version=entry.gwp_version,
        data_quality=DataQuality.MEDIUM,
        region=region if region is not None else key.region,
    )


class StoreFactorStrategy:
    """
    Look the factor up in the persistent store.

    Store failures are logged and reported as a miss so resolution can
    continue with the compiled defaults.
    """

    def __init__(self, store: FactorStore, default_region: str = DEFAULT_REGION):
        self.store = store
        self.default_region = default_region

    async def try_resolve(self, key: FactorKey) -> EmissionFactorRecord | None:
        region = key.region or self.default_region
        try:
            stored = await self.store.get_current_factor(key.category, key.type, region)
        except Exception as e:
            logger.warning(
                f"Factor store lookup failed for {key.category}/{key.type} ({region}), "
                f"falling back to defaults: {e}"
            )
            return None

        if not stored or stored.get("factor") is None:
            return None

        return EmissionFactorRecord(
            category=key.category,
            type=key.type,
            factor=Decimal(str(stored["factor"])),
            unit=stored["unit"],
            scope=stored["scope"],
            source=stored.get("source") or "Factor store",
            year=_year_from_version(stored.get("version")),
            gwp_version=stored.get("gwp_version"),
            data_quality=DataQuality.HIGH,
            region=region,
        )


class DefaultTableStrategy:
    """Look the factor up in the compiled default table."""

    def __init__(self, table: DefaultFactorTable):
        self.table = table

    async def try_resolve(self, key: FactorKey) -> EmissionFactorRecord | None:
        entry = self.table.get(key.category, key.type)
        if entry is None:
            return None
        return record_from_entry(key, entry)


class ElectricityRegionStrategy:
    """
    Use the region itself as the electricity type.

    The default electricity factors are keyed by region ("uk", "eu", ...),
    so a grid-average or residual-mix lookup for a region lands here.
    """

    def __init__(self, table: DefaultFactorTable):
        self.table = table

    async def try_resolve(self, key: FactorKey) -> EmissionFactorRecord | None:
        if key.category != FactorCategory.ELECTRICITY or not key.region:
            return None

        entry = self.table.get(FactorCategory.ELECTRICITY, key.region)
        if entry is None:
            return None

        logger.debug(f"Using regional electricity factor for {key.region} ({key.type})")
        return record_from_entry(key, entry)
