"""
Emission factor resolver.

Resolves ``(category, type, region)`` to an ``EmissionFactorRecord``:
cache first, then each strategy in order (store, compiled defaults,
electricity regional fallback). The first hit is cached and returned.
"""
import logging
from typing import Protocol

from app.pydantic_models.emission_factor import EmissionFactorRecord
from app.services.factors.cache import FactorCache, make_cache_key
from app.services.factors.default_factors import DefaultFactorTable
from app.services.factors.store import FactorStore
from app.services.factors.strategies import (
    DefaultTableStrategy,
    ElectricityRegionStrategy,
    FactorKey,
    StoreFactorStrategy,
)
from app.utils.constants import DEFAULT_REGION

logger = logging.getLogger(__name__)


class FactorStrategy(Protocol):
    async def try_resolve(self, key: FactorKey) -> EmissionFactorRecord | None:
        ...


class FactorResolver:
    """
    Ordered chain of factor strategies behind a TTL cache.

    Example:
        >>> resolver = FactorResolver.build()
        >>> record = await resolver.resolve("fuels", "diesel")
        >>> record.factor
        Decimal('2.546')
    """

    def __init__(
        self,
        strategies: list[FactorStrategy],
        cache: FactorCache | None = None,
        table: DefaultFactorTable | None = None,
    ):
        self.strategies = list(strategies)
        self.cache = cache if cache is not None else FactorCache()
        self.table = table or DefaultFactorTable()

    @classmethod
    def build(
        cls,
        store: FactorStore | None = None,
        cache: FactorCache | None = None,
        table: DefaultFactorTable | None = None,
        default_region: str = DEFAULT_REGION,
    ) -> "FactorResolver":
        """
        Assemble the standard resolution chain.

        Args:
            store: Persistent factor store; the store tier is skipped when None
            cache: Cache to use, a fresh ``FactorCache`` when None
            table: Default factor table, the compiled DEFRA table when None
            default_region: Region used for store lookups without a region
        """
        table = table or DefaultFactorTable()
        strategies: list[FactorStrategy] = []
        if store is not None:
            strategies.append(StoreFactorStrategy(store, default_region=default_region))
        strategies.append(DefaultTableStrategy(table))
        strategies.append(ElectricityRegionStrategy(table))
        return cls(strategies, cache=cache, table=table)

    async def resolve(
        self, category: str, type_: str, region: str | None = None
    ) -> EmissionFactorRecord | None:
        """
        Resolve a factor, or return None when no tier knows it.
        """
        cache_key = make_cache_key(category, type_, region)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Factor cache hit: {cache_key}")
            return cached

        logger.debug(f"Factor cache miss: {cache_key}")
        key = FactorKey(category=category, type=type_, region=region)
        for strategy in self.strategies:
            record = await strategy.try_resolve(key)
            if record is not None:
                logger.debug(
                    f"Resolved {cache_key} via {type(strategy).__name__} "
                    f"({record.data_quality})"
                )
                self.cache.set(cache_key, record)
                return record

        logger.debug(f"No factor found for {cache_key}")
        return None

    def clear_cache(self) -> None:
        self.cache.clear()
