"""
Service tests for emission factor resolution.
"""
from decimal import Decimal

import pytest

from app.services.factors.cache import FactorCache, NullFactorCache
from app.services.factors.default_factors import DefaultFactorTable
from app.services.factors.resolver import FactorResolver
from app.services.factors.strategies import (
    DefaultTableStrategy,
    ElectricityRegionStrategy,
    FactorKey,
    StoreFactorStrategy,
)
from app.services.factors.store import DatabaseFactorStore
from app.test.factory.emission_factor import EmissionFactorFactory
from app.test.factory.factor_store import FailingFactorStore, FakeClock, FakeFactorStore
from app.utils.constants import DataQuality, Scope


@pytest.mark.asyncio
async def test_resolve_default_factor_without_store():
    resolver = FactorResolver.build()

    record = await resolver.resolve("fuels", "diesel")

    assert record.factor == Decimal("2.546")
    assert record.unit == "kgCO2e/litre"
    assert record.scope == Scope.SCOPE_1
    assert record.source == "DEFRA 2025"
    assert record.year == 2025
    assert record.data_quality == DataQuality.MEDIUM


@pytest.mark.asyncio
async def test_store_hit_is_high_quality_and_wins_over_defaults():
    store = FakeFactorStore()
    store.add("fuels", "diesel", "UK", "2.6", "kgCO2e/litre", Scope.SCOPE_1, version="2024")
    resolver = FactorResolver.build(store=store)

    record = await resolver.resolve("fuels", "diesel")

    assert record.factor == Decimal("2.6")
    assert record.data_quality == DataQuality.HIGH
    assert record.year == 2024
    assert record.region == "UK"


@pytest.mark.asyncio
async def test_second_resolution_within_ttl_is_served_from_cache():
    store = FakeFactorStore()
    store.add("fuels", "diesel", "UK", "2.6", "kgCO2e/litre", Scope.SCOPE_1)
    resolver = FactorResolver.build(store=store)

    first = await resolver.resolve("fuels", "diesel")
    second = await resolver.resolve("fuels", "diesel")

    assert store.calls == 1
    assert first == second


@pytest.mark.asyncio
async def test_store_is_queried_again_after_ttl():
    clock = FakeClock()
    store = FakeFactorStore()
    store.add("fuels", "diesel", "UK", "2.6", "kgCO2e/litre", Scope.SCOPE_1)
    resolver = FactorResolver.build(store=store, cache=FactorCache(ttl=300, clock=clock))

    await resolver.resolve("fuels", "diesel")
    clock.advance(301)
    await resolver.resolve("fuels", "diesel")

    assert store.calls == 2


@pytest.mark.asyncio
async def test_clear_cache_forces_new_lookup():
    store = FakeFactorStore()
    resolver = FactorResolver.build(store=store)

    await resolver.resolve("fuels", "petrol")
    resolver.clear_cache()
    await resolver.resolve("fuels", "petrol")

    assert store.calls == 2
    assert len(resolver.cache) == 1


@pytest.mark.asyncio
async def test_failing_store_falls_back_to_defaults():
    store = FailingFactorStore()
    resolver = FactorResolver.build(store=store)

    record = await resolver.resolve("fuels", "diesel")

    assert store.calls == 1
    assert record.factor == Decimal("2.546")
    assert record.data_quality == DataQuality.MEDIUM


@pytest.mark.asyncio
async def test_store_row_without_factor_is_a_miss():
    store = FakeFactorStore()
    store.add("fuels", "diesel", "UK", None, "kgCO2e/litre", Scope.SCOPE_1)
    resolver = FactorResolver.build(store=store)

    record = await resolver.resolve("fuels", "diesel")

    assert record.data_quality == DataQuality.MEDIUM


@pytest.mark.asyncio
async def test_unknown_factor_resolves_to_none():
    store = FakeFactorStore()
    resolver = FactorResolver.build(store=store)

    assert await resolver.resolve("fuels", "unobtainium") is None
    assert await resolver.resolve("no-such-category", "diesel") is None


@pytest.mark.asyncio
async def test_electricity_region_fallback_uses_region_as_key():
    resolver = FactorResolver.build()

    record = await resolver.resolve("electricity", "grid-average", "eu")

    assert record.factor == Decimal("0.275")
    assert record.scope == Scope.SCOPE_2
    assert record.region == "eu"
    assert record.type == "grid-average"


@pytest.mark.asyncio
async def test_electricity_unknown_region_resolves_to_none():
    resolver = FactorResolver.build()

    assert await resolver.resolve("electricity", "grid-average", "atlantis") is None


@pytest.mark.asyncio
async def test_store_lookup_uses_default_region_when_unset():
    store = FakeFactorStore()
    store.add("waste", "landfill", "DE", "500", "kgCO2e/tonne", Scope.SCOPE_3)
    resolver = FactorResolver.build(store=store, default_region="DE")

    record = await resolver.resolve("waste", "landfill")

    assert record.factor == Decimal("500")
    assert record.region == "DE"


@pytest.mark.asyncio
async def test_null_cache_always_consults_store():
    store = FakeFactorStore()
    resolver = FactorResolver.build(store=store, cache=NullFactorCache())

    await resolver.resolve("fuels", "diesel")
    await resolver.resolve("fuels", "diesel")

    assert store.calls == 2


@pytest.mark.asyncio
async def test_strategies_in_isolation():
    table = DefaultFactorTable()
    key = FactorKey(category="electricity", type="grid-average", region="us")

    assert await DefaultTableStrategy(table).try_resolve(key) is None
    regional = await ElectricityRegionStrategy(table).try_resolve(key)
    assert regional.factor == Decimal("0.386")

    fuel_key = FactorKey(category="fuels", type="diesel")
    assert await ElectricityRegionStrategy(table).try_resolve(fuel_key) is None
    assert await StoreFactorStrategy(FailingFactorStore()).try_resolve(fuel_key) is None


@pytest.mark.asyncio
async def test_default_table_lookup_is_case_insensitive():
    resolver = FactorResolver.build()

    record = await resolver.resolve("fuels", "Natural-Gas")

    assert record.factor == Decimal("0.185")


@pytest.mark.asyncio
async def test_database_store_returns_current_factor():
    await EmissionFactorFactory(subcategory="diesel", factor=Decimal("2.7"), version="2024")
    await EmissionFactorFactory(subcategory="diesel", factor=Decimal("2.8"), version="2025")
    resolver = FactorResolver.build(store=DatabaseFactorStore())

    record = await resolver.resolve("fuels", "diesel")

    assert record.factor == Decimal("2.8")
    assert record.year == 2025
    assert record.data_quality == DataQuality.HIGH
