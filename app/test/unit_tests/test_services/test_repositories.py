"""
Repository and seeding tests following kkb_fastapi pattern.
"""
from datetime import datetime, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from app.database.repositories import EmissionFactorRepository, EmissionResultRepository
from app.services.calculators.emissions_calculator import EmissionsCalculator
from app.services.factors.default_factors import DEFAULT_FACTORS
from app.services.factors.resolver import FactorResolver
from app.services.factors.store import DatabaseFactorStore
from app.services.seed_database import FactorSeeder
from app.test.factory.emission_factor import (
    ElectricityEmissionFactorFactory,
    EmissionFactorFactory,
)
from app.test.factory.emission_result import (
    ElectricityEmissionResultFactory,
    EmissionResultFactory,
)
from app.utils.constants import DataQuality


@pytest.mark.asyncio
async def test_get_current_factor_prefers_highest_version(test_db_session):
    await EmissionFactorFactory(subcategory="diesel", factor=Decimal("2.5"), version="2023")
    await EmissionFactorFactory(subcategory="diesel", factor=Decimal("2.6"), version="2025")
    await EmissionFactorFactory(subcategory="diesel", factor=Decimal("2.4"), version="2024")

    repo = EmissionFactorRepository(test_db_session)
    factor = await repo.get_current_factor("fuels", "Diesel", "uk")

    assert factor.factor == Decimal("2.6")


@pytest.mark.asyncio
async def test_get_current_factor_compares_versions_numerically(test_db_session):
    await EmissionFactorFactory(subcategory="lpg", factor=Decimal("1.5"), version="9")
    await EmissionFactorFactory(subcategory="lpg", factor=Decimal("1.6"), version="10")

    repo = EmissionFactorRepository(test_db_session)
    factor = await repo.get_current_factor("fuels", "lpg", "UK")

    assert factor.version == "10"


@pytest.mark.asyncio
async def test_get_current_factor_respects_validity_window(test_db_session):
    now = datetime.utcnow()
    await EmissionFactorFactory(
        subcategory="petrol", version="2026", valid_from=now + timedelta(days=10)
    )
    await EmissionFactorFactory(
        subcategory="petrol", version="2025", valid_to=now - timedelta(days=1)
    )
    await EmissionFactorFactory(subcategory="petrol", version="2027", is_active=False)
    current = await EmissionFactorFactory(subcategory="petrol", version="2024")

    repo = EmissionFactorRepository(test_db_session)
    factor = await repo.get_current_factor("fuels", "petrol", "UK")

    assert factor.id == current.id


@pytest.mark.asyncio
async def test_get_current_factor_matches_region(test_db_session):
    await ElectricityEmissionFactorFactory(region="UK", factor=Decimal("0.2"))
    await ElectricityEmissionFactorFactory(region="FR", factor=Decimal("0.05"))

    repo = EmissionFactorRepository(test_db_session)

    assert (await repo.get_current_factor("electricity", "grid-average", "fr")).factor == Decimal("0.05")
    assert await repo.get_current_factor("electricity", "grid-average", "DE") is None


@pytest.mark.asyncio
async def test_database_store_missing_factor_returns_none():
    store = DatabaseFactorStore()

    assert await store.get_current_factor("fuels", "diesel", "UK") is None


@pytest.mark.asyncio
async def test_create_from_result_and_totals(test_db_session):
    company_id = uuid4()
    calculator = EmissionsCalculator(FactorResolver.build())
    repo = EmissionResultRepository(test_db_session)

    diesel = await calculator.calculate_stationary_combustion("diesel", 100)
    grid = await calculator.calculate_electricity(1000)
    await repo.create_from_result(company_id, diesel, reporting_period="2025-Q1")
    await repo.create_from_result(company_id, grid)
    await repo.create_from_result(uuid4(), grid)
    await test_db_session.commit()

    stored = await repo.get_by_company(company_id)
    totals = await repo.get_totals_by_scope(company_id)

    assert len(stored) == 2
    scope1 = next(row for row in stored if row.scope == "scope1")
    assert scope1.co2e == Decimal("254.600")
    assert scope1.reporting_period == "2025-Q1"
    assert scope1.calculation_metadata["calculation"] == "100 × 2.546 = 254.600 kgCO2e"
    assert totals["count"] == 2
    assert totals["by_scope"]["scope1"] == Decimal("254.6")
    assert totals["by_scope"]["scope2"] == Decimal("208.98")
    assert totals["total_co2e"] == Decimal("463.58")


@pytest.mark.asyncio
async def test_get_by_company_filters_scope(test_db_session):
    company_id = uuid4()
    await EmissionResultFactory(company_id=company_id)
    await ElectricityEmissionResultFactory(company_id=company_id)
    await ElectricityEmissionResultFactory()

    repo = EmissionResultRepository(test_db_session)
    results = await repo.get_by_company(company_id, scope="scope2")

    assert len(results) == 1
    assert results[0].source_type == "purchased_electricity"


@pytest.mark.asyncio
async def test_seeder_loads_default_factors(test_db_session):
    async with FactorSeeder(session=test_db_session) as seeder:
        stats = await seeder.seed_all()

    expected = sum(len(entries) for entries in DEFAULT_FACTORS.values())
    assert stats["emission_factors"] == expected
    assert stats["by_category"]["electricity"] == len(DEFAULT_FACTORS["electricity"])

    repo = EmissionFactorRepository(test_db_session)
    assert await repo.count() == expected
    eu = await repo.get_current_factor("electricity", "grid-average", "EU")
    assert eu.factor == Decimal("0.275")


@pytest.mark.asyncio
async def test_seeder_clear_existing_replaces_rows(test_db_session):
    await EmissionFactorFactory()

    async with FactorSeeder(session=test_db_session) as seeder:
        stats = await seeder.seed_all(clear_existing=True)

    assert stats["cleared"] == 1
    assert await EmissionFactorRepository(test_db_session).count() == stats["emission_factors"]


@pytest.mark.asyncio
async def test_seeded_store_resolves_with_high_quality(test_db_session):
    async with FactorSeeder(session=test_db_session) as seeder:
        await seeder.seed_all()

    calculator = EmissionsCalculator(FactorResolver.build(store=DatabaseFactorStore()))
    result = await calculator.calculate_electricity(1000, region="us")

    assert result.co2e == Decimal("386.000")
    assert result.metadata["data_quality"] == DataQuality.HIGH
