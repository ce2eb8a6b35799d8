"""
Tests for the stored Emissions API following kkb_fastapi pattern.
"""
from decimal import Decimal
from uuid import uuid4

import pytest

from app.test.factory.emission_result import (
    ElectricityEmissionResultFactory,
    EmissionResultFactory,
)

BASE_URL = "/api/v1/emissions"


@pytest.mark.asyncio
async def test_list_emissions_for_company(test_async_client):
    company_id = uuid4()
    await EmissionResultFactory(company_id=company_id)
    await ElectricityEmissionResultFactory(company_id=company_id)
    await EmissionResultFactory()

    response = await test_async_client.get(f"{BASE_URL}/", params={"company_id": str(company_id)})

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 2
    assert {row["company_id"] for row in data} == {str(company_id)}


@pytest.mark.asyncio
async def test_list_emissions_by_scope(test_async_client):
    company_id = uuid4()
    await EmissionResultFactory(company_id=company_id)
    await ElectricityEmissionResultFactory(company_id=company_id)

    response = await test_async_client.get(
        f"{BASE_URL}/", params={"company_id": str(company_id), "scope": "scope2"}
    )

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["source_type"] == "purchased_electricity"


@pytest.mark.asyncio
async def test_list_emissions_rejects_unknown_scope(test_async_client):
    response = await test_async_client.get(
        f"{BASE_URL}/", params={"company_id": str(uuid4()), "scope": "scope9"}
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_emission_totals(test_async_client):
    company_id = uuid4()
    await EmissionResultFactory(company_id=company_id)
    await EmissionResultFactory(company_id=company_id)
    await ElectricityEmissionResultFactory(company_id=company_id)

    response = await test_async_client.get(
        f"{BASE_URL}/totals", params={"company_id": str(company_id)}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 3
    assert Decimal(data["total_co2e"]) == Decimal("718.18")
    assert Decimal(data["by_scope"]["scope1"]) == Decimal("509.2")
    assert Decimal(data["by_scope"]["scope2"]) == Decimal("208.98")


@pytest.mark.asyncio
async def test_emission_totals_empty(test_async_client):
    response = await test_async_client.get(
        f"{BASE_URL}/totals", params={"company_id": str(uuid4())}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 0
    assert Decimal(data["total_co2e"]) == Decimal("0")
    assert data["by_scope"] == {}
