"""
Tests for the Emission Factors API following kkb_fastapi pattern.
"""
from decimal import Decimal
from uuid import uuid4

import pytest

from app.test.factory.emission_factor import (
    ElectricityEmissionFactorFactory,
    EmissionFactorFactory,
    RefrigerantEmissionFactorFactory,
)

BASE_URL = "/api/v1/factors"


@pytest.mark.asyncio
async def test_list_emission_factors(test_async_client):
    await EmissionFactorFactory.create_batch(3)

    response = await test_async_client.get(f"{BASE_URL}/")

    assert response.status_code == 200
    assert len(response.json()) == 3


@pytest.mark.asyncio
async def test_list_emission_factors_filters(test_async_client):
    await EmissionFactorFactory()
    await ElectricityEmissionFactorFactory(region="UK")
    await ElectricityEmissionFactorFactory(region="FR")
    await EmissionFactorFactory(is_active=False)

    response = await test_async_client.get(f"{BASE_URL}/", params={"category": "electricity"})
    assert response.status_code == 200
    assert {row["region"] for row in response.json()} == {"UK", "FR"}

    response = await test_async_client.get(
        f"{BASE_URL}/", params={"category": "electricity", "region": "FR"}
    )
    assert len(response.json()) == 1

    response = await test_async_client.get(f"{BASE_URL}/", params={"category": "fuels"})
    assert len(response.json()) == 1


@pytest.mark.asyncio
async def test_list_emission_factors_pagination(test_async_client):
    await EmissionFactorFactory.create_batch(5)

    response = await test_async_client.get(f"{BASE_URL}/", params={"skip": 2, "limit": 2})

    assert response.status_code == 200
    assert len(response.json()) == 2


@pytest.mark.asyncio
async def test_get_emission_factor(test_async_client):
    factor = await RefrigerantEmissionFactorFactory()

    response = await test_async_client.get(f"{BASE_URL}/{factor.id}")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == str(factor.id)
    assert data["subcategory"] == "r-410a"
    assert data["gwp_version"] == "AR6"
    assert Decimal(data["factor"]) == Decimal("2256")


@pytest.mark.asyncio
async def test_get_emission_factor_not_found(test_async_client):
    response = await test_async_client.get(f"{BASE_URL}/{uuid4()}")

    assert response.status_code == 404
    assert "not found" in response.json()["detail"]


@pytest.mark.asyncio
async def test_resolve_falls_back_to_default(test_async_client):
    response = await test_async_client.get(
        f"{BASE_URL}/resolve", params={"category": "fuels", "type": "Diesel"}
    )

    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["factor"]) == Decimal("2.546")
    assert data["data_quality"] == "medium"
    assert data["source"] == "DEFRA 2025"


@pytest.mark.asyncio
async def test_resolve_prefers_stored_factor(test_async_client):
    await EmissionFactorFactory(subcategory="diesel", factor=Decimal("2.7"), source="Supplier")

    response = await test_async_client.get(
        f"{BASE_URL}/resolve", params={"category": "fuels", "type": "diesel", "region": "UK"}
    )

    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["factor"]) == Decimal("2.7")
    assert data["data_quality"] == "high"
    assert data["source"] == "Supplier"


@pytest.mark.asyncio
async def test_resolve_electricity_region(test_async_client):
    response = await test_async_client.get(
        f"{BASE_URL}/resolve",
        params={"category": "electricity", "type": "grid-average", "region": "eu"},
    )

    assert response.status_code == 200
    assert Decimal(response.json()["factor"]) == Decimal("0.275")


@pytest.mark.asyncio
async def test_resolve_unknown_factor(test_async_client):
    response = await test_async_client.get(
        f"{BASE_URL}/resolve", params={"category": "fuels", "type": "plutonium"}
    )

    assert response.status_code == 404
    assert "fuels/plutonium" in response.json()["detail"]


@pytest.mark.asyncio
async def test_list_default_categories(test_async_client):
    response = await test_async_client.get(f"{BASE_URL}/defaults")

    assert response.status_code == 200
    data = response.json()
    assert "diesel" in data["fuels"]
    assert "hotel-room-night" in data["accommodation"]
    assert set(data["water"]) == {"supply", "treatment"}


@pytest.mark.asyncio
async def test_list_default_factors(test_async_client):
    response = await test_async_client.get(f"{BASE_URL}/defaults/refrigerants")

    assert response.status_code == 200
    by_type = {row["type"]: row for row in response.json()}
    assert Decimal(by_type["r-410a"]["factor"]) == Decimal("2088")
    assert by_type["r-410a"]["gwp_version"] == "AR5"


@pytest.mark.asyncio
async def test_list_default_factors_unknown_category(test_async_client):
    response = await test_async_client.get(f"{BASE_URL}/defaults/unicorns")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_clear_factor_cache(test_async_client):
    await test_async_client.get(f"{BASE_URL}/resolve", params={"category": "fuels", "type": "diesel"})
    await test_async_client.get(f"{BASE_URL}/resolve", params={"category": "waste", "type": "landfill"})

    response = await test_async_client.post(f"{BASE_URL}/cache/clear")
    assert response.status_code == 200
    assert response.json() == {"cleared": 2}

    response = await test_async_client.post(f"{BASE_URL}/cache/clear")
    assert response.json() == {"cleared": 0}
