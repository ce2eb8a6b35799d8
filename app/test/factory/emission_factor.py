"""
Factory for EmissionFactor models following kkb_fastapi pattern.
"""
import uuid
from datetime import datetime, timedelta
from decimal import Decimal

import factory

from app.database.schemas import EmissionFactorDBModel
from app.test.factory.base_factory import AsyncSQLAlchemyFactory
from app.test.factory.create_async_session import async_session
from app.utils.constants import FactorCategory, Scope


class EmissionFactorFactory(AsyncSQLAlchemyFactory):
    """Factory for creating EmissionFactor test instances."""

    class Meta:
        model = EmissionFactorDBModel
        sqlalchemy_session = async_session
        sqlalchemy_session_persistence = "commit"

    id = factory.LazyFunction(uuid.uuid4)
    category = FactorCategory.FUELS
    subcategory = factory.Sequence(lambda n: f"test-fuel-{n}")
    name = factory.LazyAttribute(lambda obj: f"Test factor {obj.subcategory}")
    description = None
    factor = Decimal("2.5")
    unit = "kgCO2e/litre"
    scope = Scope.SCOPE_1
    source = "Test Data"
    gwp_version = None
    region = "UK"
    version = "2025"
    valid_from = factory.LazyFunction(lambda: datetime.utcnow() - timedelta(days=30))
    valid_to = None
    is_active = True
    created_at = factory.LazyFunction(datetime.utcnow)
    updated_at = factory.LazyFunction(datetime.utcnow)


class ElectricityEmissionFactorFactory(EmissionFactorFactory):
    """Grid-average electricity factor for a region."""

    category = FactorCategory.ELECTRICITY
    subcategory = "grid-average"
    unit = "kgCO2e/kWh"
    scope = Scope.SCOPE_2
    factor = Decimal("0.3")


class RefrigerantEmissionFactorFactory(EmissionFactorFactory):
    category = FactorCategory.REFRIGERANTS
    subcategory = "r-410a"
    unit = "kgCO2e/kg"
    gwp_version = "AR6"
    factor = Decimal("2256")
