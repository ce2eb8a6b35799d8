"""
Factory for EmissionResult models following kkb_fastapi pattern.
"""
import uuid
from datetime import datetime
from decimal import Decimal

import factory

from app.database.schemas import EmissionResultDBModel
from app.test.factory.base_factory import AsyncSQLAlchemyFactory
from app.test.factory.create_async_session import async_session
from app.utils.constants import CO2E_UNIT, Scope, SourceType


class EmissionResultFactory(AsyncSQLAlchemyFactory):
    """Factory for creating EmissionResult test instances."""

    class Meta:
        model = EmissionResultDBModel
        sqlalchemy_session = async_session
        sqlalchemy_session_persistence = "commit"

    id = factory.LazyFunction(uuid.uuid4)
    company_id = factory.LazyFunction(uuid.uuid4)
    scope = Scope.SCOPE_1
    source_type = SourceType.STATIONARY_COMBUSTION
    activity_type = "diesel"
    activity_value = Decimal("100")
    activity_unit = "litre"
    co2e = Decimal("254.600")
    unit = CO2E_UNIT
    emission_factor = Decimal("2.546")
    emission_factor_unit = "kgCO2e/litre"
    emission_factor_source = "DEFRA 2025"
    emission_factor_year = 2025
    calculation_metadata = factory.LazyFunction(
        lambda: {
            "calculation": "100 × 2.546 = 254.600 kgCO2e",
            "data_quality": "medium",
        }
    )
    reporting_period = None
    recorded_at = factory.LazyFunction(datetime.utcnow)
    created_at = factory.LazyFunction(datetime.utcnow)
    updated_at = factory.LazyFunction(datetime.utcnow)


class ElectricityEmissionResultFactory(EmissionResultFactory):
    """Factory for purchased electricity results."""

    scope = Scope.SCOPE_2
    source_type = SourceType.PURCHASED_ELECTRICITY
    activity_type = "uk"
    activity_value = Decimal("1000")
    activity_unit = "kWh"
    co2e = Decimal("208.980")
    emission_factor = Decimal("0.20898")
    emission_factor_unit = "kgCO2e/kWh"
