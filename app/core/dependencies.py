"""
FastAPI dependencies following kkb_fastapi pattern.
"""
from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.session_manager.db_session import Database
from app.services.calculators.emissions_calculator import EmissionsCalculator
from app.services.factors.resolver import FactorResolver
from app.utils.constants import DEFAULT_FUZZY_THRESHOLD


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session for the duration of a request."""
    async with Database() as session:
        yield session


def get_factor_resolver(request: Request) -> FactorResolver:
    """The application-wide factor resolver built in ``get_app``."""
    return request.app.state.factor_resolver


def get_emissions_calculator(
    request: Request,
    resolver: FactorResolver = Depends(get_factor_resolver),
) -> EmissionsCalculator:
    threshold = getattr(request.app.state, "fuzzy_threshold", DEFAULT_FUZZY_THRESHOLD)
    return EmissionsCalculator(resolver, fuzzy_threshold=threshold)
