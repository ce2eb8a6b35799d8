"""
API routers module.
"""
from app.api.calculations import router as calculations_router
from app.api.emissions import router as emissions_router
from app.api.factors import router as factors_router

__all__ = [
    "calculations_router",
    "emissions_router",
    "factors_router",
]
