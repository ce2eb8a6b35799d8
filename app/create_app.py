"""
FastAPI application factory following kkb_fastapi pattern.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import calculations_router, emissions_router, factors_router
from app.core.config import get_config, get_factor_settings_from_config
from app.database.base import get_db_url, get_engine_kw
from app.database.session_manager.db_session import Database
from app.services.calculators.exceptions import EmissionCalculationError
from app.services.factors.cache import FactorCache
from app.services.factors.resolver import FactorResolver
from app.services.factors.store import DatabaseFactorStore

logging.basicConfig(
    level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


def register_routers(app: FastAPI):
    """Register all API routers."""
    app.include_router(calculations_router)
    app.include_router(factors_router)
    app.include_router(emissions_router)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": app.title,
            "version": app.version,
            "docs": "/docs",
            "redoc": "/redoc",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "ghg-emissions-engine"}


def register_exception_handlers(app: FastAPI):
    """Map calculation errors to 400 and everything unexpected to 500."""

    @app.exception_handler(EmissionCalculationError)
    async def calculation_exception_handler(request: Request, exc: EmissionCalculationError):
        logging.info(f"Calculation rejected: {exc.message}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": exc.message,
                "error": type(exc).__name__,
                "field": exc.field,
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions."""
        logging.error(f"HTTPException occurred: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code, content={"detail": str(exc.detail)}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle validation errors."""
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": jsonable_errors(exc),
                "message": "Validation error",
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logging.error(f"Exception occurred: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)}
        )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # pydantic error contexts may hold exception instances
    return [
        {key: value for key, value in error.items() if key in ("type", "loc", "msg")}
        for error in exc.errors()
    ]


def build_factor_resolver(config) -> FactorResolver:
    """Factor resolver configured from the [emission_factors] section."""
    settings = get_factor_settings_from_config(config)
    store = DatabaseFactorStore() if settings["use_store"] else None
    return FactorResolver.build(
        store=store,
        cache=FactorCache(ttl=settings["cache_ttl_seconds"]),
        default_region=settings["default_region"],
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Handles database initialization and cleanup.
    """
    logging.info("Application startup")
    async_db_url = get_db_url(app.state.config)

    Database.init(async_db_url, engine_kw=get_engine_kw(async_db_url))
    logging.info("Initialized database")

    try:
        yield
    finally:
        logging.info("Application shutdown")
        await Database.dispose()


def get_app(config_file: str) -> FastAPI:
    """
    Application factory function.

    Args:
        config_file: Configuration file name (e.g., "production.toml")

    Returns:
        Configured FastAPI application instance
    """
    config = get_config(config_file)

    app = FastAPI(
        title=config.data.get("api", {}).get(
            "title", "GHG Emissions Calculation API"
        ),
        description=config.data.get("api", {}).get(
            "description", "GHG Protocol emissions calculation engine"
        ),
        version=config.data.get("api", {}).get("version", "1.0.0"),
        debug=config.data.get("api", {}).get("debug", False),
        lifespan=lifespan,
        # Generate better OpenAPI schema for enums
        generate_unique_id_function=lambda route: (
            f"{route.tags[0]}-{route.name}" if route.tags else route.name
        ),
    )

    app.state.config = config
    app.state.factor_resolver = build_factor_resolver(config)
    app.state.fuzzy_threshold = int(
        get_factor_settings_from_config(config)["fuzzy_match_threshold"]
    )

    register_routers(app)
    register_exception_handlers(app)

    # Set up CORS middleware
    origins = [
        "http://localhost:3000",  # For local development
        "http://127.0.0.1:3000",
    ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app
