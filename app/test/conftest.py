"""
Pytest configuration and fixtures following kkb_fastapi pattern.
"""
import logging

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.config import ConfigFile, get_config
from app.create_app import get_app
from app.database import Base
from app.database.base import get_db_url, get_engine_kw
from app.database.session_manager.db_session import Database

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


@pytest.fixture(scope="session")
def test_config():
    """
    Get test configuration.

    Returns configuration with test database settings.
    """
    return get_config(ConfigFile.TEST)


@pytest.fixture(scope="function")
def test_db_url(test_config, tmp_path):
    """SQLite database file private to the current test."""
    return get_db_url(test_config).set(database=str(tmp_path / "ghg_emissions_test.db"))


@pytest_asyncio.fixture(scope="function", autouse=True)
async def initialize_db_session(test_db_url):
    """
    Initialize Database singleton for testing.

    Creates all tables before the test and drops them afterwards.
    """
    Database.init(test_db_url, engine_kw=get_engine_kw(test_db_url))

    async with Database._engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with Database._engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await Database.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_app(test_config):
    """
    Create FastAPI application with test configuration.

    Each app owns a fresh factor resolver and cache.
    """
    app = get_app(ConfigFile.TEST)
    app.state.config = test_config

    yield app


@pytest_asyncio.fixture(scope="function")
async def test_async_client(test_app):
    """
    Create async HTTP client for API testing.

    Uses httpx AsyncClient with ASGITransport for testing FastAPI endpoints.
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(
        transport=transport, base_url="http://localhost:8000", follow_redirects=True
    ) as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def test_db_session():
    """
    Provide database session for tests.

    Creates async session using Database context manager.
    """
    async with Database() as session:
        yield session
