"""
Async database session manager following kkb_fastapi pattern.

Usage:
    Database.init(async_db_url, engine_kw=engine_kw)

    async with Database() as session:
        ...
"""
import logging
from typing import Any

from sqlalchemy.engine.url import URL
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.database.session_manager.exceptions import (
    DatabaseNotInitialized,
    DatabaseTransactionError,
)

logger = logging.getLogger(__name__)


class Database:
    """
    Process-wide session factory.

    ``init`` creates the engine and session maker once; each ``Database()``
    instance is an async context manager yielding a fresh session that is
    rolled back on error and always closed.
    """

    _engine: AsyncEngine | None = None
    _async_session_maker: async_sessionmaker | None = None

    def __init__(self):
        self._session: AsyncSession | None = None

    @classmethod
    def init(cls, async_db_url: URL | str, engine_kw: dict[str, Any] | None = None):
        """Create the engine and session maker."""
        cls._engine = create_async_engine(async_db_url, **(engine_kw or {}))
        cls._async_session_maker = async_sessionmaker(
            bind=cls._engine, expire_on_commit=False, class_=AsyncSession
        )
        logger.debug(f"Database initialized for {cls._engine.url.get_backend_name()}")

    @classmethod
    def is_initialized(cls) -> bool:
        return cls._async_session_maker is not None

    @classmethod
    async def dispose(cls):
        """Dispose the engine and forget the session maker."""
        if cls._engine is not None:
            await cls._engine.dispose()
        cls._engine = None
        cls._async_session_maker = None

    async def __aenter__(self) -> AsyncSession:
        if self._async_session_maker is None:
            raise DatabaseNotInitialized("Database.init() has not been called")
        self._session = self._async_session_maker()
        return self._session

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is not None:
                await self._session.rollback()
        except Exception as e:
            raise DatabaseTransactionError(f"Rollback failed: {e}") from e
        finally:
            await self._session.close()
            self._session = None
