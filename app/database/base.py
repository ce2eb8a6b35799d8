"""
Database base configuration following kkb_fastapi pattern.

Builds the async database URL and engine options from config.
"""
from typing import Any

from sqlalchemy.engine.url import URL

from app.core.config import Config

DEFAULT_DRIVERNAME = "postgresql+asyncpg"

engine_kw = {
    "pool_pre_ping": True,
    # feature will normally emit SQL equivalent to "SELECT 1" each time a connection is checked out from the pool
    "pool_size": 2,  # number of connections to keep open at a time
    "max_overflow": 4,  # number of connections to allow to be opened above pool_size
    "connect_args": {
        "prepared_statement_cache_size": 0,  # disable prepared statement cache
        "statement_cache_size": 0,  # disable statement cache
    },
}


def get_db_url(config: Config) -> URL:
    """
    Construct database URL from config.
    """
    config_db = dict(config.data["db"])
    drivername = config_db.pop("drivername", DEFAULT_DRIVERNAME)
    return URL.create(drivername=drivername, **config_db)


def get_engine_kw(async_db_url: URL) -> dict[str, Any]:
    """
    Engine options for the given database URL.

    The pool and asyncpg statement cache options only apply to PostgreSQL;
    SQLite (used by the test suite) takes the driver defaults.
    """
    if async_db_url.get_backend_name() == "sqlite":
        return {}
    return engine_kw
