"""Database engine factory for the subscription store.

SQLite (aiosqlite) is used for development and tests, PostgreSQL (asyncpg)
in production.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from solsignal.config.settings import DatabaseEngine

if TYPE_CHECKING:
    from solsignal.config.settings import DatabaseConfig


def create_engine(config: DatabaseConfig) -> AsyncEngine:
    """Create an async SQLAlchemy engine from database configuration."""
    kwargs: dict[str, Any] = {"echo": config.debug_sql}

    if config.engine == DatabaseEngine.POSTGRESQL:
        kwargs["pool_size"] = config.max_idle_connections
        kwargs["max_overflow"] = config.max_open_connections - config.max_idle_connections
        kwargs["pool_pre_ping"] = True
    else:
        # Concurrent fan-out writers wait on the SQLite file lock instead of failing.
        kwargs["connect_args"] = {"timeout": 30}

    return create_async_engine(config.dsn, **kwargs)
