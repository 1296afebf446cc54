"""Datastore client — async SQLAlchemy engine & session management."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from solsignal.datastore.engines import create_engine

if TYPE_CHECKING:
    from solsignal.config.settings import DatabaseConfig

_ERR_NOT_OPEN = "Datastore is not open. Call open() first."


class Datastore:
    """Async datastore wrapping a SQLAlchemy engine and session factory.

    Usage::

        ds = Datastore(db_config)
        await ds.open()
        async with ds.session() as session:
            ...
        await ds.close()
    """

    def __init__(self, config: DatabaseConfig) -> None:
        self._config = config
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Return the underlying async engine.

        Raises:
            RuntimeError: If the datastore is not open.
        """
        if self._engine is None:
            raise RuntimeError(_ERR_NOT_OPEN)
        return self._engine

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    async def open(self) -> None:
        """Create the engine, the session factory and any missing tables."""
        from solsignal.datastore.migrations import run_auto_migrate

        self._engine = create_engine(self._config)
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        await run_auto_migrate(self._engine)

    async def close(self) -> None:
        """Dispose the engine and release all connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    def session(self) -> AsyncSession:
        """Create a new async session. Use as an async context manager.

        Raises:
            RuntimeError: If the datastore is not open.
        """
        if self._session_factory is None:
            raise RuntimeError(_ERR_NOT_OPEN)
        return self._session_factory()
