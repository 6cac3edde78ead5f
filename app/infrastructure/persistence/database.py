"""Async database engine and session management.

One Database instance is built at startup (see infrastructure.services.providers)
and shared by every store. Each store operation opens its own short-lived
session so a failing write never poisons a sibling channel's transaction.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from infrastructure.logging import get_module_logger

logger = get_module_logger()


class Base(DeclarativeBase):
    """Declarative base for all ORM tables."""


class Database:
    """Owns the async engine and session factory.

    Args:
        url: SQLAlchemy async URL (postgresql+asyncpg://... or sqlite+aiosqlite://...)
        echo: Log emitted SQL
        pool_size: Connection pool size (ignored for SQLite)

    Example:
        database = Database("sqlite+aiosqlite:///:memory:")
        await database.create_all()
        async with database.session() as session:
            ...
    """

    def __init__(self, url: str, echo: bool = False, pool_size: Optional[int] = None):
        self.url = url
        engine_kwargs: Dict[str, Any] = {"echo": echo}
        if url.startswith("sqlite"):
            if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
                # Single shared connection, otherwise each session sees an empty DB
                engine_kwargs["poolclass"] = StaticPool
                engine_kwargs["connect_args"] = {"check_same_thread": False}
        elif pool_size:
            engine_kwargs["pool_size"] = pool_size
            engine_kwargs["pool_pre_ping"] = True

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine, expire_on_commit=False, class_=AsyncSession
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session; the caller commits."""
        async with self.session_factory() as session:
            yield session

    async def create_all(self) -> None:
        """Create every table registered on Base.metadata."""
        # Import for side effects: registers tables on Base.metadata
        from infrastructure.persistence import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("database_tables_created", url=self.engine.url.render_as_string())

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("database_disposed")
