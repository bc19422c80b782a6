"""
Database engine and session management.

Builds the async engine and session factory from settings. One ``Database``
is created at process start and shared by the repositories.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from revcycle.core.config.settings import Settings
from revcycle.infrastructure.persistence.sqlalchemy.models.base import Base

logger = logging.getLogger(__name__)


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (":memory:" in url or url.split("://", 1)[-1] in ("", "/"))


class Database:
    """Owns the async engine and hands out sessions."""

    def __init__(self, settings: Settings, engine: AsyncEngine | None = None):
        self.settings = settings
        if engine is None:
            engine_kwargs = {"echo": settings.DATABASE_ECHO}
            # One shared connection, otherwise every connection sees an empty database
            if _is_memory_sqlite(settings.DATABASE_URL):
                engine_kwargs["poolclass"] = StaticPool
                engine_kwargs["connect_args"] = {"check_same_thread": False}
            engine = create_async_engine(settings.DATABASE_URL, **engine_kwargs)
        self.engine = engine
        self.session_factory = async_sessionmaker(
            bind=self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        await self.engine.dispose()
