"""Async SQLAlchemy 2.0 engine and session setup.

The API shares one cached engine. The importer CLI builds its own with a pool
sized to its worker count.
"""

from collections.abc import AsyncGenerator
from functools import lru_cache
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import get_settings


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""

    pass


def create_engine(
    database_url: str | None = None,
    pool_size: int | None = None,
) -> AsyncEngine:
    """Create a new async engine.

    Args:
        database_url: Overrides the configured DATABASE_URL when given.
        pool_size: Number of pooled connections; SQLAlchemy's default when omitted.

    Returns:
        Engine with pre-ping enabled.
    """
    settings = get_settings()
    options: dict[str, Any] = {"echo": settings.debug, "pool_pre_ping": True}
    if pool_size is not None:
        options["pool_size"] = pool_size
    return create_async_engine(database_url or settings.database_url, **options)


@lru_cache
def get_engine() -> AsyncEngine:
    """Return the process-wide engine used by the API."""
    return create_engine()


def get_session_maker(engine: AsyncEngine | None = None) -> async_sessionmaker[AsyncSession]:
    """Create async session maker bound to ``engine`` (or the shared one)."""
    return async_sessionmaker(
        engine or get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions.

    Yields:
        AsyncSession: Database session that auto-commits on success.
    """
    session_maker = get_session_maker()
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
