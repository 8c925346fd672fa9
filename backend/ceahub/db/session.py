from __future__ import annotations

from collections.abc import AsyncGenerator
from functools import lru_cache

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ceahub.core.config import settings


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """
    Engine for the Supabase Postgres, created on first request so the app
    (and the test suite, which overrides get_db) can be imported without a
    reachable database.
    """
    return create_async_engine(
        # asyncpg rejects sslmode/channel_binding in the query string
        settings.DATABASE_URL_ASYNC_CLEAN,
        echo=False,
        future=True,
        pool_pre_ping=True,
        pool_recycle=300,  # Supabase's pooler drops idle connections
    )


@lru_cache(maxsize=1)
def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One AsyncSession per request; the context manager closes it."""
    async with get_sessionmaker()() as session:
        yield session
