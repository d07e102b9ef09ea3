"""
Listing Shield Database Connection
Async engine over the Supabase pooler; the schema itself is owned by
Supabase migrations, so nothing here creates tables.
"""

from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.orm import declarative_base
from listing_shield.core.config import settings

ASYNC_DRIVER_PREFIX = "postgresql+asyncpg://"


def build_async_database_url(url: str) -> str:
    for prefix in ("postgresql+psycopg2://", "postgresql://", "postgres://"):
        if url.startswith(prefix):
            return ASYNC_DRIVER_PREFIX + url[len(prefix):]
    return url


# pgbouncer (transaction mode) cannot keep prepared statements
engine = create_async_engine(
    build_async_database_url(settings.DATABASE_URL),
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_pre_ping=True,
    echo=settings.DB_ECHO,
    connect_args={
        "statement_cache_size": 0,
        "prepared_statement_cache_size": 0,
    },
)

AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)

Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session for FastAPI dependencies"""
    async with AsyncSessionLocal() as session:
        yield session


async def init_db():
    """Fail fast at startup when the database is unreachable"""
    async with engine.connect():
        pass


async def close_db():
    await engine.dispose()
