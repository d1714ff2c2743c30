"""Async engine, request-scoped sessions and startup/health helpers."""

import time
from collections.abc import AsyncGenerator
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.core.config import settings
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class Base(DeclarativeBase):
    pass


engine = create_async_engine(
    settings.database_url,
    pool_size=settings.database_pool_size,
    max_overflow=settings.database_max_overflow,
    echo=settings.database_echo,
    # PgBouncer in transaction mode cannot reuse prepared statements
    connect_args={"statement_cache_size": 0},
)

async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """One session per request; rolled back if the handler raises."""
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


class DatabaseClient:
    """Connectivity checks and table bootstrap for the QMS database."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def ping(self) -> float:
        """Round-trip a ``SELECT 1``; returns the latency in milliseconds."""
        started = time.perf_counter()
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return (time.perf_counter() - started) * 1000

    async def create_tables(self) -> None:
        """Create missing tables from the models. Existing tables are untouched.

        Alembic migrations remain the source of truth in deployed
        environments; this is for local databases.
        """
        import app.database.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        LOGGER.info(f"Verified {len(Base.metadata.tables)} tables")

    async def health_check(self) -> Dict[str, Any]:
        try:
            latency_ms = await self.ping()
        except Exception as e:
            LOGGER.error("Database health check failed", extra={"error": str(e)})
            return {"status": "unhealthy", "error": str(e)}
        return {"status": "healthy", "latency_ms": round(latency_ms, 2)}


db_client = DatabaseClient(engine)


async def init_database(auto_migrate: bool = True) -> None:
    """Check connectivity and, when ``auto_migrate`` is set, create missing tables.

    Raises:
        Exception: Whatever the driver raised; startup logs it and carries on
    """
    latency_ms = await db_client.ping()
    LOGGER.info(f"Database reachable ({latency_ms:.1f} ms)")
    if auto_migrate:
        await db_client.create_tables()


async def close_database() -> None:
    await engine.dispose()
    LOGGER.info("Database connection pool closed")
