"""Relational storage: engine lifecycle, sessions, dialect-aware upserts.

Production runs on PostgreSQL (asyncpg) with the unaccent and pg_trgm
extensions. Tests and local experiments may pass an aiosqlite URL to
`init_db()`; everything here works on both.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from preco_facil.errors import BackendUnavailableError
from preco_facil.settings import get_settings


class Base(DeclarativeBase):
    pass


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


async def init_db(database_url: str | None = None) -> None:
    """Create the engine and session factory.

    Args:
        database_url: Overrides DATABASE_URL (scripts, tests).
    """
    global _engine, _session_factory

    settings = get_settings()
    url = database_url or settings.async_database_url
    options: dict[str, Any] = {"echo": settings.debug, "pool_pre_ping": True}
    if url.startswith("postgresql"):
        options.update(connect_args=settings.asyncpg_connect_args, pool_size=5, max_overflow=10)

    _engine = create_async_engine(url, **options)
    _session_factory = async_sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)


async def close_db() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


def get_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _engine


async def ping_db() -> None:
    """Fail fast at startup when the database is unreachable."""
    async with get_engine().connect() as conn:
        await conn.execute(text("SELECT 1"))


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """One session, one transaction: commit on exit, roll back on error.

    Usage:
        async with get_session() as session:
            await session.execute(stmt)
    """
    if _session_factory is None:
        raise BackendUnavailableError(detail={"reason": "database not initialized"})

    async with _session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def upsert_insert(session: AsyncSession, table: Any) -> Any:
    """INSERT construct with ON CONFLICT support for the session's dialect."""
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(table)
    if dialect == "sqlite":
        return sqlite.insert(table)
    raise RuntimeError(f"Upsert not supported for dialect: {dialect}")


async def create_tables() -> None:
    """Create all tables without migrations (tests, SEED_CREATE_TABLES)."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
