"""Shared fixtures.

Database-backed tests run on a temporary SQLite file (aiosqlite). The SQL
functions the search query relies on in PostgreSQL (lower, unaccent,
similarity) are registered from the Python implementations.
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event

from preco_facil.main import app
from preco_facil.services.normalization import strip_accents, trigram_similarity
from preco_facil.settings import get_settings
from preco_facil.stores import postgres
from tests.factories import ADMIN_KEY


def _sqlite_lower(value: str | None) -> str | None:
    return value.lower() if value is not None else None


def _sqlite_unaccent(value: str | None) -> str | None:
    return strip_accents(value) if value is not None else None


def _configure_sqlite(engine) -> None:
    """Register search functions, enforce FKs, take write locks up front."""

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.create_function("lower", 1, _sqlite_lower, deterministic=True)
        dbapi_connection.create_function("unaccent", 1, _sqlite_unaccent, deterministic=True)
        dbapi_connection.create_function("similarity", 2, trigram_similarity, deterministic=True)
        # SQLAlchemy emits BEGIN itself (see _do_begin)
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


@pytest.fixture(autouse=True)
def settings_env(monkeypatch: pytest.MonkeyPatch):
    """Deterministic settings for every test."""
    monkeypatch.setenv("ADMIN_SECRET_KEY", ADMIN_KEY)
    monkeypatch.delenv("ADMIN_JWT_SECRET", raising=False)
    monkeypatch.delenv("SEARCH_SIMILARITY_THRESHOLD", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
async def db(tmp_path) -> AsyncGenerator[None, None]:
    """Fresh database with all tables."""
    await postgres.init_db(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    _configure_sqlite(postgres.get_engine())
    await postgres.create_tables()
    yield
    await postgres.close_db()


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"x-admin-key": ADMIN_KEY}
