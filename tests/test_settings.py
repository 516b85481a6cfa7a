import pytest

from preco_facil.settings import Settings, _split_origins


def test_async_database_url_rewrites_scheme():
    for url in ("postgres://u:p@db:5432/x", "postgresql://u:p@db:5432/x"):
        assert Settings(database_url=url).async_database_url == "postgresql+asyncpg://u:p@db:5432/x"

    sqlite_url = "sqlite+aiosqlite:///test.db"
    assert Settings(database_url=sqlite_url).async_database_url == sqlite_url


def test_asyncpg_connect_args():
    assert Settings(database_url="sqlite+aiosqlite:///test.db").asyncpg_connect_args == {}

    args = Settings(
        database_url="postgresql://u:p@postgres.railway.internal:5432/x",
        db_statement_timeout_ms=5000,
    ).asyncpg_connect_args
    assert args == {"ssl": False, "timeout": 20, "server_settings": {"statement_timeout": "5000"}}


def test_split_origins():
    assert _split_origins("https://a.com, http://localhost:3000") == ["https://a.com", "http://localhost:3000"]
    assert _split_origins('["https://a.com"]') == ["https://a.com"]
    assert _split_origins("") == []


def test_allowed_origins_include_frontend_url(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("CORS_ORIGINS", '["https://a.com"]')
    monkeypatch.setenv("FRONTEND_URL", "https://precofacil.app")

    assert Settings().allowed_origins == ["https://a.com", "https://precofacil.app"]


def test_admin_signing_key_falls_back_to_secret():
    assert Settings(admin_secret_key="k").admin_signing_key == "k"
    assert Settings(admin_secret_key="k", admin_jwt_secret="j").admin_signing_key == "j"
