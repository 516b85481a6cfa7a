"""ASGI entry point for the Preço Fácil API.

Run with:
    uvicorn preco_facil.main:app --port 3000
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from preco_facil.errors import register_error_handlers
from preco_facil.routes import api_router
from preco_facil.settings import get_settings
from preco_facil.stores import postgres
from preco_facil.stores import redis as redis_store

logger = logging.getLogger("uvicorn.error")


async def _connect_postgres() -> None:
    try:
        await postgres.init_db()
        await postgres.ping_db()
    except Exception:
        # Engine stays configured; requests answer 503 until the database is reachable
        logger.exception("[startup] Postgres unavailable")
    else:
        logger.info("[startup] Postgres connected")


async def _connect_redis() -> None:
    try:
        await redis_store.init_redis()
    except Exception:
        logger.warning("[startup] Redis unavailable, trending terms served uncached", exc_info=True)
        await redis_store.close_redis()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    await _connect_postgres()
    await _connect_redis()
    yield
    await redis_store.close_redis()
    await postgres.close_db()


def create_app() -> FastAPI:
    """Build the application: middleware, error handlers, routers."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Compare prices of the same product across neighborhood stores",
        lifespan=lifespan,
    )

    # The admin panel sends x-admin-key or a bearer token
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "x-admin-key"],
    )

    register_error_handlers(app)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, bool]:
        return {"ok": True}

    app.include_router(api_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("preco_facil.main:app", host=settings.host, port=settings.port, reload=settings.debug)
