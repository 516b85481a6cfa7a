"""Counters and reports: search tally, trending terms, visits, admin stats.

All increments are single-statement upserts so concurrent requests never lose
updates:

    INSERT INTO search_history (term, count) VALUES (:term, 1)
    ON CONFLICT (term) DO UPDATE SET count = search_history.count + 1
"""

import logging
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from preco_facil.errors import BackendUnavailableError
from preco_facil.models import VISITS_STAT_KEY, Listing, Merchant, Product, SearchTerm, SiteStat
from preco_facil.schemas import TrendingTerm
from preco_facil.settings import get_settings
from preco_facil.stores import redis as redis_store
from preco_facil.stores.postgres import get_session, upsert_insert

logger = logging.getLogger("uvicorn.error")


@dataclass
class AdminStats:
    """Catalog totals for the admin dashboard."""

    stores: int
    products: int
    prices: int
    visits: int


async def increment_search_term(session: AsyncSession, term: str) -> None:
    """Atomically add one to the tally of `term` (lower-cased)."""
    stmt = upsert_insert(session, SearchTerm).values(term=term.lower(), count=1)
    stmt = stmt.on_conflict_do_update(
        index_elements=[SearchTerm.term],
        set_={"count": SearchTerm.count + 1},
    )
    await session.execute(stmt)


async def record_search_term(term: str) -> None:
    """Best-effort tally write for a search.

    Runs in its own transaction; any failure is logged and swallowed so the
    enclosing search is never affected.
    """
    try:
        async with get_session() as session:
            await increment_search_term(session, term)
    except Exception:
        logger.warning("[search] failed to record search term (search continues)", exc_info=True)


async def _query_trending_terms(limit: int) -> list[TrendingTerm]:
    async with get_session() as session:
        result = await session.execute(
            select(SearchTerm.term, SearchTerm.count)
            .order_by(SearchTerm.count.desc(), SearchTerm.term.asc())
            .limit(limit)
        )
        return [TrendingTerm(term=term, count=count) for term, count in result.all()]


async def trending_terms(limit: int | None = None) -> list[TrendingTerm]:
    """Most searched terms, highest count first.

    Served from Redis for TRENDING_CACHE_TTL seconds when Redis is available.
    """
    settings = get_settings()
    limit = limit or settings.trending_terms_limit
    use_cache = settings.trending_cache_ttl > 0 and redis_store.is_ready()

    if use_cache:
        try:
            cached = await redis_store.get_trending_terms_cache(limit)
            if cached is not None:
                return [TrendingTerm(**item) for item in cached]
        except Exception:
            logger.warning("[stats] trending cache read failed", exc_info=True)

    try:
        terms = await _query_trending_terms(limit)
    except (SQLAlchemyError, OSError) as e:
        logger.exception("[stats] trending terms query failed")
        raise BackendUnavailableError() from e

    if use_cache:
        try:
            await redis_store.set_trending_terms_cache(
                limit,
                [t.model_dump() for t in terms],
                settings.trending_cache_ttl,
            )
        except Exception:
            logger.warning("[stats] trending cache write failed", exc_info=True)

    return terms


async def increment_visits(session: AsyncSession) -> None:
    """Atomically add one to the visit counter."""
    stmt = upsert_insert(session, SiteStat).values(stat_key=VISITS_STAT_KEY, stat_value=1)
    stmt = stmt.on_conflict_do_update(
        index_elements=[SiteStat.stat_key],
        set_={"stat_value": SiteStat.stat_value + 1},
    )
    await session.execute(stmt)


async def track_visit() -> None:
    """Count one page load."""
    try:
        async with get_session() as session:
            await increment_visits(session)
    except (SQLAlchemyError, OSError) as e:
        logger.exception("[stats] failed to track visit")
        raise BackendUnavailableError() from e


async def get_admin_stats() -> AdminStats:
    """Count stores, products, prices and visits."""
    try:
        async with get_session() as session:
            stores = await session.scalar(select(func.count()).select_from(Merchant))
            products = await session.scalar(select(func.count()).select_from(Product))
            prices = await session.scalar(select(func.count()).select_from(Listing))
            visits = await session.scalar(
                select(SiteStat.stat_value).where(SiteStat.stat_key == VISITS_STAT_KEY)
            )
    except (SQLAlchemyError, OSError) as e:
        logger.exception("[stats] admin stats query failed")
        raise BackendUnavailableError() from e

    return AdminStats(
        stores=stores or 0,
        products=products or 0,
        prices=prices or 0,
        visits=visits or 0,
    )
