"""Tests for search tally, trending lists, visits and admin stats."""

import asyncio
from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from preco_facil.models import SearchTerm
from preco_facil.services import stats as stats_service
from preco_facil.services.search import search_products, trending_offers
from preco_facil.services.stats import (
    get_admin_stats,
    record_search_term,
    track_visit,
    trending_terms,
)
from preco_facil.stores.postgres import get_session
from tests.factories import FIXED_NOW, make_store, publish, set_blocked


async def _tally(term: str) -> int | None:
    async with get_session() as session:
        return await session.scalar(select(SearchTerm.count).where(SearchTerm.term == term))


@pytest.mark.asyncio
async def test_concurrent_searches_are_all_counted(db):
    await record_search_term("arroz")

    await asyncio.gather(*(search_products("arroz", now=FIXED_NOW) for _ in range(8)))

    assert await _tally("arroz") == 9


@pytest.mark.asyncio
async def test_trending_terms_ordered_by_count(db):
    for term, times in (("arroz", 3), ("cafe", 5), ("leite", 1), ("feijao", 3)):
        for _ in range(times):
            await record_search_term(term)

    terms = await trending_terms(limit=3)

    assert [(t.term, t.count) for t in terms] == [("cafe", 5), ("arroz", 3), ("feijao", 3)]


@pytest.mark.asyncio
async def test_trending_terms_default_limit(db):
    for i in range(7):
        await record_search_term(f"termo {i}")

    assert len(await trending_terms()) == 5


@pytest.mark.asyncio
async def test_trending_terms_served_from_cache(db, monkeypatch: pytest.MonkeyPatch):
    cache: dict[int, list[dict]] = {}

    async def get_cache(limit):
        return cache.get(limit)

    async def set_cache(limit, payload, ttl):
        cache[limit] = payload

    monkeypatch.setattr(stats_service.redis_store, "is_ready", lambda: True)
    monkeypatch.setattr(stats_service.redis_store, "get_trending_terms_cache", get_cache)
    monkeypatch.setattr(stats_service.redis_store, "set_trending_terms_cache", set_cache)

    await record_search_term("arroz")
    first = await trending_terms()
    await record_search_term("cafe")
    second = await trending_terms()

    assert cache[5] == [{"term": "arroz", "count": 1}]
    assert second == first


@pytest.mark.asyncio
async def test_trending_offers_only_active_promos_of_visible_stores(db):
    central = await make_store("Mercado Central")
    bom_preco = await make_store("Bom Preço")
    emporio = await make_store("Empório São José")
    await publish(central, "Café Pilão", "18.90", promo_price="16.90", now=FIXED_NOW)
    await publish(bom_preco, "Café Pilão", "18.50", promo_price="15.90", now=FIXED_NOW)
    await publish(emporio, "Café Pilão", "19.50", promo_price="14.90", now=FIXED_NOW - timedelta(days=2))
    await publish(emporio, "Arroz", "25.00")
    await set_blocked(bom_preco)

    offers = await trending_offers(now=FIXED_NOW + timedelta(hours=1))

    assert [(o.store_id, o.effective_price) for o in offers] == [(central, 16.9)]
    assert offers[0].promo_active is True


@pytest.mark.asyncio
async def test_trending_offers_limit(db):
    store = await make_store("Mercado Central")
    for i in range(12):
        await publish(store, f"Produto {i}", "10.00", promo_price="9.00", now=FIXED_NOW)

    assert len(await trending_offers(now=FIXED_NOW)) == 10
    assert len(await trending_offers(3, now=FIXED_NOW)) == 3


@pytest.mark.asyncio
async def test_visits_and_admin_stats(db):
    central = await make_store("Mercado Central")
    bom_preco = await make_store("Bom Preço")
    await publish(central, "Arroz", "25.00")
    await publish(bom_preco, "Arroz", "22.00")
    await publish(central, "Leite", "5.49")

    empty = await get_admin_stats()
    assert empty.visits == 0

    await asyncio.gather(*(track_visit() for _ in range(4)))
    stats = await get_admin_stats()

    assert (stats.stores, stats.products, stats.prices, stats.visits) == (2, 2, 3, 4)


# ============================================================
# HTTP
# ============================================================


@pytest.mark.asyncio
async def test_trending_endpoints(db, client: AsyncClient):
    store = await make_store("Mercado Central")
    await publish(store, "Café Pilão", "18.90", promo_price="16.90")
    await client.get("/api/search", params={"product": "Café"})

    response = await client.get("/api/search/trending")
    assert response.status_code == 200
    assert response.json() == [{"term": "café", "count": 1}]

    response = await client.get("/api/offers/trending")
    assert response.status_code == 200
    assert [o["product_name"] for o in response.json()] == ["Café Pilão"]


@pytest.mark.asyncio
async def test_track_visit_endpoint(db, client: AsyncClient, admin_headers):
    assert (await client.post("/api/track_visit")).json() == {"success": True, "message": None}

    response = await client.get("/api/admin/stats", headers=admin_headers)
    assert response.json()["visits"] == 1
