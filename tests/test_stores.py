"""Tests for store directory, profile, logo and admin store management."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from preco_facil.services.merchants import list_merchants_public
from preco_facil.stores.postgres import get_session
from tests.factories import FIXED_NOW, make_store, publish


@pytest.mark.asyncio
async def test_directory_flags_active_promotions(db):
    central = await make_store("Mercado Central")
    bom_preco = await make_store("Bom Preço")
    await publish(central, "Café Pilão", "18.90", promo_price="16.90", now=FIXED_NOW)
    await publish(bom_preco, "Café Pilão", "18.50", promo_price="15.90", now=FIXED_NOW - timedelta(days=2))

    async with get_session() as session:
        stores = await list_merchants_public(session, now=FIXED_NOW)

    assert [(s.name, s.has_promo) for s in stores] == [("Bom Preço", False), ("Mercado Central", True)]


@pytest.mark.asyncio
async def test_store_profile(db, client: AsyncClient):
    store = await make_store("Mercado Central", street="Rua das Flores", number="120")

    response = await client.get(f"/api/store/{store}")
    assert response.status_code == 200
    data = response.json()
    assert data["street"] == "Rua das Flores"
    assert "password_hash" not in data

    response = await client.get("/api/store/999")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_update_logo(db, client: AsyncClient):
    store = await make_store("Mercado Central")

    response = await client.post("/api/merchant/logo", json={"store_id": store, "logo_url": "uploads/logo.png"})
    assert response.status_code == 200
    assert response.json() == {"success": True, "logo_url": "uploads/logo.png"}

    response = await client.get("/api/stores")
    assert response.json()[0]["logo_url"] == "uploads/logo.png"


# ============================================================
# Admin
# ============================================================


@pytest.mark.asyncio
async def test_admin_create_store(db, client: AsyncClient, admin_headers):
    payload = {"name": "Mercado Central", "password": "demo123", "neighborhood": "Centro"}

    response = await client.post("/api/admin/stores", json=payload, headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["rating"] == 5.0
    assert data["is_blocked"] is False
    assert (data["lat"], data["lon"]) == (0.0, 0.0)
    assert "password" not in response.text

    response = await client.post("/api/admin/stores", json=payload, headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"


@pytest.mark.asyncio
async def test_admin_update_store_keeps_credential_when_omitted(db, client: AsyncClient, admin_headers):
    store = await make_store("Mercado Central", password="demo123")

    response = await client.put(
        f"/api/admin/stores/{store}",
        json={"name": "Mercado Central Ltda", "phone": "(11) 3333-1000"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Mercado Central Ltda"

    response = await client.post("/api/login", json={"id": store, "password": "demo123"})
    assert response.status_code == 200

    await client.put(
        f"/api/admin/stores/{store}",
        json={"name": "Mercado Central Ltda", "password": "novo456"},
        headers=admin_headers,
    )
    response = await client.post("/api/login", json={"id": store, "password": "demo123"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_admin_update_rename_conflict(db, client: AsyncClient, admin_headers):
    await make_store("Mercado Central")
    other = await make_store("Bom Preço")

    response = await client.put(
        f"/api/admin/stores/{other}",
        json={"name": "Mercado Central"},
        headers=admin_headers,
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_admin_block_hides_store_from_search(db, client: AsyncClient, admin_headers):
    store = await make_store("Mercado Central")
    await publish(store, "Arroz", "25.00")

    response = await client.patch(
        f"/api/admin/stores/{store}/block",
        json={"is_blocked": True},
        headers=admin_headers,
    )
    assert response.status_code == 200

    response = await client.get("/api/search", params={"product": "arroz"})
    assert response.json() == []

    response = await client.get("/api/admin/stores", headers=admin_headers)
    assert response.json()[0]["is_blocked"] is True


@pytest.mark.asyncio
async def test_admin_missing_store(db, client: AsyncClient, admin_headers):
    response = await client.delete("/api/admin/stores/999", headers=admin_headers)
    assert response.status_code == 404

    response = await client.patch(
        "/api/admin/stores/999/block",
        json={"is_blocked": True},
        headers=admin_headers,
    )
    assert response.status_code == 404
