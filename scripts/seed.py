#!/usr/bin/env python3
"""Seed database with demo data.

Creates:
- Stores in a few neighborhoods (credential "demo123" unless SEED_STORE_PASSWORD is set)
- Products shared across stores
- Listings, some with a 24h promotion

Seed script is idempotent: stores are looked up by name, listings go through
the same publish (upsert) path the API uses.

Usage:
    python -m scripts.seed
"""

import asyncio
import os
import sys
from decimal import Decimal

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv  # noqa: E402
from sqlalchemy import select  # noqa: E402

from preco_facil.models import Merchant  # noqa: E402
from preco_facil.services.auth import hash_password  # noqa: E402
from preco_facil.services.catalog import publish_listing  # noqa: E402
from preco_facil.stores.postgres import close_db, create_tables, get_session, init_db  # noqa: E402

load_dotenv()

# ============================================================
# Store Definitions
# ============================================================

STORES = [
    {"name": "Mercado Central", "street": "Rua das Flores", "number": "120", "neighborhood": "Centro", "phone": "(11) 3333-1000"},
    {"name": "Supermercado Bom Preço", "street": "Av. Brasil", "number": "845", "neighborhood": "Jardim América", "phone": "(11) 3333-2000"},
    {"name": "Empório São José", "street": "Rua São José", "number": "33", "neighborhood": "Vila Nova", "phone": "(11) 3333-3000"},
]

# ============================================================
# Listings: (store name, product, category, price, promo price)
# ============================================================

LISTINGS = [
    ("Mercado Central", "Arroz Tio João 5kg", "Mercearia", "25.00", None),
    ("Supermercado Bom Preço", "Arroz Tio João 5kg", "Mercearia", "22.00", "19.90"),
    ("Empório São José", "Arroz Integral Camil 1kg", "Mercearia", "8.49", None),
    ("Mercado Central", "Feijão Carioca Kicaldo 1kg", "Mercearia", "7.99", None),
    ("Empório São José", "Feijão Preto Camil 1kg", "Mercearia", "8.79", "7.49"),
    ("Supermercado Bom Preço", "Café Pilão 500g", "Bebidas", "18.90", None),
    ("Empório São José", "Café Pilão 500g", "Bebidas", "19.50", "16.90"),
    ("Mercado Central", "Leite Integral Italac 1L", "Laticínios", "5.49", None),
    ("Supermercado Bom Preço", "Leite Integral Italac 1L", "Laticínios", "5.29", "4.99"),
    ("Mercado Central", "Açúcar Refinado União 1kg", "Mercearia", "4.99", None),
]


async def seed_stores(password: str) -> dict[str, int]:
    """Create missing stores; return name -> id."""
    ids: dict[str, int] = {}
    async with get_session() as session:
        for store in STORES:
            result = await session.execute(select(Merchant).where(Merchant.name == store["name"]))
            merchant = result.scalar_one_or_none()
            if merchant is None:
                merchant = Merchant(password_hash=hash_password(password), **store)
                session.add(merchant)
                await session.flush()
                print(f"  + store {merchant.name} (id={merchant.id})")
            ids[merchant.name] = merchant.id
    return ids


async def seed_listings(store_ids: dict[str, int]) -> None:
    async with get_session() as session:
        for store_name, product, category, price, promo in LISTINGS:
            res = await publish_listing(
                session,
                store_id=store_ids[store_name],
                product_name=product,
                price=Decimal(price),
                category=category,
                promo_price=Decimal(promo) if promo else None,
            )
            marker = "+" if res.product_created else "~"
            print(f"  {marker} {store_name}: {product} R$ {price}{' (promo ' + promo + ')' if promo else ''}")


async def main() -> None:
    await init_db()
    try:
        if os.getenv("SEED_CREATE_TABLES", "").lower() in ("1", "true", "yes"):
            await create_tables()
        print("Seeding stores...")
        store_ids = await seed_stores(os.getenv("SEED_STORE_PASSWORD", "demo123"))
        print("Seeding listings...")
        await seed_listings(store_ids)
        print("Done.")
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
