"""Test data helpers that go through the same services as the API."""

from datetime import datetime, timezone
from decimal import Decimal

from preco_facil.schemas import CreateMerchantRequest, PublishListingResponse
from preco_facil.services import catalog, merchants
from preco_facil.stores.postgres import get_session

ADMIN_KEY = "test-admin-key"
FIXED_NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


async def make_store(name: str, password: str = "secret", **fields) -> int:
    """Create a store; returns its id."""
    async with get_session() as session:
        store = await merchants.create_merchant(
            session,
            CreateMerchantRequest(name=name, password=password, **fields),
        )
    return store.id


async def publish(
    store_id: int,
    product_name: str,
    price: str,
    *,
    promo_price: str | None = None,
    category: str | None = None,
    image_url: str | None = None,
    now: datetime | None = None,
) -> PublishListingResponse:
    async with get_session() as session:
        return await catalog.publish_listing(
            session,
            store_id=store_id,
            product_name=product_name,
            price=Decimal(price),
            category=category,
            promo_price=Decimal(promo_price) if promo_price else None,
            image_url=image_url,
            now=now,
        )


async def set_blocked(store_id: int, blocked: bool = True) -> None:
    async with get_session() as session:
        await merchants.set_merchant_blocked(session, store_id, blocked)
