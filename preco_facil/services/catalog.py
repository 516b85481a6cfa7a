"""Catalog service: publishing store prices.

Publish (upsert) flow, one transaction:
1. Check the store exists and is not blocked
2. Resolve the product by case-insensitive name:
   INSERT ... ON CONFLICT (name_key) DO NOTHING RETURNING id, else SELECT.
   A supplied category overwrites the existing one (last writer wins).
3. Upsert the listing on (store_id, product_id):
   price and promo fields are replaced; promo expiry = now + 24h when a promo
   price is given, else NULL; image kept unless a new one is supplied.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from preco_facil.errors import ForbiddenError, MissingParameterError, NotFoundError
from preco_facil.models import Listing, Merchant, Product, product_name_key
from preco_facil.schemas import MerchantListing, PublishListingResponse
from preco_facil.services.search import (
    as_utc,
    promotion_active,
    resolve_effective_price,
    utcnow,
)
from preco_facil.settings import get_settings
from preco_facil.stores.postgres import upsert_insert

logger = logging.getLogger("uvicorn.error")


async def resolve_product(
    session: AsyncSession,
    name: str,
    category: str | None = None,
) -> tuple[int, bool]:
    """Find or create the product for `name` (case-insensitive).

    Safe under concurrent first publishes: the unique name_key makes the
    losing INSERT a no-op and the follow-up SELECT sees the winner's row.

    Returns:
        (product_id, created)
    """
    key = product_name_key(name)

    insert_stmt = (
        upsert_insert(session, Product)
        .values(name=name, name_key=key, category=category)
        .on_conflict_do_nothing(index_elements=[Product.name_key])
        .returning(Product.id)
    )
    product_id = (await session.execute(insert_stmt)).scalar_one_or_none()
    if product_id is not None:
        return product_id, True

    product_id = await session.scalar(select(Product.id).where(Product.name_key == key))
    if product_id is None:
        # Conflict reported but the row is gone (deleted concurrently)
        raise NotFoundError("Product could not be resolved", {"product_name": name})

    if category:
        await session.execute(update(Product).where(Product.id == product_id).values(category=category))
    return product_id, False


async def publish_listing(
    session: AsyncSession,
    *,
    store_id: int,
    product_name: str | None,
    price: Decimal | None,
    category: str | None = None,
    promo_price: Decimal | None = None,
    image_url: str | None = None,
    now: datetime | None = None,
) -> PublishListingResponse:
    """Insert or replace a store's listing for a product."""
    name = (product_name or "").strip()
    if not name or price is None:
        raise MissingParameterError("Incomplete data: store_id, product_name and price are required")
    if price <= 0 or (promo_price is not None and promo_price <= 0):
        raise MissingParameterError("Prices must be positive")

    merchant = await session.get(Merchant, store_id)
    if merchant is None:
        raise NotFoundError("Store not found", {"store_id": store_id})
    if merchant.is_blocked:
        raise ForbiddenError("Access denied: this store is blocked")

    category = (category or "").strip() or None
    image_url = (image_url or "").strip() or None

    product_id, created = await resolve_product(session, name, category)

    now = now or utcnow()
    promo_expires_at = None
    if promo_price is not None:
        promo_expires_at = now + timedelta(hours=get_settings().promo_duration_hours)

    stmt = upsert_insert(session, Listing).values(
        store_id=store_id,
        product_id=product_id,
        price=price,
        promo_price=promo_price,
        promo_expires_at=promo_expires_at,
        image_url=image_url,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[Listing.store_id, Listing.product_id],
        set_={
            "price": stmt.excluded.price,
            "promo_price": stmt.excluded.promo_price,
            "promo_expires_at": stmt.excluded.promo_expires_at,
            "image_url": func.coalesce(stmt.excluded.image_url, Listing.image_url),
            "updated_at": func.now(),
        },
    )
    await session.execute(stmt)

    logger.info(
        f"[catalog] published store_id={store_id} product_id={product_id} "
        f"created_product={created} promo={promo_price is not None}"
    )

    return PublishListingResponse(
        message="Product updated!",
        product_id=product_id,
        product_created=created,
        promo_expires_at=promo_expires_at,
    )


async def list_merchant_listings(
    session: AsyncSession,
    store_id: int,
    now: datetime | None = None,
) -> list[MerchantListing]:
    """A store's own listings ordered by product name, with promo status at `now`."""
    now = now or utcnow()
    result = await session.execute(
        select(Listing, Product.name, Product.category, Merchant.name)
        .join(Product, Product.id == Listing.product_id)
        .join(Merchant, Merchant.id == Listing.store_id)
        .where(Listing.store_id == store_id)
        .order_by(Product.name)
    )
    return [
        MerchantListing(
            name=product_name,
            category=category,
            price=float(listing.price),
            promo_price=float(listing.promo_price) if listing.promo_price is not None else None,
            promo_expires_at=as_utc(listing.promo_expires_at) if listing.promo_expires_at else None,
            promo_active=promotion_active(listing.promo_price, listing.promo_expires_at, now),
            effective_price=resolve_effective_price(
                listing.price, listing.promo_price, listing.promo_expires_at, now
            ),
            image_url=listing.image_url,
            store_name=store_name,
        )
        for listing, product_name, category, store_name in result.all()
    ]
