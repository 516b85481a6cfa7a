"""Search & ranking service.

Pipeline for GET /api/search:
1. Normalize: unaccent(lower(x)) on both product name and query
2. Match: normalized substring OR trigram similarity > threshold (default 0.3)
3. Visibility: listings of blocked stores are dropped unconditionally
4. Price: promo price while the promotion is active at `now`, else regular price
5. Rank: match quality DESC, effective price ASC, store id ASC, product id ASC

Matching, visibility and pricing are SQL expressions built by separate
functions so each predicate can be tested on its own. `now` is always bound
at query time; nothing about promotions or blocking is cached.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Float, String, and_, case, func, literal, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from preco_facil.errors import BackendUnavailableError, MissingParameterError
from preco_facil.models import Listing, Merchant, Product
from preco_facil.schemas import ListingView, SearchHit
from preco_facil.services.normalization import normalize_text
from preco_facil.services.stats import record_search_term
from preco_facil.settings import get_settings
from preco_facil.stores.postgres import get_session

logger = logging.getLogger("uvicorn.error")

LIKE_ESCAPE = "/"
SUBSTRING_MATCH_QUALITY = 1.0


# ============================================================
# Time helpers
# ============================================================


def utcnow() -> datetime:
    """Current evaluation time (UTC, aware)."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (SQLite round-trips) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ============================================================
# Price resolution
# ============================================================


def promotion_active(
    promo_price: Decimal | float | None,
    promo_expires_at: datetime | None,
    now: datetime,
) -> bool:
    """A promotion is active iff a promo price is set and expiry is strictly after now."""
    if promo_price is None or promo_expires_at is None:
        return False
    return as_utc(promo_expires_at) > as_utc(now)


def resolve_effective_price(
    price: Decimal | float,
    promo_price: Decimal | float | None,
    promo_expires_at: datetime | None,
    now: datetime,
) -> float:
    """Promo price while the promotion is active, otherwise the regular price."""
    if promotion_active(promo_price, promo_expires_at, now):
        return float(promo_price)  # type: ignore[arg-type]
    return float(price)


def promotion_active_sql(now: datetime) -> ColumnElement[bool]:
    """SQL form of promotion_active() for the prices table."""
    return and_(Listing.promo_price.is_not(None), Listing.promo_expires_at > now)


def effective_price_sql(now: datetime) -> ColumnElement:
    """SQL form of resolve_effective_price()."""
    return case((promotion_active_sql(now), Listing.promo_price), else_=Listing.price)


# ============================================================
# Normalization & matching predicates
# ============================================================


def normalized_sql(expr: ColumnElement | str) -> ColumnElement[str]:
    """unaccent(lower(expr)); plain strings become bound parameters."""
    if isinstance(expr, str):
        expr = literal(expr, String)
    return func.unaccent(func.lower(expr), type_=String)


def _escape_like(term: str) -> str:
    """Escape LIKE wildcards so the query matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


def loose_match_clause(name: ColumnElement, term: str) -> ColumnElement[bool]:
    """Normalized name contains the normalized query as a substring."""
    pattern = literal("%", String) + normalized_sql(_escape_like(term)) + literal("%", String)
    return normalized_sql(name).like(pattern, escape=LIKE_ESCAPE)


def similarity_sql(name: ColumnElement, term: str) -> ColumnElement[float]:
    """Trigram similarity between normalized name and normalized query."""
    return func.similarity(normalized_sql(name), normalized_sql(term), type_=Float)


def similarity_clause(name: ColumnElement, term: str, threshold: float) -> ColumnElement[bool]:
    """Similarity strictly above the threshold."""
    return similarity_sql(name, term) > threshold


def visible_merchant_clause() -> ColumnElement[bool]:
    """Stores that are not blocked (NULL counts as not blocked)."""
    return Merchant.is_blocked.is_not(True)


def match_quality_sql(name: ColumnElement, term: str) -> ColumnElement[float]:
    """1.0 for substring matches, otherwise the similarity score."""
    return case(
        (loose_match_clause(name, term), literal(SUBSTRING_MATCH_QUALITY, Float)),
        else_=similarity_sql(name, term),
    )


# ============================================================
# Query
# ============================================================


async def search_listings(
    session: AsyncSession,
    term: str,
    *,
    now: datetime | None = None,
    threshold: float | None = None,
) -> list[SearchHit]:
    """Find, price and rank listings whose product name matches `term`.

    Args:
        session: Open database session.
        term: Free-text product query (already validated as non-empty).
        now: Evaluation time for promotion expiry (defaults to current UTC time).
        threshold: Similarity threshold (defaults to settings, 0.3).

    Returns:
        SearchHit list, best match first; among equal matches cheapest first.
    """
    now = now or utcnow()
    if threshold is None:
        threshold = get_settings().search_similarity_threshold

    quality = match_quality_sql(Product.name, term)
    effective = effective_price_sql(now)

    query = (
        select(
            Merchant.id,
            Merchant.name,
            Merchant.rating,
            Merchant.logo_url,
            Merchant.street,
            Merchant.number,
            Merchant.neighborhood,
            Merchant.phone,
            Merchant.lat,
            Merchant.lon,
            Product.name,
            Product.category,
            Listing.price,
            Listing.promo_price,
            Listing.promo_expires_at,
            Listing.image_url,
            quality.label("similarity"),
        )
        .join(Product, Product.id == Listing.product_id)
        .join(Merchant, Merchant.id == Listing.store_id)
        .where(or_(loose_match_clause(Product.name, term), similarity_clause(Product.name, term, threshold)))
        .where(visible_merchant_clause())
        .order_by(quality.desc(), effective.asc(), Merchant.id.asc(), Product.id.asc())
    )

    result = await session.execute(query)

    hits: list[SearchHit] = []
    for row in result.all():
        (
            store_id,
            store_name,
            rating,
            logo_url,
            street,
            number,
            neighborhood,
            phone,
            lat,
            lon,
            product_name,
            category,
            price,
            promo_price,
            promo_expires_at,
            image_url,
            similarity,
        ) = row
        hits.append(
            SearchHit(
                store_id=store_id,
                store_name=store_name,
                rating=float(rating) if rating is not None else None,
                logo_url=logo_url,
                street=street,
                number=number,
                neighborhood=neighborhood,
                phone=phone,
                lat=lat,
                lon=lon,
                product_name=product_name,
                category=category,
                image_url=image_url,
                price=float(price),
                promo_price=float(promo_price) if promo_price is not None else None,
                promo_expires_at=as_utc(promo_expires_at) if promo_expires_at else None,
                promo_active=promotion_active(promo_price, promo_expires_at, now),
                effective_price=resolve_effective_price(price, promo_price, promo_expires_at, now),
                similarity=min(1.0, max(0.0, float(similarity or 0.0))),
            )
        )
    return hits


async def search_products(
    term: str | None,
    *,
    now: datetime | None = None,
    threshold: float | None = None,
) -> list[SearchHit]:
    """Validate the query, tally it (best-effort) and run the ranked search.

    Raises:
        MissingParameterError: Missing term, or one that normalizes to nothing
            (nothing is executed).
        BackendUnavailableError: The search query failed.
    """
    if not normalize_text(term).strip():
        raise MissingParameterError("Missing product", {"param": "product"})

    # Best-effort: never raises.
    await record_search_term(term)

    try:
        async with get_session() as session:
            hits = await search_listings(session, term.strip(), now=now, threshold=threshold)
    except (SQLAlchemyError, OSError) as e:
        logger.exception("[search] query failed")
        raise BackendUnavailableError() from e

    logger.debug(f"[search] term={term.strip()!r} hits={len(hits)}")
    return hits


# ============================================================
# Trending offers
# ============================================================


def listing_view(listing: Listing, product: Product, merchant: Merchant, now: datetime) -> ListingView:
    """Map ORM rows to a ListingView with the price resolved at `now`."""
    return ListingView(
        store_id=merchant.id,
        store_name=merchant.name,
        rating=float(merchant.rating) if merchant.rating is not None else None,
        logo_url=merchant.logo_url,
        street=merchant.street,
        number=merchant.number,
        neighborhood=merchant.neighborhood,
        phone=merchant.phone,
        lat=merchant.lat,
        lon=merchant.lon,
        product_name=product.name,
        category=product.category,
        image_url=listing.image_url,
        price=float(listing.price),
        promo_price=float(listing.promo_price) if listing.promo_price is not None else None,
        promo_expires_at=as_utc(listing.promo_expires_at) if listing.promo_expires_at else None,
        promo_active=promotion_active(listing.promo_price, listing.promo_expires_at, now),
        effective_price=resolve_effective_price(
            listing.price, listing.promo_price, listing.promo_expires_at, now
        ),
    )


async def trending_offers(limit: int | None = None, *, now: datetime | None = None) -> list[ListingView]:
    """Up to `limit` listings with an active promotion from visible stores.

    No ordering beyond the storage default.
    """
    now = now or utcnow()
    limit = limit or get_settings().trending_offers_limit

    query = (
        select(Listing, Product, Merchant)
        .join(Product, Product.id == Listing.product_id)
        .join(Merchant, Merchant.id == Listing.store_id)
        .where(promotion_active_sql(now))
        .where(visible_merchant_clause())
        .limit(limit)
    )

    try:
        async with get_session() as session:
            rows = (await session.execute(query)).all()
    except (SQLAlchemyError, OSError) as e:
        logger.exception("[search] trending offers query failed")
        raise BackendUnavailableError() from e

    return [listing_view(listing, product, merchant, now) for listing, product, merchant in rows]
