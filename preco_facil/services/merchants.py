"""Store (merchant) management and access.

- Admin: create, edit, block/unblock, delete (listings first, then the store)
- Store: login with id + credential, logo update
- Public: store directory with active-promotion flag, store profile

Blocking is a plain column update read by every search; there is no cache
between this flag and the search query.
"""

import logging
from datetime import datetime

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from preco_facil.errors import (
    ConflictError,
    ForbiddenError,
    MissingParameterError,
    NotFoundError,
    UnauthorizedError,
)
from preco_facil.models import Listing, Merchant
from preco_facil.schemas import (
    CreateMerchantRequest,
    MerchantAdmin,
    MerchantPublic,
    MerchantSummary,
    UpdateMerchantRequest,
)
from preco_facil.services.auth import hash_password, verify_password
from preco_facil.services.search import promotion_active_sql, utcnow

logger = logging.getLogger("uvicorn.error")


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


async def _get_merchant(session: AsyncSession, store_id: int) -> Merchant:
    merchant = await session.get(Merchant, store_id)
    if merchant is None:
        raise NotFoundError("Store not found", {"store_id": store_id})
    return merchant


async def _name_taken(session: AsyncSession, name: str, exclude_id: int | None = None) -> bool:
    query = select(Merchant.id).where(Merchant.name == name)
    if exclude_id is not None:
        query = query.where(Merchant.id != exclude_id)
    return (await session.execute(query.limit(1))).first() is not None


# ============================================================
# Admin operations
# ============================================================


async def create_merchant(session: AsyncSession, request: CreateMerchantRequest) -> MerchantAdmin:
    """Create a store with a hashed credential, rating 5.0 and lat/lon 0.0."""
    name = request.name.strip()
    if not name or not request.password:
        raise MissingParameterError("Name and password are required")

    if await _name_taken(session, name):
        raise ConflictError("A store with this name already exists", {"name": name})

    merchant = Merchant(
        name=name,
        password_hash=hash_password(request.password),
        street=_clean(request.street),
        number=_clean(request.number),
        neighborhood=_clean(request.neighborhood),
        phone=_clean(request.phone),
    )
    session.add(merchant)
    try:
        await session.flush()
    except IntegrityError as e:
        # Lost a race against a concurrent create with the same name
        raise ConflictError("A store with this name already exists", {"name": name}) from e
    await session.refresh(merchant)

    logger.info(f"[admin] store created id={merchant.id}")
    return MerchantAdmin.model_validate(merchant)


async def update_merchant(session: AsyncSession, store_id: int, request: UpdateMerchantRequest) -> MerchantAdmin:
    """Edit name/address/phone; replace the credential only when a new one is given."""
    merchant = await _get_merchant(session, store_id)
    name = request.name.strip()
    if not name:
        raise MissingParameterError("Name is required")
    if name != merchant.name and await _name_taken(session, name, exclude_id=store_id):
        raise ConflictError("A store with this name already exists", {"name": name})

    merchant.name = name
    merchant.street = _clean(request.street)
    merchant.number = _clean(request.number)
    merchant.neighborhood = _clean(request.neighborhood)
    merchant.phone = _clean(request.phone)
    if request.password:
        merchant.password_hash = hash_password(request.password)

    await session.flush()
    return MerchantAdmin.model_validate(merchant)


async def set_merchant_blocked(session: AsyncSession, store_id: int, is_blocked: bool) -> None:
    """Toggle visibility; effective on the next query."""
    merchant = await _get_merchant(session, store_id)
    merchant.is_blocked = is_blocked
    await session.flush()
    logger.info(f"[admin] store id={store_id} is_blocked={is_blocked}")


async def delete_merchant(session: AsyncSession, store_id: int) -> None:
    """Delete the store's listings, then the store, in the session's transaction."""
    await _get_merchant(session, store_id)
    removed = await session.execute(delete(Listing).where(Listing.store_id == store_id))
    await session.execute(delete(Merchant).where(Merchant.id == store_id))
    logger.info(f"[admin] store id={store_id} deleted with {removed.rowcount} listings")


async def list_merchants_admin(session: AsyncSession) -> list[MerchantAdmin]:
    result = await session.execute(select(Merchant).order_by(Merchant.id))
    return [MerchantAdmin.model_validate(m) for m in result.scalars().all()]


# ============================================================
# Store operations
# ============================================================


async def authenticate_merchant(session: AsyncSession, store_id: int, password: str) -> Merchant:
    """Verify a store's credential.

    Raises:
        UnauthorizedError: Unknown store or wrong credential.
        ForbiddenError: The store is blocked.
    """
    merchant = await session.get(Merchant, store_id)
    if merchant is None or not verify_password(password, merchant.password_hash):
        raise UnauthorizedError("Invalid credentials")
    if merchant.is_blocked:
        raise ForbiddenError("Access denied: this store is blocked")
    return merchant


async def update_merchant_logo(session: AsyncSession, store_id: int, logo_url: str) -> str:
    """Point the store's logo at an already stored file path."""
    merchant = await _get_merchant(session, store_id)
    merchant.logo_url = logo_url.strip()
    await session.flush()
    return merchant.logo_url


# ============================================================
# Public reads
# ============================================================


async def get_merchant_public(session: AsyncSession, store_id: int) -> MerchantPublic:
    merchant = await _get_merchant(session, store_id)
    return MerchantPublic.model_validate(merchant)


async def list_merchants_public(
    session: AsyncSession,
    now: datetime | None = None,
) -> list[MerchantSummary]:
    """All stores ordered by name, flagged when any promotion is active at `now`."""
    now = now or utcnow()
    has_promo = (
        exists()
        .where(Listing.store_id == Merchant.id)
        .where(promotion_active_sql(now))
        .label("has_promo")
    )
    result = await session.execute(
        select(Merchant.id, Merchant.name, Merchant.logo_url, Merchant.is_blocked, has_promo).order_by(
            Merchant.name
        )
    )
    return [
        MerchantSummary(
            id=row.id,
            name=row.name,
            logo_url=row.logo_url,
            is_blocked=bool(row.is_blocked),
            has_promo=bool(row.has_promo),
        )
        for row in result.all()
    ]

