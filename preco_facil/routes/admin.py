"""Admin endpoints for store management and reports.

Every route except /login requires either the `x-admin-key` shared secret or
an `Authorization: Bearer <token>` obtained from POST /api/admin/login.
"""

import logging

from fastapi import APIRouter, Depends, Path

from preco_facil.schemas import (
    AdminLoginRequest,
    AdminLoginResponse,
    AdminStatsResponse,
    BlockMerchantRequest,
    CreateMerchantRequest,
    MerchantAdmin,
    SuccessResponse,
    UpdateMerchantRequest,
)
from preco_facil.routes.deps import require_admin
from preco_facil.services import merchants
from preco_facil.services.auth import exchange_admin_secret
from preco_facil.services.stats import get_admin_stats
from preco_facil.services.transactions import run_in_transaction

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


@router.post("/login", response_model=AdminLoginResponse)
async def admin_login(request: AdminLoginRequest) -> AdminLoginResponse:
    """Exchange the admin secret for a bearer token (1 hour lifetime)."""
    token = exchange_admin_secret(request.key)
    logger.info("[admin] token issued")
    return AdminLoginResponse(token=token.token, expires_in=token.expires_in)


# ============================================================
# Reports
# ============================================================


@router.get("/stats", response_model=AdminStatsResponse, dependencies=[Depends(require_admin)])
async def admin_stats() -> AdminStatsResponse:
    stats = await get_admin_stats()
    return AdminStatsResponse(
        stores=stats.stores,
        products=stats.products,
        prices=stats.prices,
        visits=stats.visits,
    )


# ============================================================
# Store Management
# ============================================================


@router.get("/stores", response_model=list[MerchantAdmin], dependencies=[Depends(require_admin)])
async def list_stores() -> list[MerchantAdmin]:
    return await run_in_transaction(merchants.list_merchants_admin)


@router.post("/stores", response_model=MerchantAdmin, dependencies=[Depends(require_admin)])
async def create_store(request: CreateMerchantRequest) -> MerchantAdmin:
    """Create a store. 409 when the name is taken."""
    return await run_in_transaction(merchants.create_merchant, request)


@router.put("/stores/{store_id}", response_model=MerchantAdmin, dependencies=[Depends(require_admin)])
async def update_store(
    request: UpdateMerchantRequest,
    store_id: int = Path(ge=1),
) -> MerchantAdmin:
    return await run_in_transaction(merchants.update_merchant, store_id, request)


@router.delete("/stores/{store_id}", response_model=SuccessResponse, dependencies=[Depends(require_admin)])
async def delete_store(store_id: int = Path(ge=1)) -> SuccessResponse:
    """Delete a store and all of its listings."""
    await run_in_transaction(merchants.delete_merchant, store_id)
    return SuccessResponse()


@router.patch(
    "/stores/{store_id}/block",
    response_model=SuccessResponse,
    dependencies=[Depends(require_admin)],
)
async def block_store(
    request: BlockMerchantRequest,
    store_id: int = Path(ge=1),
) -> SuccessResponse:
    """Block or unblock a store; applies to the next search."""
    await run_in_transaction(merchants.set_merchant_blocked, store_id, request.is_blocked)
    return SuccessResponse()
