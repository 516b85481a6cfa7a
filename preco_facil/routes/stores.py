"""Store-facing and public store endpoints.

GET  /api/stores                   - store directory (with active promo flag)
GET  /api/store/{id}               - public store profile
POST /api/login                    - store login (id + credential)
GET  /api/merchant/products        - a store's own listings
POST /api/merchant/products        - publish/update a price (upsert)
POST /api/merchant/logo            - set the store logo path
"""

from fastapi import APIRouter, Path, Query

from preco_facil.errors import MissingParameterError
from preco_facil.schemas import (
    MerchantListing,
    MerchantLoginRequest,
    MerchantLoginResponse,
    MerchantPublic,
    MerchantSummary,
    PublishListingRequest,
    PublishListingResponse,
    UpdateLogoRequest,
    UpdateLogoResponse,
)
from preco_facil.services import catalog, merchants
from preco_facil.services.transactions import run_in_transaction

router = APIRouter()


@router.get("/stores", response_model=list[MerchantSummary])
async def list_stores() -> list[MerchantSummary]:
    return await run_in_transaction(merchants.list_merchants_public)


@router.get("/store/{store_id}", response_model=MerchantPublic)
async def get_store(store_id: int = Path(ge=1)) -> MerchantPublic:
    return await run_in_transaction(merchants.get_merchant_public, store_id)


@router.post("/login", response_model=MerchantLoginResponse)
async def store_login(request: MerchantLoginRequest) -> MerchantLoginResponse:
    """Authenticate a store. 401 on bad credentials, 403 if the store is blocked."""

    async def _login(session) -> MerchantLoginResponse:
        merchant = await merchants.authenticate_merchant(session, request.id, request.password)
        return MerchantLoginResponse.model_validate(merchant)

    return await run_in_transaction(_login)


@router.get("/merchant/products", response_model=list[MerchantListing])
async def get_merchant_products(
    store_id: int | None = Query(default=None, ge=1),
) -> list[MerchantListing]:
    if store_id is None:
        raise MissingParameterError("Missing store_id", {"param": "store_id"})
    return await run_in_transaction(catalog.list_merchant_listings, store_id)


@router.post("/merchant/products", response_model=PublishListingResponse)
async def publish_product(request: PublishListingRequest) -> PublishListingResponse:
    """Publish a price; republishing the same product replaces the listing."""
    return await run_in_transaction(
        catalog.publish_listing,
        store_id=request.store_id,
        product_name=request.product_name,
        price=request.price,
        category=request.category,
        promo_price=request.promo_price,
        image_url=request.image_url,
    )


@router.post("/merchant/logo", response_model=UpdateLogoResponse)
async def update_logo(request: UpdateLogoRequest) -> UpdateLogoResponse:
    logo_url = await run_in_transaction(merchants.update_merchant_logo, request.store_id, request.logo_url)
    return UpdateLogoResponse(logo_url=logo_url)
