"""Schemas for merchant catalog endpoints (/api/merchant/products)."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class PublishListingRequest(BaseModel):
    """Publish or update a store's price for a product.

    `image_url` is the relative path of an already stored image; when omitted
    on an update the existing image is kept.
    """

    store_id: int
    product_name: str = Field(max_length=255)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    category: str | None = None
    promo_price: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    image_url: str | None = None


class PublishListingResponse(BaseModel):
    """Result of a publish (upsert)."""

    success: bool = True
    message: str
    product_id: int
    product_created: bool
    promo_expires_at: datetime | None = None


class MerchantListing(BaseModel):
    """A store's own listing as shown in its dashboard."""

    name: str
    category: str | None = None
    price: float
    promo_price: float | None = None
    promo_expires_at: datetime | None = None
    promo_active: bool = False
    effective_price: float
    image_url: str | None = None
    store_name: str
