"""Schemas for search and trending endpoints (/api/search, /api/offers/trending)."""

from datetime import datetime

from pydantic import BaseModel, Field


class ListingView(BaseModel):
    """One merchant's listing with resolved price and store contact/location."""

    store_id: int
    store_name: str
    rating: float | None = None
    logo_url: str | None = None
    street: str | None = None
    number: str | None = None
    neighborhood: str | None = None
    phone: str | None = None
    lat: float | None = None
    lon: float | None = None

    product_name: str
    category: str | None = None
    image_url: str | None = None

    price: float
    promo_price: float | None = None
    promo_expires_at: datetime | None = None
    promo_active: bool = False
    effective_price: float


class SearchHit(ListingView):
    """A ranked search result.

    `similarity` is the match quality: 1.0 for substring matches, otherwise
    the trigram similarity between normalized product name and query.
    """

    similarity: float = Field(ge=0.0, le=1.0)


class TrendingTerm(BaseModel):
    """A frequently searched term."""

    term: str
    count: int = Field(ge=0)
