"""Shopper endpoints.

GET  /api/search?product=TERM  - ranked listings for a product query
GET  /api/search/trending      - most searched terms
GET  /api/offers/trending      - listings with an active promotion
POST /api/track_visit          - page-load counter

Routers are thin: call services for business logic.
"""

from fastapi import APIRouter, Query

from preco_facil.schemas import ListingView, SearchHit, SuccessResponse, TrendingTerm
from preco_facil.services.search import search_products, trending_offers
from preco_facil.services.stats import track_visit, trending_terms

router = APIRouter()


@router.get("/search", response_model=list[SearchHit])
async def search(
    product: str | None = Query(
        default=None,
        description="Free-text product name (accent/case-insensitive, fuzzy)",
        max_length=255,
        examples=["arroz", "cafe"],
    ),
) -> list[SearchHit]:
    """Search all visible stores for a product.

    Ordered by match quality (best first), then effective price (cheapest
    first): the first result is the best price among the best matches.
    """
    return await search_products(product)


@router.get("/search/trending", response_model=list[TrendingTerm])
async def get_trending_terms() -> list[TrendingTerm]:
    """Top search terms by count, descending."""
    return await trending_terms()


@router.get("/offers/trending", response_model=list[ListingView])
async def get_trending_offers() -> list[ListingView]:
    """Up to 10 active promotions from visible stores."""
    return await trending_offers()


@router.post("/track_visit", response_model=SuccessResponse)
async def post_track_visit() -> SuccessResponse:
    await track_visit()
    return SuccessResponse()
