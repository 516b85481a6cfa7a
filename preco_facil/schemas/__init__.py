"""Pydantic schemas for API request/response validation."""

from preco_facil.schemas.admin import AdminLoginRequest, AdminLoginResponse, AdminStatsResponse
from preco_facil.schemas.catalog import MerchantListing, PublishListingRequest, PublishListingResponse
from preco_facil.schemas.common import ErrorDetail, ErrorResponse, SuccessResponse
from preco_facil.schemas.merchant import (
    BlockMerchantRequest,
    CreateMerchantRequest,
    MerchantAdmin,
    MerchantLoginRequest,
    MerchantLoginResponse,
    MerchantPublic,
    MerchantSummary,
    UpdateLogoRequest,
    UpdateLogoResponse,
    UpdateMerchantRequest,
)
from preco_facil.schemas.search import ListingView, SearchHit, TrendingTerm

__all__ = [
    "AdminLoginRequest",
    "AdminLoginResponse",
    "AdminStatsResponse",
    "BlockMerchantRequest",
    "CreateMerchantRequest",
    "ErrorDetail",
    "ErrorResponse",
    "ListingView",
    "MerchantAdmin",
    "MerchantListing",
    "MerchantLoginRequest",
    "MerchantLoginResponse",
    "MerchantPublic",
    "MerchantSummary",
    "PublishListingRequest",
    "PublishListingResponse",
    "SearchHit",
    "SuccessResponse",
    "TrendingTerm",
    "UpdateLogoRequest",
    "UpdateLogoResponse",
    "UpdateMerchantRequest",
]
