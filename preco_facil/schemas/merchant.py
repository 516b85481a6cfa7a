"""Schemas for store (merchant) endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MerchantPublic(BaseModel):
    """Public store profile (GET /api/store/{id})."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    logo_url: str | None = None
    street: str | None = None
    number: str | None = None
    neighborhood: str | None = None
    phone: str | None = None


class MerchantSummary(BaseModel):
    """Store in the public directory (GET /api/stores)."""

    id: int
    name: str
    logo_url: str | None = None
    is_blocked: bool = False
    has_promo: bool = False


class MerchantAdmin(BaseModel):
    """Full store record for administrators. Never includes the credential."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    logo_url: str | None = None
    rating: float | None = None
    is_blocked: bool = False
    lat: float | None = None
    lon: float | None = None
    street: str | None = None
    number: str | None = None
    neighborhood: str | None = None
    phone: str | None = None
    created_at: datetime | None = None


class MerchantLoginRequest(BaseModel):
    """Store login with id and credential."""

    id: int
    password: str


class MerchantLoginResponse(BaseModel):
    """Authenticated store session data."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    is_blocked: bool = False
    logo_url: str | None = None


class CreateMerchantRequest(BaseModel):
    """Request body for POST /api/admin/stores."""

    name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=255)
    street: str | None = None
    number: str | None = None
    neighborhood: str | None = None
    phone: str | None = None


class UpdateMerchantRequest(BaseModel):
    """Request body for PUT /api/admin/stores/{id}.

    `password` is optional: when omitted the current credential is kept.
    """

    name: str = Field(min_length=1, max_length=255)
    password: str | None = Field(default=None, max_length=255)
    street: str | None = None
    number: str | None = None
    neighborhood: str | None = None
    phone: str | None = None


class BlockMerchantRequest(BaseModel):
    """Request body for PATCH /api/admin/stores/{id}/block."""

    is_blocked: bool


class UpdateLogoRequest(BaseModel):
    """Request body for POST /api/merchant/logo (path of an already stored file)."""

    store_id: int
    logo_url: str = Field(min_length=1)


class UpdateLogoResponse(BaseModel):
    success: bool = True
    logo_url: str
