"""Schemas for admin endpoints (/api/admin/*)."""

from pydantic import BaseModel, Field


class AdminLoginRequest(BaseModel):
    """Exchange the shared secret for a short-lived bearer token."""

    key: str = Field(min_length=1)


class AdminLoginResponse(BaseModel):
    success: bool = True
    message: str = "Authenticated"
    token: str
    token_type: str = "bearer"
    expires_in: int


class AdminStatsResponse(BaseModel):
    """Catalog totals."""

    stores: int
    products: int
    prices: int
    visits: int
