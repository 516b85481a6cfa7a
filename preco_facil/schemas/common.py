"""Response envelopes shared by every router."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    code: str = Field(description="Machine-readable kind, e.g. MISSING_PARAMETER, BACKEND_UNAVAILABLE")
    message: str = Field(description="Human-readable message; never raw storage error text")
    detail: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Body of every non-2xx response: {"error": {"code", "message", "detail"}}."""

    error: ErrorDetail


class SuccessResponse(BaseModel):
    """Plain acknowledgement for writes without a payload."""

    success: bool = True
    message: str | None = None
