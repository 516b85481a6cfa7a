"""Domain errors and their HTTP mapping.

Services raise these; `create_app()` registers `register_error_handlers` so every
error leaves the API in the structured format:

    { "error": { "code": str, "message": str, "detail": object } }
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from preco_facil.schemas.common import ErrorDetail, ErrorResponse
from preco_facil.settings import get_settings

logger = logging.getLogger("uvicorn.error")


class MarketplaceError(Exception):
    """Base error for the marketplace API."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class MissingParameterError(MarketplaceError):
    """A required request parameter is missing or empty."""

    status_code = 400
    code = "MISSING_PARAMETER"


class NotFoundError(MarketplaceError):
    """Referenced merchant, product or listing does not exist."""

    status_code = 404
    code = "NOT_FOUND"


class UnauthorizedError(MarketplaceError):
    """Credential or token check failed."""

    status_code = 401
    code = "UNAUTHORIZED"


class ForbiddenError(MarketplaceError):
    """Authenticated (or identified) but not allowed, e.g. blocked store."""

    status_code = 403
    code = "FORBIDDEN"


class ConflictError(MarketplaceError):
    """Write would violate a uniqueness rule (e.g. duplicate store name)."""

    status_code = 409
    code = "CONFLICT"


class BackendUnavailableError(MarketplaceError):
    """Storage call failed. The message is always generic."""

    status_code = 503
    code = "BACKEND_UNAVAILABLE"

    def __init__(self, message: str = "Storage backend unavailable", detail: dict[str, Any] | None = None) -> None:
        super().__init__(message, detail)


def error_body(code: str, message: str, detail: dict[str, Any] | None = None) -> dict[str, Any]:
    """Build the structured error payload."""
    return ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail)).model_dump()


def register_error_handlers(app: FastAPI) -> None:
    """Render MarketplaceError subclasses and unexpected errors in the structured format."""

    @app.exception_handler(MarketplaceError)
    async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning(f"[api] {request.method} {request.url.path} -> {exc.status_code} {exc.code}")
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.code, exc.message, exc.detail),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"[api] unhandled error on {request.method} {request.url.path}")
        message = str(exc) if get_settings().debug else "Internal server error"
        return JSONResponse(
            status_code=MarketplaceError.status_code,
            content=error_body(MarketplaceError.code, message),
        )
