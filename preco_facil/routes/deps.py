"""Route dependencies."""

from fastapi import Header

from preco_facil.services.auth import authorize_admin


async def require_admin(
    x_admin_key: str | None = Header(default=None, alias="x-admin-key"),
    authorization: str | None = Header(default=None),
) -> None:
    """Admin guard: shared secret header or signed bearer token."""
    authorize_admin(x_admin_key, authorization)
