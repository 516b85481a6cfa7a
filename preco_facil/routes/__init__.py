"""API routes."""

from fastapi import APIRouter

from preco_facil.routes import admin, search, stores

api_router = APIRouter()

# Shopper endpoints (search, trending, visits)
api_router.include_router(search.router, prefix="/api", tags=["search"])

# Store directory, store login and catalog publishing
api_router.include_router(stores.router, prefix="/api", tags=["stores"])

# Admin endpoints (store management, stats)
api_router.include_router(admin.router, prefix="/api/admin", tags=["admin"])
