"""Tests for health endpoint and error format."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test health endpoint returns ok."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


@pytest.mark.asyncio
async def test_unknown_route_is_404(client: AsyncClient):
    response = await client.get("/api/nope")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_cors_allows_admin_key_header(client: AsyncClient):
    response = await client.options(
        "/api/admin/stats",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "GET",
            "Access-Control-Request-Headers": "x-admin-key",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
