import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "ok"
    assert data["environment"] == "testing"
    assert data["uptime"] >= 0
    assert "timestamp" in data


@pytest.mark.asyncio
async def test_ping(client: AsyncClient):
    response = await client.get("/ping")

    assert response.json() == {"pong": True}


@pytest.mark.asyncio
async def test_ready_when_dependencies_answer(client: AsyncClient):
    response = await client.get("/ready")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "ready"
    assert data["database"] == "connected"
    assert data["cache"] == "connected"


@pytest.mark.asyncio
async def test_not_ready_when_cache_is_down(client: AsyncClient, token_cache):
    token_cache.healthy = False

    response = await client.get("/ready")

    assert response.status_code == 503
    assert response.json() == {"success": False, "message": "Service not ready - cache disconnected"}


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client: AsyncClient):
    response = await client.get("/api/nope")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found"}


@pytest.mark.asyncio
async def test_wrong_method_uses_error_envelope(client: AsyncClient):
    response = await client.get("/api/auth/login")

    assert response.status_code == 405
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_cors_preflight_allows_frontend(client: AsyncClient):
    response = await client.options(
        "/api/auth/login",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "POST"},
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert response.headers["access-control-allow-credentials"] == "true"
