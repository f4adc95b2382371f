"""Middleware tests — request ID, rate limiting, CORS, error handling."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from tourney.exceptions import StoreError
from tourney.kv import RedisKVStore


def _redis_store_with_count(count: int) -> RedisKVStore:
    """RedisKVStore whose pipeline reports the given request count for the window."""
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[count, True])
    client = MagicMock()
    client.pipeline.return_value = pipe
    return RedisKVStore(client)


@pytest.mark.asyncio
async def test_request_id_generated(client: AsyncClient) -> None:
    """Request ID is auto-generated when not provided."""
    response = await client.get("/health")
    assert "x-request-id" in response.headers
    assert len(response.headers["x-request-id"]) == 36  # UUID format


@pytest.mark.asyncio
async def test_request_id_preserved(client: AsyncClient) -> None:
    """Custom request ID is echoed back in response."""
    response = await client.get("/health", headers={"X-Request-Id": "test-abc-123"})
    assert response.headers["x-request-id"] == "test-abc-123"


@pytest.mark.asyncio
async def test_no_rate_limit_with_memory_store(client: AsyncClient) -> None:
    """The memory backend has no shared counters, so requests are not limited."""
    for _ in range(120):
        response = await client.get("/version")
        assert response.status_code == 200
    assert "x-ratelimit-limit" not in response.headers


@pytest.mark.asyncio
async def test_rate_limit_headers(client: AsyncClient, monkeypatch) -> None:
    """Rate limit headers are present on non-exempt endpoints with the Redis store."""
    monkeypatch.setattr("tourney.middleware.rate_limit.get_store", lambda: _redis_store_with_count(1))
    response = await client.get("/version")
    assert response.status_code == 200
    assert response.headers["x-ratelimit-remaining"] == "99"
    assert response.headers["x-ratelimit-limit"] == "100"


@pytest.mark.asyncio
async def test_rate_limit_blocks_excess(client: AsyncClient, monkeypatch) -> None:
    """101st request in a window returns 429 with Retry-After header."""
    monkeypatch.setattr("tourney.middleware.rate_limit.get_store", lambda: _redis_store_with_count(101))
    response = await client.get("/version")
    assert response.status_code == 429
    assert response.headers["retry-after"] == "60"
    assert "detail" in response.json()


@pytest.mark.asyncio
async def test_health_exempt_from_rate_limit(client: AsyncClient, monkeypatch) -> None:
    """Health endpoint is exempt from rate limiting."""
    monkeypatch.setattr("tourney.middleware.rate_limit.get_store", lambda: _redis_store_with_count(500))
    response = await client.get("/health")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_cors_preflight(client: AsyncClient) -> None:
    """CORS preflight returns access-control-allow-origin for configured origin."""
    response = await client.options(
        "/health",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert "access-control-allow-origin" in response.headers


@pytest.mark.asyncio
async def test_404_returns_json(client: AsyncClient) -> None:
    """Unknown paths return 404 with JSON body."""
    response = await client.get("/nonexistent-path")
    assert response.status_code == 404
    assert response.headers["content-type"] == "application/json"
    assert response.json()["detail"] == "Not Found"


@pytest.mark.asyncio
async def test_missing_profile_returns_json_404(client: AsyncClient, identity) -> None:
    """An authenticated caller without a profile gets a JSON 404."""
    response = await client.get(
        "/api/v1/users/me",
        headers={"Authorization": f"Bearer {identity.token_for('no-profile')}"},
    )
    assert response.status_code == 404
    assert response.json() == {"detail": "Profile not found"}


@pytest.mark.asyncio
async def test_store_outage_returns_503(client: AsyncClient, app_store, monkeypatch) -> None:
    """Store failures surface as 503 with a Retry-After hint."""

    async def broken_get(key):
        raise StoreError(f"Failed to read {key}: connection refused")

    monkeypatch.setattr(app_store, "get", broken_get)
    response = await client.get("/api/v1/users/some-user")
    assert response.status_code == 503
    assert response.headers["retry-after"] == "5"
    assert response.json()["detail"].startswith("Failed to read")


@pytest.mark.asyncio
async def test_malformed_request_id_replaced(client: AsyncClient) -> None:
    """Incoming ids with spaces or control characters are not echoed into logs."""
    response = await client.get("/health", headers={"X-Request-Id": "bad id; drop"})
    request_id = response.headers["x-request-id"]
    assert request_id != "bad id; drop"
    assert len(request_id) == 36


@pytest.mark.asyncio
async def test_cors_preflight_rejects_unrouted_method(client: AsyncClient) -> None:
    """Only the methods the API routes are allowed cross-origin."""
    response = await client.options(
        "/api/v1/tournaments",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "DELETE",
        },
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_cors_exposes_retry_after(client: AsyncClient) -> None:
    response = await client.get("/health", headers={"Origin": "http://localhost:5173"})
    assert "retry-after" in response.headers["access-control-expose-headers"].lower()
