"""Tests for health check endpoints."""

import logging
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from grocery_api.middleware import get_request_id


@pytest.mark.asyncio
async def test_root(client: AsyncClient):
    """Test root endpoint."""
    response = await client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "message" in data
    assert "version" in data


@pytest.mark.asyncio
async def test_readiness(client: AsyncClient):
    response = await client.get("/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "ready"


@pytest.mark.asyncio
async def test_liveness(client: AsyncClient):
    response = await client.get("/live")
    assert response.status_code == 200
    assert response.json()["status"] == "alive"


@pytest.mark.asyncio
async def test_healthz_reports_healthy(client: AsyncClient):
    redis_client = AsyncMock()
    with patch("grocery_api.routers.health.get_redis", AsyncMock(return_value=redis_client)):
        response = await client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "healthy", "redis": "healthy"}
    redis_client.ping.assert_awaited_once()


@pytest.mark.asyncio
async def test_healthz_reports_redis_down(client: AsyncClient):
    with patch(
        "grocery_api.routers.health.get_redis",
        AsyncMock(side_effect=ConnectionError("refused")),
    ):
        response = await client.get("/healthz")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["database"] == "healthy"
    assert data["redis"] == "unhealthy"


@pytest.mark.asyncio
async def test_security_headers(client: AsyncClient):
    response = await client.get("/live")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "X-Request-Id" in response.headers


@pytest.mark.asyncio
async def test_access_log_line(client: AsyncClient, auth_headers: dict, caplog):
    with caplog.at_level(logging.INFO, logger="grocery_api.middleware"):
        response = await client.get(
            "/api/shopping-lists", headers={**auth_headers, "X-Request-Id": "req-7"}
        )

    assert response.status_code == 200
    records = [r for r in caplog.records if r.name == "grocery_api.middleware"]
    assert len(records) == 1
    fields = records[0].extra_fields
    assert fields["method"] == "GET"
    assert fields["path"] == "/api/shopping-lists"
    assert fields["status"] == 200
    assert fields["duration_ms"] >= 0
    assert "GET /api/shopping-lists -> 200" in records[0].getMessage()
    assert auth_headers["Authorization"].split()[1] not in caplog.text


@pytest.mark.asyncio
async def test_access_log_is_emitted_under_request_id(client: AsyncClient):
    seen: list[str | None] = []

    class TraceCapture(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            seen.append(get_request_id())

    middleware_logger = logging.getLogger("grocery_api.middleware")
    handler = TraceCapture(level=logging.INFO)
    middleware_logger.addHandler(handler)
    previous_level = middleware_logger.level
    middleware_logger.setLevel(logging.INFO)
    try:
        await client.get("/live", headers={"X-Request-Id": "req-8"})
    finally:
        middleware_logger.removeHandler(handler)
        middleware_logger.setLevel(previous_level)

    assert seen == ["req-8"]
