"""Tests for the health check and framework-level error envelopes."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

from budget_tracker.config import settings
from budget_tracker.db.session import Database
from budget_tracker.main import app


@pytest.mark.asyncio
async def test_health_reports_connected_database(client: AsyncClient) -> None:
    resp = await client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "System is healthy"
    assert body["data"]["status"] == "healthy"
    assert body["data"]["environment"] == settings.environment
    assert body["data"]["version"] == settings.app_version
    assert body["data"]["services"] == {"database": {"status": "connected"}}
    assert body["data"]["timestamp"]


@pytest.mark.asyncio
async def test_health_returns_503_when_database_is_down(client: AsyncClient) -> None:
    unreachable = create_async_engine("sqlite+aiosqlite:////nonexistent-dir/budget.db")
    app.state.database = Database(unreachable)

    resp = await client.get("/health")

    assert resp.status_code == 503
    error = resp.json()["error"]
    assert resp.json()["success"] is False
    assert error["message"] == "Database connection failed"
    assert error["statusCode"] == 503
    await unreachable.dispose()


@pytest.mark.asyncio
async def test_unknown_route_returns_404_envelope(client: AsyncClient) -> None:
    resp = await client.get("/nope")

    assert resp.status_code == 404
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["message"] == "Not Found"
    assert body["error"]["statusCode"] == 404


@pytest.mark.asyncio
async def test_wrong_method_returns_405_envelope(client: AsyncClient) -> None:
    resp = await client.delete("/health")

    assert resp.status_code == 405
    assert resp.json()["error"]["message"] == "Method Not Allowed"


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient) -> None:
    resp = await client.get("/health", headers={"X-Request-ID": "req-123"})

    assert resp.headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
async def test_request_id_is_generated_when_missing(client: AsyncClient) -> None:
    first = await client.get("/health")
    second = await client.get("/nope")

    assert first.headers["X-Request-ID"]
    assert second.headers["X-Request-ID"]
    assert first.headers["X-Request-ID"] != second.headers["X-Request-ID"]
