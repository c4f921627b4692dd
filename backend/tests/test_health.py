"""Tests for GET /api/healthchecker."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.exc import OperationalError

from notes_api import __version__
from notes_api.database import get_db_session


@pytest.mark.asyncio
async def test_health_connected(test_client):
    response = await test_client.get("/api/healthchecker")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["database"] == "connected"
    assert body["version"] == __version__
    assert body["message"]
    assert body["uptime_seconds"] >= 0


@pytest.mark.asyncio
async def test_health_reports_unreachable_database(app, test_client):
    session = MagicMock()
    session.execute = AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("down")))

    async def broken_session():
        yield session

    app.dependency_overrides[get_db_session] = broken_session

    response = await test_client.get("/api/healthchecker")

    assert response.status_code == 200
    assert response.json()["database"] == "disconnected"
