"""Tests for health check endpoints."""

import pytest

from app.core.database import get_db
from app.main import app


class _FakeSession:
    """Answers the readiness query with a fixed value or error."""

    def __init__(self, table_exists: bool = True, error: Exception | None = None) -> None:
        self._table_exists = table_exists
        self._error = error

    async def scalar(self, _statement):
        if self._error is not None:
            raise self._error
        return self._table_exists


def _override_db(session: _FakeSession) -> None:
    async def fake_db():
        yield session

    app.dependency_overrides[get_db] = fake_db


@pytest.mark.asyncio
async def test_health_check_returns_ok(client):
    """Liveness never reports database fields."""
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_readiness_ok(client):
    _override_db(_FakeSession(table_exists=True))

    response = await client.get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "connected", "schema_ready": True}


@pytest.mark.asyncio
async def test_readiness_without_schema(client):
    """A reachable database without the table is not ready."""
    _override_db(_FakeSession(table_exists=False))

    response = await client.get("/health/ready")

    assert response.json() == {
        "status": "unhealthy",
        "database": "connected",
        "schema_ready": False,
    }


@pytest.mark.asyncio
async def test_readiness_database_down(client):
    _override_db(_FakeSession(error=ConnectionRefusedError("database is down")))

    response = await client.get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {
        "status": "unhealthy",
        "database": "disconnected",
        "schema_ready": False,
    }
