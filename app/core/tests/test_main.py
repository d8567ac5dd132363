"""Tests for the application factory."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings
from app.main import create_app


def _paths(app) -> set[str]:
    return {route.path for route in app.routes}


def test_routes_are_registered():
    app = create_app(Settings(app_env="testing"))

    assert {"/health", "/health/ready", "/feiras-livres", "/feiras-livres/{market_id}"} <= _paths(
        app
    )


def test_title_comes_from_settings():
    app = create_app(Settings(app_name="Feiras SP"))

    assert app.title == "Feiras SP"


@pytest.mark.asyncio
async def test_docs_only_in_development():
    for env, expected in (("development", 200), ("production", 404)):
        app = create_app(Settings(app_env=env))
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.get("/openapi.json")
        assert response.status_code == expected, env
