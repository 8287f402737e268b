"""Error Handlers — verifies the envelope for framework and unexpected errors.

Invariants:
    - Unknown routes → 404 "Route METHOD /path not found"
    - Internal failures → 500; detail only in development mode
    - Errors logged with method and path
    - Access log written even when the handler raises
"""

import logging

import pytest
from httpx import ASGITransport, AsyncClient

from users_api.api.dependencies import get_user_repository
from users_api.config import Settings
from users_api.core.errors import DatabaseError


class _BrokenRepository:
    """Repository whose list fails with the given exception."""

    def __init__(self, exc: Exception):
        self._exc = exc

    async def list_users(self, query=None):
        raise self._exc


@pytest.fixture
def production(monkeypatch):
    monkeypatch.setattr(
        "users_api.api.error_handlers.get_settings",
        lambda: Settings(app_env="production"),
    )


@pytest.fixture
async def lenient_client(app):
    """Client that returns 500 responses instead of re-raising app exceptions."""
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c


def _break_repository(app, exc: Exception) -> None:
    app.dependency_overrides[get_user_repository] = lambda: _BrokenRepository(exc)


async def test_unknown_route_returns_404_envelope(client):
    res = await client.get("/api/nothing-here")

    assert res.status_code == 404
    assert res.json() == {
        "success": False, "message": "Route GET /api/nothing-here not found",
    }


async def test_wrong_method_returns_405_envelope(client):
    res = await client.delete("/api/users")

    assert res.status_code == 405
    assert res.json() == {"success": False, "message": "Method Not Allowed"}


async def test_database_error_includes_detail_in_development(app, client):
    _break_repository(app, DatabaseError("query", "connection reset"))

    res = await client.get("/api/users")

    assert res.status_code == 500
    assert res.json() == {
        "success": False,
        "message": "Database query failed",
        "error": "connection reset",
    }


async def test_database_error_hides_detail_in_production(app, client, production):
    _break_repository(app, DatabaseError("query", "connection reset"))

    res = await client.get("/api/users")

    assert res.status_code == 500
    assert res.json() == {"success": False, "message": "Database query failed"}


async def test_unhandled_exception_in_development_has_stack(app, lenient_client):
    _break_repository(app, RuntimeError("kaboom"))

    res = await lenient_client.get("/api/users")

    assert res.status_code == 500
    body = res.json()
    assert body["success"] is False
    assert body["message"] == "Internal server error"
    assert body["error"] == "kaboom"
    assert "RuntimeError" in body["stack"]


async def test_unhandled_exception_in_production_is_opaque(app, lenient_client, monkeypatch):
    monkeypatch.setattr(
        "users_api.api.error_handlers.get_settings",
        lambda: Settings(app_env="production"),
    )
    _break_repository(app, RuntimeError("kaboom"))

    res = await lenient_client.get("/api/users")

    assert res.status_code == 500
    assert res.json() == {"success": False, "message": "Internal server error"}


async def test_errors_logged_with_method_and_path(client, caplog):
    with caplog.at_level(logging.WARNING, logger="users_api.api.error_handlers"):
        await client.get("/api/users/999")

    record = next(
        r for r in caplog.records if r.name == "users_api.api.error_handlers"
    )
    assert record.method == "GET"
    assert record.path == "/api/users/999"
    assert record.status_code == 404
    assert record.error_code == "RESOURCE_NOT_FOUND"


async def test_access_log_written_when_handler_raises(app, lenient_client, caplog):
    _break_repository(app, RuntimeError("kaboom"))

    with caplog.at_level(logging.INFO, logger="users_api.access"):
        res = await lenient_client.get("/api/users")

    assert res.status_code == 500
    record = next(r for r in caplog.records if r.name == "users_api.access")
    assert record.method == "GET"
    assert record.path == "/api/users"
    assert record.status_code == 500
    assert record.duration_ms >= 0
