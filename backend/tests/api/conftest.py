"""API test fixtures — FastAPI app wired to the in-memory database + httpx client.

Invariants:
    - app.state is populated directly; the lifespan never runs under ASGITransport
    - dependency_overrides cleared by discarding the app after each test

Design Decisions:
    - create_app() per test instead of the module-level app: no shared state
"""

import pytest
from httpx import ASGITransport, AsyncClient

from users_api.main import create_app


@pytest.fixture
def app(db_manager, user_repository):
    application = create_app()
    application.state.db_manager = db_manager
    application.state.user_repository = user_repository
    return application


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
async def created_user(client):
    """POST a valid user and return the data part of the envelope."""
    res = await client.post(
        "/api/users",
        json={"name": "Ann Lee", "email": "ann@example.com", "age": 30},
    )
    assert res.status_code == 201
    return res.json()["data"]
