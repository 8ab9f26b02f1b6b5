"""Fixtures for API tests."""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from api.main import app
from api.session import InMemorySessionStore, set_session_store


@pytest.fixture(autouse=True)
def memory_store():
    """Run every API test against a fresh in-memory session store."""
    store = InMemorySessionStore()
    set_session_store(store)
    yield store
    set_session_store(None)


@pytest_asyncio.fixture
async def client():
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def session_token(client):
    """Token of a freshly dealt, seeded game."""
    response = await client.post("/api/game/new", json={"seed": 42})
    return response.json()["session_id"]
