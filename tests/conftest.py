import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-the-suite-0123456789")

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.session import get_db
from app.db.init_db import init_models
from app.core.jwt_config import create_access_token


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(test_engine.sync_engine, "connect")
    def _fks(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    await init_models(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def client(engine):
    """Return an unauthenticated API client bound to the test database."""
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def register(client, name, email, password="TestPass123!"):
    resp = await client.post(
        "/api/v1/users/register",
        json={"name": name, "email": email, "password": password},
    )
    assert resp.status_code == 200, resp.text
    user = resp.json()
    token = create_access_token({"sub": str(user["id"])})
    return {"id": user["id"], "headers": {"Authorization": f"Bearer {token}"}}


@pytest.fixture
async def alice(client):
    return await register(client, "Alice", "alice@mail.com")


@pytest.fixture
async def bob(client):
    return await register(client, "Bob", "bob@mail.com")


@pytest.fixture
async def carol(client):
    return await register(client, "Carol", "carol@mail.com")


@pytest.fixture
async def outsider(client):
    return await register(client, "Outsider", "outsider@mail.com")


@pytest.fixture
async def trip(client, alice, bob, carol):
    """Event created by Alice with Bob and Carol taking part."""
    resp = await client.post(
        "/api/v1/events/",
        json={"name": "Lisbon trip", "participant_ids": [bob["id"], carol["id"]]},
        headers=alice["headers"],
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


@pytest.fixture
def register_user(client):
    """Factory for extra users beyond the named fixtures."""
    async def _register(name, email):
        return await register(client, name, email)
    return _register
