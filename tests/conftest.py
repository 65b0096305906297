"""Shared test fixtures.

Every test gets a fresh file-backed SQLite database (schema from the models)
and an in-process fake Redis. The FastAPI app's get_db dependency is pointed
at the test database; requests are signed the way the identity gateway does.
"""

import json
import os

# Must be set before any application module reads settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./spark_test.db")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("GATEWAY_SECRET", "test-gateway-secret")

import pytest
from fakeredis import FakeAsyncRedis
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import models  # noqa: F401
from apps.api import deps
from apps.api.main import app
from core.auth import CallerContext, sign_request
from core.db import Base
from core.redis import set_redis
from services.profiles import upsert_profile


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'spark.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
async def fake_redis():
    client = FakeAsyncRedis(decode_responses=True)
    set_redis(client)
    yield client
    await client.flushall()
    set_redis(None)


@pytest.fixture
def make_profile(db):
    """Create a profile through the profile store."""

    async def _make(user_id: str, **overrides):
        fields = {"username": user_id.title(), "age": 25, "gender": "Female", "city": "Berlin", "photos": []}
        fields.update(overrides)
        profile, _ = await upsert_profile(db, CallerContext(user_id), fields)
        return profile

    return _make


class SignedClient:
    """AsyncClient wrapper that signs every request as one user."""

    def __init__(self, client: AsyncClient, user_id: str) -> None:
        self.client = client
        self.user_id = user_id

    def _headers(self, body: bytes) -> dict[str, str]:
        return {
            "X-User-Id": self.user_id,
            "X-Auth-Signature": sign_request(self.user_id, body),
            "Content-Type": "application/json",
        }

    async def get(self, path: str):
        return await self.client.get(path, headers=self._headers(b""))

    async def delete(self, path: str):
        return await self.client.delete(path, headers=self._headers(b""))

    async def post(self, path: str, payload: dict):
        body = json.dumps(payload).encode()
        return await self.client.post(path, content=body, headers=self._headers(body))


@pytest.fixture
async def client(session_factory):
    """FastAPI test client with the DB dependency overridden."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[deps.get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def as_user(client):
    """Factory: as_user("alice") -> client whose requests are signed as alice."""

    def _as_user(user_id: str) -> SignedClient:
        return SignedClient(client, user_id)

    return _as_user
