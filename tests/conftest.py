"""
Inkpost Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Each test gets a fresh in-memory SQLite database (aiosqlite) with
       every table created from the ORM metadata; the app's session
       dependency is overridden to use it.

Fixture Hierarchy:
    engine            per-test AsyncEngine with tables created
    ├── session_factory
    │   ├── db_session        session for calling services directly
    │   └── test_client       httpx AsyncClient → FastAPI app (ASGITransport)
    │       ├── register_user helper: POST /auth/register → (token, user)
    │       └── admin         registered user promoted to ADMIN
    mock_db_session   AsyncMock session for pure unit tests
"""

import os

# Override settings for testing BEFORE any inkpost imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["API_PREFIX"] = "/api"

import itertools
from typing import Any, AsyncGenerator, Dict, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inkpost.database import Base, build_engine, get_db_session
from inkpost.models import Role, User

_counter = itertools.count(1)


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_missing_post(mock_db_session):
            mock_db_session.get.return_value = None
            with pytest.raises(NotFoundError):
                await comment_service.create(mock_db_session, user, data)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.scalar = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def engine():
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient wired to the FastAPI app and the per-test database.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/health")
            assert response.status_code == 200
    """
    from inkpost.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def register_user(test_client):
    """
    Factory fixture: registers a unique user and returns (token, user).

    Usage:
        token, user = await register_user()
        token, user = await register_user(username="alice")
    """

    async def _register(**overrides: Any) -> Tuple[str, Dict[str, Any]]:
        n = next(_counter)
        payload = {
            "email": f"user{n}@example.com",
            "username": f"user{n}",
            "password": "password123",
            "name": f"User {n}",
        }
        payload.update(overrides)
        response = await test_client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        body = response.json()
        return body["access_token"], body["user"]

    return _register


@pytest_asyncio.fixture
async def admin(register_user, session_factory) -> Tuple[str, Dict[str, Any]]:
    """A registered user promoted to ADMIN. Tokens stay valid: role is read per request."""
    token, user = await register_user()
    async with session_factory() as session:
        await session.execute(
            update(User).where(User.email == user["email"]).values(role=Role.ADMIN)
        )
        await session.commit()
    user["role"] = Role.ADMIN.value
    return token, user


@pytest.fixture
def post_factory(test_client, register_user):
    """
    Factory fixture: creates a post through the API.

    Returns (post, token) so tests can act as the author.
    """

    async def _create(token: str = None, **overrides: Any) -> Tuple[Dict[str, Any], str]:
        if token is None:
            token, _ = await register_user()
        n = next(_counter)
        payload = {"title": f"Post number {n}", "content": f"Body of post {n}", "published": True}
        payload.update(overrides)
        response = await test_client.post("/api/posts", json=payload, headers=auth_headers(token))
        assert response.status_code == 201, response.text
        return response.json(), token

    return _create
