"""Shared test fixtures — async SQLite in-memory DB + test client."""

from collections.abc import AsyncGenerator
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

# Import all models so metadata is populated
import app.models  # noqa: F401
from app.core.database import get_session
from app.core.security import hash_password
from app.main import app
from app.models.user import User


@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def test_session_factory(engine):
    """Session factory bound to the test SQLite engine."""
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with test_session_factory() as sess:
        yield sess
        await sess.rollback()


@pytest.fixture
async def client(session) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX async test client with DB session override."""

    async def _override_session():
        yield session

    app.dependency_overrides[get_session] = _override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def user(session) -> User:
    """A persisted account for service-level tests."""
    row = User(
        email="owner@example.com",
        username="owner",
        name="Owner",
        password_hash=hash_password("password1234"),
    )
    session.add(row)
    await session.commit()
    await session.refresh(row)
    return row


@pytest.fixture
def register_user(client):
    """Register accounts over the API; returns auth headers and the user payload."""

    async def _register(username: str, password: str = "password1234") -> dict:
        resp = await client.post("/v1/auth/register", json={
            "email": f"{username}@example.com",
            "password": password,
            "username": username,
            "name": username.title(),
        })
        assert resp.status_code == 201, resp.text
        data = resp.json()
        return {
            "headers": {"Authorization": f"Bearer {data['access_token']}"},
            "user": data["user"],
        }

    return _register
