"""
Shared fixtures.

Every test gets a fresh in-memory SQLite database. API tests run against the real app with
two dependency overrides: the session (bound to the test engine) and the resolved identity
(whatever ``auth.identity`` is set to, None meaning signed out).
"""
import os
from collections.abc import AsyncGenerator
from dataclasses import dataclass

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from api.main import app  # noqa: E402
from core.auth import get_identity  # noqa: E402
from db.session import get_async_session  # noqa: E402
from models import Base  # noqa: E402
from schemas.identity import Identity  # noqa: E402

ALICE = Identity(subject="user_alice", name="Alice", email="alice@example.com")
BOB = Identity(subject="user_bob", name="Bob", email="bob@example.com")
CAROL = Identity(subject="user_carol", name=None, email="carol@example.com")


@dataclass
class AuthState:
    """Identity returned by the overridden get_identity dependency."""

    identity: Identity | None = None


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory database with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session for calling the service layer directly."""
    session_factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def auth() -> AuthState:
    """Switch the caller identity for API requests (signed out by default)."""
    return AuthState()


@pytest.fixture
async def client(db_engine: AsyncEngine, auth: AuthState) -> AsyncGenerator[AsyncClient]:
    """HTTP client for the app, wired to the test database and identity."""
    session_factory = async_sessionmaker(db_engine, expire_on_commit=False)

    async def override_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[get_identity] = lambda: auth.identity

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
