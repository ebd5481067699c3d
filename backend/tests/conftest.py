"""Pytest configuration: in-memory SQLite database, app client and user factory."""
import os
import sys
import tempfile
from pathlib import Path

# Add the backend directory to Python path
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Uploads go to a scratch directory; must be set before app.settings is imported
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="habit-social-uploads-"))

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.domain.accounts.services import AuthService
from app.infra.db.base import Base
from app.infra.db import models  # noqa: F401  (registers tables on Base.metadata)
from app.infra.db.session import get_db
from app.infra.security.jwt import create_access_token
from app.main import app


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(session_factory):
    """Session for service-level tests (do not mix with `client` in one test)."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """HTTP client against the app with get_db bound to the test database."""

    async def _get_test_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
    """Factory: create a user through AuthService and return (user, token)."""
    counter = {"n": 0}

    async def _make_user(name: str = None, username: str = None, email: str = None, password: str = "secret123"):
        counter["n"] += 1
        n = counter["n"]
        username = username or f"user{n}"
        async with session_factory() as session:
            user = await AuthService(session).signup(
                email=email or f"{username}@example.com",
                password=password,
                name=name or f"User {n}",
                username=username,
            )
        return user, create_access_token(user.id, user.email)

    return _make_user


def auth(token: str) -> dict:
    """Authorization header for a bearer token."""
    return {"Authorization": f"Bearer {token}"}
