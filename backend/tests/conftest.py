"""Shared test configuration and fixtures.

No database is needed: the metrics engine is pure, the API is exercised with
``get_db`` overridden by an ``AsyncMock`` session, and service tests patch
the query layer.
"""

import uuid
from collections.abc import AsyncGenerator, Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from staymetrics.auth.jwt import create_access_token
from staymetrics.database import get_db
from staymetrics.main import app
from staymetrics.models.user import User

# ---------------------------------------------------------------------------
# Database stand-ins
# ---------------------------------------------------------------------------


@pytest.fixture
def make_result() -> Callable[..., MagicMock]:
    """Build a fake SQLAlchemy ``Result`` for ``db.execute`` to return."""

    def _make(scalar: Any = None, scalars: list | None = None, rows: list | None = None) -> MagicMock:
        result = MagicMock()
        result.scalar_one_or_none.return_value = scalar
        result.scalars.return_value.all.return_value = scalars or []
        result.all.return_value = rows or []
        return result

    return _make


@pytest.fixture
def db_session() -> AsyncMock:
    """An async session whose ``execute`` tests can program."""
    session = AsyncMock()
    session.execute = AsyncMock()
    return session


# ---------------------------------------------------------------------------
# HTTP client wired to the fake session
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(db_session: AsyncMock) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient whose requests use ``db_session``."""

    async def override_get_db() -> AsyncGenerator[AsyncMock, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Convenience fixtures: authenticated user
# ---------------------------------------------------------------------------


@pytest.fixture
def test_user() -> User:
    unique = uuid.uuid4().hex[:8]
    return User(
        id=uuid.uuid4(),
        email=f"analyst-{unique}@test.com",
        name="Revenue Analyst",
        is_active=True,
    )


@pytest.fixture
def auth_headers(test_user: User, db_session: AsyncMock, make_result) -> dict[str, str]:
    """Bearer headers for ``test_user``; the session resolves the token's user."""
    db_session.execute.return_value = make_result(scalar=test_user)
    token = create_access_token({"sub": str(test_user.id)})
    return {"Authorization": f"Bearer {token}"}
