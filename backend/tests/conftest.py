"""Shared test configuration and fixtures.

Each test gets its own in-memory SQLite database (aiosqlite), created from
``Base.metadata`` and wrapped in a transaction that rolls back afterwards.
Foreign keys are switched on so ``ON DELETE CASCADE`` behaves as it does on
PostgreSQL.
"""

import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import date
from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.auth.jwt import create_token_pair
from app.auth.passwords import hash_password
from app.database import Base, get_db
from app.main import app
from app.models.user import User

_TEST_DB_URL = "sqlite+aiosqlite://"


def _enable_foreign_keys(dbapi_conn, _):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# ---------------------------------------------------------------------------
# Per-test database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with all tables."""
    engine = create_async_engine(
        _TEST_DB_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session wrapped in a transaction that always rolls back."""
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(bind=connection, expire_on_commit=False)

        try:
            yield session
        finally:
            await session.close()
            await transaction.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Convenience fixtures: authenticated users
# ---------------------------------------------------------------------------


async def _create_user(db_session: AsyncSession, prefix: str, name: str) -> User:
    unique = uuid.uuid4().hex[:8]
    user = User(
        email=f"{prefix}-{unique}@test.com",
        hashed_password=hash_password("testpass123"),
        name=name,
        is_active=True,
    )
    db_session.add(user)
    await db_session.flush()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create and return a test host directly in the DB."""
    return await _create_user(db_session, "host", "Test Host")


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict[str, str]:
    """Return Authorization headers for the test host."""
    tokens = create_token_pair(test_user.id)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    """A second host, for ownership isolation checks."""
    return await _create_user(db_session, "other", "Other Host")


@pytest_asyncio.fixture
async def other_auth_headers(other_user: User) -> dict[str, str]:
    tokens = create_token_pair(other_user.id)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


# ---------------------------------------------------------------------------
# Convenience fixtures: guest and booking helpers
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_guest(client: AsyncClient, auth_headers: dict) -> dict:
    """Create and return a test guest via the API."""
    unique = uuid.uuid4().hex[:8]
    response = await client.post(
        "/api/v1/guests",
        json={
            "name": "Test Guest",
            "email": f"guest-{unique}@test.com",
            "phone": "+61400000000",
            "notes": "Arrives by train",
        },
        headers=auth_headers,
    )
    assert response.status_code == 201, f"Failed to create test guest: {response.text}"
    return response.json()


BookingFactory = Callable[..., Awaitable[dict]]


@pytest_asyncio.fixture
async def make_booking(client: AsyncClient, auth_headers: dict, test_guest: dict) -> BookingFactory:
    """Return a coroutine that creates a booking for the test guest via the API."""

    async def _make(
        check_in: date,
        check_out: date,
        price: Decimal | float | str = "100.00",
        notes: str | None = None,
        guest_id: str | None = None,
    ) -> dict:
        response = await client.post(
            "/api/v1/bookings",
            json={
                "guest_id": guest_id or test_guest["id"],
                "check_in": check_in.isoformat(),
                "check_out": check_out.isoformat(),
                "price": str(price),
                "notes": notes,
            },
            headers=auth_headers,
        )
        assert response.status_code == 201, f"Failed to create booking: {response.text}"
        return response.json()

    return _make
