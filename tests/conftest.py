import os
from collections.abc import AsyncIterator

# Cheap hashes for tests; must be set before budget_tracker.config is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from budget_tracker.db.session import Base, Database, get_db  # noqa: E402
from budget_tracker.main import app  # noqa: E402

# Pytest only picks up fixtures from conftest.py files. Fixtures defined in other
# modules (like tests/seeds.py) are registered through pytest_plugins.
pytest_plugins = ["tests.seeds"]

# Defaults to an in-memory SQLite database. Point it at Postgres to run the
# suite against the production dialect, e.g.
# TEST_DATABASE_URL=postgresql+asyncpg://budget@localhost:5432/budget_test
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

if TEST_DATABASE_URL.startswith("sqlite"):
    # One shared connection, otherwise every checkout sees a fresh empty database
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
else:
    from sqlalchemy.pool import NullPool

    engine = create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)

async_session = async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db() -> AsyncIterator[AsyncSession]:
    """Create tables and yield a session, then drop tables after test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncIterator[AsyncClient]:
    """HTTP client that uses the test database session."""

    async def override_get_db() -> AsyncIterator[AsyncSession]:
        yield db

    app.dependency_overrides[get_db] = override_get_db
    # ASGITransport does not run the lifespan, so install the handle by hand
    app.state.database = Database(engine)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
