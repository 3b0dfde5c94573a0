from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from starlette.requests import Request

from budget_tracker.config import Settings

# Naming conventions for database constraints.
# Without these, Alembic can't autogenerate consistent constraint names across migrations.
NAMING_CONVENTION: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    Base.metadata tracks every registered model; Alembic reads it for
    autogenerate. The naming convention gives constraints predictable names.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class Database:
    """Owns the engine (and its connection pool) for one application instance.

    Created in the FastAPI lifespan and stored on ``app.state.database``.
    Nothing else holds the engine, so tests and scripts can build their own.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        # expire_on_commit=False keeps objects usable after commit without re-querying;
        # an expired attribute access would trigger sync I/O under asyncio.
        self.session_factory = async_sessionmaker(engine, expire_on_commit=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        options: dict[str, Any] = {"echo": settings.db_echo}
        if settings.database_url.startswith("postgresql"):
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_timeout=settings.db_pool_timeout,
                pool_recycle=settings.db_pool_recycle,
                pool_pre_ping=settings.db_pool_pre_ping,
                # asyncpg driver option: kill slow queries
                connect_args={"command_timeout": settings.db_statement_timeout},
            )
        return cls(create_async_engine(settings.database_url, **options))

    async def ping(self) -> None:
        """Run ``SELECT 1``; raises if the database is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Close all pooled connections. Call on shutdown."""
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the application's database handle."""
    return request.app.state.database  # type: ignore[no-any-return]


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides a database session per request.

    Commits on success, rolls back on exception. This is the single place where
    transaction boundaries are managed: services and repositories only flush.
    """
    async with get_database(request).session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
