"""Async engine, session factory and schema bootstrap."""

from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from app.core.config import get_settings

settings = get_settings()

_is_sqlite = settings.database_url.startswith("sqlite")

# SQLite (local dev) has no connection pool to size
_pool_kwargs: dict = {} if _is_sqlite else {"pool_size": 20, "max_overflow": 10}

engine = create_async_engine(settings.database_url, echo=False, **_pool_kwargs)

if _is_sqlite:
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

async_session_factory = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; portfolio, section and usage writes commit explicitly."""
    async with async_session_factory() as session:
        yield session


async def init_db() -> None:
    """Create all tables. Production schemas are managed by Alembic."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
