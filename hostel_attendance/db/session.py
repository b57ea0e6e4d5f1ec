from typing import AsyncIterator

from sqlmodel import SQLModel
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from hostel_attendance.core.config import settings


def configure_sqlite(engine: AsyncEngine) -> None:
    """Make SQLite honour SAVEPOINTs and foreign keys.

    The stock driver defers BEGIN, which breaks the savepoint the session
    resolver relies on; take over transaction control instead.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


# Async engine for SQLModel
async_engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.SQL_ECHO,
    future=True,
)
if async_engine.dialect.name == "sqlite":
    configure_sqlite(async_engine)

async_session_factory = async_sessionmaker(
    async_engine, class_=AsyncSession, expire_on_commit=False
)


async def get_session() -> AsyncIterator[AsyncSession]:
    """Dependency to get async database session."""
    async with async_session_factory() as session:
        yield session


async def init_db():
    """Initialize database tables."""
    # Register every table on the metadata first
    from hostel_attendance.db import base  # noqa: F401

    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
