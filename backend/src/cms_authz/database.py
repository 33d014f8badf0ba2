"""Database connection and session management."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from cms_authz.config import get_settings
from cms_authz.exceptions import CmsAuthzError


def enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """Hand transaction control on SQLite connections to SQLAlchemy.

    The sqlite3 driver only emits BEGIN before DML, so a SAVEPOINT opened by
    ``session.begin_nested()`` on a fresh transaction would commit on release.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


@lru_cache
def get_engine() -> AsyncEngine:
    """Get the cached async engine for the configured database."""
    settings = get_settings()
    if settings.is_sqlite:
        # SQLite connections are cheap and not safe to share across tasks
        engine = create_async_engine(
            settings.async_database_url,
            poolclass=NullPool,
            echo=settings.database_echo,
        )
        enable_sqlite_savepoints(engine)
        return engine

    return create_async_engine(
        settings.async_database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        # Validate connections before checkout to detect stale connections
        pool_pre_ping=True,
        pool_recycle=3600,
        echo=settings.database_echo,
    )


@lru_cache
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Get the cached session factory bound to the engine."""
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session committed on success and rolled back on failure."""
    async with get_session_maker()() as session:
        try:
            yield session
            await session.commit()
        except (SQLAlchemyError, CmsAuthzError):
            await session.rollback()
            raise


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Create all tables that do not exist yet.

    Migrations are the normal path; this is for local development and tests.
    """
    from cms_authz.models.orm import Base

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
