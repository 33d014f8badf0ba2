"""Pytest configuration and fixtures for role authorization tests."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cms_authz.database import enable_sqlite_savepoints, init_db
from cms_authz.dependencies import get_role_service, get_user_service
from cms_authz.models.dto.role import PolicyCreateRequest, RoleCreateRequest
from cms_authz.persistence.sql_handler import SqlPersistenceHandler
from cms_authz.services.role_service import RoleService
from cms_authz.services.user_service import UserService


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_savepoints(engine)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Database session rolled back after each test."""
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def handler(session: AsyncSession) -> SqlPersistenceHandler:
    """SQL persistence handler on the test session."""
    return SqlPersistenceHandler(session)


@pytest.fixture
def user_service(session: AsyncSession) -> UserService:
    """User service on the test session."""
    return get_user_service(session)


@pytest.fixture
def role_service(session: AsyncSession) -> RoleService:
    """Role service wired to the SQL handler and user service."""
    return get_role_service(session)


@pytest.fixture
def editor_request() -> RoleCreateRequest:
    """Create request for an 'editor' role without policies."""
    return RoleCreateRequest(identifier="editor", names={"eng-GB": "Editor"})


@pytest.fixture
def content_edit_policy() -> PolicyCreateRequest:
    """Create request for a content/edit policy without limitations."""
    return PolicyCreateRequest(module="content", function="edit")
