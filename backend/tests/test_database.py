"""Session lifecycle tests."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cms_authz import database
from cms_authz.dependencies import get_role_service
from cms_authz.exceptions import RoleNotFoundError
from cms_authz.models.dto.role import RoleCreateRequest


@pytest.fixture
def session_maker(engine, monkeypatch):
    """Point get_db at the in-memory test engine."""
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    monkeypatch.setattr(database, "get_session_maker", lambda: maker)
    return maker


class TestGetDb:
    """get_db commits on success and rolls back on errors."""

    @pytest.mark.asyncio
    async def test_commits_when_body_finishes(self, session_maker):
        async for session in database.get_db():
            await get_role_service(session).create_role(RoleCreateRequest(identifier="editor"))

        async with session_maker() as session:
            role = await get_role_service(session).load_role_by_identifier("editor")

        assert role.identifier == "editor"

    @pytest.mark.asyncio
    async def test_rolls_back_on_domain_error(self, session_maker):
        sessions = database.get_db()
        session = await sessions.__anext__()
        await get_role_service(session).create_role(RoleCreateRequest(identifier="editor"))

        with pytest.raises(RoleNotFoundError):
            await sessions.athrow(RoleNotFoundError(1))

        async with session_maker() as session:
            assert await get_role_service(session).load_roles() == []
