"""Service factories.

The role service never reaches for a global handler; everything it needs is
built here from one session and passed in explicitly.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from cms_authz.persistence.sql_handler import SqlPersistenceHandler
from cms_authz.services.role_service import Authorizer, RoleService
from cms_authz.services.user_service import UserService


def get_user_service(session: AsyncSession) -> UserService:
    """Get UserService instance."""
    return UserService(session)


def get_role_service(
    session: AsyncSession,
    authorizer: Authorizer | None = None,
) -> RoleService:
    """Get RoleService instance backed by the SQL persistence handler.

    Args:
        session: Database session shared by handler and user lookup
        authorizer: Optional access check, defaults to allowing everything

    Returns:
        RoleService
    """
    return RoleService(
        handler=SqlPersistenceHandler(session),
        user_lookup=get_user_service(session),
        authorizer=authorizer,
    )
