"""User service: user and user group lookup for the role service."""

import logging
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from cms_authz.exceptions import (
    InvalidArgumentValueError,
    UserAlreadyExistsError,
    UserGroupNotFoundError,
    UserNotFoundError,
)
from cms_authz.models.domain.user import User, UserGroup
from cms_authz.repositories.user_repository import UserGroupRepository, UserRepository

logger = logging.getLogger(__name__)


class UserLookup(Protocol):
    """What the role service needs from user management."""

    async def load_user(self, user_id: int) -> User:
        ...

    async def load_user_group(self, group_id: int) -> UserGroup:
        ...


class UserService:
    """Service for users and user groups."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.user_repo = UserRepository(session)
        self.group_repo = UserGroupRepository(session)

    async def load_user(self, user_id: int) -> User:
        """Load a user.

        Args:
            user_id: User ID

        Returns:
            User

        Raises:
            UserNotFoundError: If user not found
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return User.model_validate(user)

    async def load_user_group(self, group_id: int) -> UserGroup:
        """Load a user group.

        Args:
            group_id: User group ID

        Returns:
            UserGroup

        Raises:
            UserGroupNotFoundError: If group not found
        """
        group = await self.group_repo.get_by_id(group_id)
        if group is None:
            raise UserGroupNotFoundError(group_id)
        return UserGroup.model_validate(group)

    async def create_user(
        self,
        login: str,
        email: str | None = None,
        name: str | None = None,
        group: UserGroup | None = None,
    ) -> User:
        """Create a user, optionally inside a group.

        Raises:
            InvalidArgumentValueError: If login is empty
            UserAlreadyExistsError: If login is taken
        """
        if not login:
            raise InvalidArgumentValueError("login", login)

        if await self.user_repo.get_by_login(login) is not None:
            raise UserAlreadyExistsError(login)

        user = await self.user_repo.create_user(login=login, email=email, name=name)
        if group is not None:
            await self.assign_user_to_group(User.model_validate(user), group)

        logger.info("Created user %s", user.id)
        return User.model_validate(user)

    async def create_user_group(self, name: str, parent: UserGroup | None = None) -> UserGroup:
        """Create a user group, optionally below a parent group.

        Raises:
            InvalidArgumentValueError: If name is empty
            UserGroupNotFoundError: If parent does not exist
        """
        if not name:
            raise InvalidArgumentValueError("name", name)

        parent_id = None
        if parent is not None:
            parent_id = (await self.load_user_group(parent.id)).id

        group = await self.group_repo.create_group(name=name, parent_id=parent_id)
        logger.info("Created user group %s", group.id)
        return UserGroup.model_validate(group)

    async def assign_user_to_group(self, user: User, group: UserGroup) -> None:
        """Make a user a member of a group.

        Raises:
            UserNotFoundError: If user not found
            UserGroupNotFoundError: If group not found
        """
        await self.load_user(user.id)
        await self.load_user_group(group.id)
        await self.user_repo.add_to_group(user.id, group.id)
