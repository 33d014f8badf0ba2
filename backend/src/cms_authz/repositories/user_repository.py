"""User and user group repositories."""

from sqlalchemy import select

from cms_authz.models.orm.user import (
    SubjectORM,
    UserGroupMembershipORM,
    UserGroupORM,
    UserORM,
)
from cms_authz.repositories.base import BaseRepository

SUBJECT_TYPE_USER = "user"
SUBJECT_TYPE_USER_GROUP = "user_group"


class UserRepository(BaseRepository[UserORM]):
    """Repository for user operations."""

    model = UserORM

    async def get_by_login(self, login: str) -> UserORM | None:
        """Get user by login.

        Args:
            login: User login

        Returns:
            UserORM or None if not found
        """
        result = await self.session.execute(select(UserORM).where(UserORM.login == login))
        return result.scalar_one_or_none()

    async def get_group_ids(self, user_id: int) -> list[int]:
        """Get IDs of the groups a user is a direct member of.

        Args:
            user_id: User ID

        Returns:
            List of user group IDs
        """
        result = await self.session.execute(
            select(UserGroupMembershipORM.group_id)
            .where(UserGroupMembershipORM.user_id == user_id)
            .order_by(UserGroupMembershipORM.group_id)
        )
        return list(result.scalars().all())

    async def create_user(
        self,
        login: str,
        email: str | None = None,
        name: str | None = None,
    ) -> UserORM:
        """Create a user in the shared subject id space.

        Args:
            login: Unique login
            email: Email address
            name: Display name

        Returns:
            Created UserORM
        """
        subject = SubjectORM(subject_type=SUBJECT_TYPE_USER)
        self.session.add(subject)
        await self.session.flush()
        return await self.create(id=subject.id, login=login, email=email, name=name)

    async def add_to_group(self, user_id: int, group_id: int) -> None:
        """Add a user to a group.

        Args:
            user_id: User ID
            group_id: User group ID
        """
        self.session.add(UserGroupMembershipORM(user_id=user_id, group_id=group_id))
        await self.session.flush()


class UserGroupRepository(BaseRepository[UserGroupORM]):
    """Repository for user group operations."""

    model = UserGroupORM

    async def create_group(self, name: str, parent_id: int | None = None) -> UserGroupORM:
        """Create a user group in the shared subject id space.

        Args:
            name: Group name
            parent_id: Optional parent group ID

        Returns:
            Created UserGroupORM
        """
        subject = SubjectORM(subject_type=SUBJECT_TYPE_USER_GROUP)
        self.session.add(subject)
        await self.session.flush()
        return await self.create(id=subject.id, name=name, parent_id=parent_id)

    async def get_ancestor_ids(self, group_ids: list[int]) -> list[int]:
        """Get the given groups plus all their ancestors.

        Args:
            group_ids: Starting user group IDs

        Returns:
            List of user group IDs, starting groups first, without duplicates
        """
        seen: list[int] = []
        pending = list(group_ids)
        while pending:
            group_id = pending.pop(0)
            if group_id in seen:
                continue
            seen.append(group_id)
            result = await self.session.execute(
                select(UserGroupORM.parent_id).where(UserGroupORM.id == group_id)
            )
            parent_id = result.scalar_one_or_none()
            if parent_id is not None:
                pending.append(parent_id)
        return seen
