"""Role repository."""

from sqlalchemy import delete, select
from sqlalchemy.orm import selectinload

from cms_authz.models.orm.policy import PolicyLimitationORM, PolicyORM
from cms_authz.models.orm.role import RoleORM
from cms_authz.models.orm.role_assignment import RoleAssignmentORM
from cms_authz.repositories.base import BaseRepository


def _with_policies_and_assignments():
    """Loader options for a fully populated role."""
    return (
        selectinload(RoleORM.policies).selectinload(PolicyORM.limitations),
        selectinload(RoleORM.assignments),
    )


class RoleRepository(BaseRepository[RoleORM]):
    """Repository for role operations."""

    model = RoleORM

    async def get_with_policies(self, role_id: int) -> RoleORM | None:
        """Get role with policies, limitations and assignments loaded.

        Args:
            role_id: Role ID

        Returns:
            RoleORM or None if not found
        """
        result = await self.session.execute(
            select(RoleORM)
            .options(*_with_policies_and_assignments())
            .where(RoleORM.id == role_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_identifier(self, identifier: str) -> RoleORM | None:
        """Get role by identifier with policies loaded.

        Args:
            identifier: Role identifier

        Returns:
            RoleORM or None if not found
        """
        result = await self.session.execute(
            select(RoleORM)
            .options(*_with_policies_and_assignments())
            .where(RoleORM.identifier == identifier)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_all_with_policies(self) -> list[RoleORM]:
        """Get all roles with policies loaded, oldest first.

        Returns:
            List of RoleORM
        """
        result = await self.session.execute(
            select(RoleORM)
            .options(*_with_policies_and_assignments())
            .order_by(RoleORM.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_assigned_to_subjects(self, subject_ids: list[int]) -> list[RoleORM]:
        """Get roles assigned to any of the given subject ids.

        Args:
            subject_ids: User and/or user group IDs

        Returns:
            List of RoleORM, each role once
        """
        if not subject_ids:
            return []

        assigned_role_ids = select(RoleAssignmentORM.role_id).where(
            RoleAssignmentORM.subject_id.in_(subject_ids)
        )
        result = await self.session.execute(
            select(RoleORM)
            .options(*_with_policies_and_assignments())
            .where(RoleORM.id.in_(assigned_role_ids))
            .order_by(RoleORM.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def create_role(
        self,
        identifier: str,
        main_language_code: str | None = None,
        names: dict[str, str] | None = None,
        descriptions: dict[str, str] | None = None,
    ) -> RoleORM:
        """Create a new role.

        Args:
            identifier: Unique role identifier
            main_language_code: Main language of the role texts
            names: Names by language code
            descriptions: Descriptions by language code

        Returns:
            Created RoleORM
        """
        return await self.create(
            identifier=identifier,
            main_language_code=main_language_code,
            names=dict(names or {}),
            descriptions=dict(descriptions or {}),
        )

    async def delete_role(self, role_id: int) -> bool:
        """Delete a role together with its policies and assignments.

        Args:
            role_id: Role ID

        Returns:
            True if the role existed
        """
        policy_ids = select(PolicyORM.id).where(PolicyORM.role_id == role_id)
        await self.session.execute(
            delete(PolicyLimitationORM)
            .where(PolicyLimitationORM.policy_id.in_(policy_ids))
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(
            delete(PolicyORM)
            .where(PolicyORM.role_id == role_id)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(
            delete(RoleAssignmentORM)
            .where(RoleAssignmentORM.role_id == role_id)
            .execution_options(synchronize_session=False)
        )
        return await self.delete(role_id)
