"""Role assignment repository."""

from sqlalchemy import delete

from cms_authz.models.orm.role_assignment import RoleAssignmentORM
from cms_authz.repositories.base import BaseRepository


class RoleAssignmentRepository(BaseRepository[RoleAssignmentORM]):
    """Repository for role assignment operations."""

    model = RoleAssignmentORM

    async def assign(
        self,
        role_id: int,
        subject_id: int,
        limitation_identifier: str | None = None,
        limitation_values: list[str] | None = None,
    ) -> RoleAssignmentORM:
        """Assign a role to a user or user group.

        Args:
            role_id: Role ID
            subject_id: User or user group ID
            limitation_identifier: Optional role limitation kind
            limitation_values: Values of the role limitation

        Returns:
            Created RoleAssignmentORM
        """
        return await self.create(
            role_id=role_id,
            subject_id=subject_id,
            limitation_identifier=limitation_identifier,
            limitation_values=limitation_values,
        )

    async def unassign(self, role_id: int, subject_id: int) -> int:
        """Remove every assignment of a role to a subject.

        Args:
            role_id: Role ID
            subject_id: User or user group ID

        Returns:
            Number of assignments removed
        """
        result = await self.session.execute(
            delete(RoleAssignmentORM)
            .where(RoleAssignmentORM.role_id == role_id)
            .where(RoleAssignmentORM.subject_id == subject_id)
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()
        return result.rowcount
