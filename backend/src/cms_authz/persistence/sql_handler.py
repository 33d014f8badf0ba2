"""SQLAlchemy implementation of the persistence handler."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cms_authz.exceptions import PersistenceNotFoundError, RoleAlreadyExistsError
from cms_authz.models.domain.role import WILDCARD
from cms_authz.models.orm.policy import PolicyORM
from cms_authz.models.orm.role import RoleORM
from cms_authz.models.orm.role_assignment import RoleAssignmentORM
from cms_authz.models.persistence.role import (
    PersistedPolicy,
    PersistedRole,
    PersistedRoleAssignment,
    PersistedRoleUpdate,
    StoredLimitations,
)
from cms_authz.persistence.handler import PersistenceHandler
from cms_authz.repositories.policy_repository import PolicyRepository
from cms_authz.repositories.role_assignment_repository import RoleAssignmentRepository
from cms_authz.repositories.role_repository import RoleRepository
from cms_authz.repositories.user_repository import UserGroupRepository, UserRepository

logger = logging.getLogger(__name__)


def _policy_from_orm(policy: PolicyORM) -> PersistedPolicy:
    limitations: StoredLimitations | str = WILDCARD
    if not policy.limitations_wildcard:
        limitations = {
            limitation.identifier: list(limitation.limitation_values)
            for limitation in policy.limitations
        }
    return PersistedPolicy(
        id=policy.id,
        role_id=policy.role_id,
        module=policy.module,
        function=policy.function,
        limitations=limitations,
    )


def _assignment_from_orm(assignment: RoleAssignmentORM) -> PersistedRoleAssignment:
    limitation = None
    if assignment.limitation_identifier is not None:
        limitation = {assignment.limitation_identifier: list(assignment.limitation_values or [])}
    return PersistedRoleAssignment(subject_id=assignment.subject_id, limitation=limitation)


def _role_from_orm(role: RoleORM) -> PersistedRole:
    return PersistedRole(
        id=role.id,
        identifier=role.identifier,
        main_language_code=role.main_language_code,
        name=dict(role.names or {}),
        description=dict(role.descriptions or {}),
        policies=[_policy_from_orm(policy) for policy in role.policies],
        assignments=[_assignment_from_orm(assignment) for assignment in role.assignments],
    )


def _stored_limitations(policy: PersistedPolicy) -> StoredLimitations | None:
    """Limitation rows to write; None stands for the wildcard."""
    if policy.limitations == WILDCARD:
        return None
    return policy.limitations


class SqlPersistenceHandler(PersistenceHandler):
    """Persistence handler backed by an async SQLAlchemy session.

    The handler only flushes; commit and rollback are left to whoever owns the
    session. Unique constraint failures are confined to a savepoint.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize handler with database session."""
        self.session = session
        self.role_repo = RoleRepository(session)
        self.policy_repo = PolicyRepository(session)
        self.assignment_repo = RoleAssignmentRepository(session)
        self.user_repo = UserRepository(session)
        self.group_repo = UserGroupRepository(session)

    async def create_role(self, role: PersistedRole) -> PersistedRole:
        try:
            # Savepoint so a duplicate identifier only undoes this insert
            async with self.session.begin_nested():
                created = await self.role_repo.create_role(
                    identifier=role.identifier,
                    main_language_code=role.main_language_code,
                    names=role.name,
                    descriptions=role.description,
                )
        except IntegrityError as e:
            raise RoleAlreadyExistsError(role.identifier) from e

        for policy in role.policies:
            await self.policy_repo.create_policy(
                role_id=created.id,
                module=policy.module,
                function=policy.function,
                limitations=_stored_limitations(policy),
            )

        return await self.load_role(created.id)

    async def update_role(self, update: PersistedRoleUpdate) -> None:
        try:
            async with self.session.begin_nested():
                role = await self.role_repo.update(
                    update.id,
                    identifier=update.identifier,
                    main_language_code=update.main_language_code,
                    names=dict(update.name),
                    descriptions=dict(update.description),
                )
        except IntegrityError as e:
            raise RoleAlreadyExistsError(update.identifier) from e

        if role is None:
            raise PersistenceNotFoundError("role", update.id)

    async def load_role(self, role_id: int) -> PersistedRole:
        role = await self.role_repo.get_with_policies(role_id)
        if role is None:
            raise PersistenceNotFoundError("role", role_id)
        return _role_from_orm(role)

    async def load_role_by_identifier(self, identifier: str) -> PersistedRole:
        role = await self.role_repo.get_by_identifier(identifier)
        if role is None:
            raise PersistenceNotFoundError("role", identifier)
        return _role_from_orm(role)

    async def load_roles(self) -> list[PersistedRole]:
        roles = await self.role_repo.get_all_with_policies()
        return [_role_from_orm(role) for role in roles]

    async def delete_role(self, role_id: int) -> None:
        deleted = await self.role_repo.delete_role(role_id)
        if not deleted:
            raise PersistenceNotFoundError("role", role_id)

    async def add_policy(self, role_id: int, policy: PersistedPolicy) -> PersistedPolicy:
        if await self.role_repo.get_by_id(role_id) is None:
            raise PersistenceNotFoundError("role", role_id)

        created = await self.policy_repo.create_policy(
            role_id=role_id,
            module=policy.module,
            function=policy.function,
            limitations=_stored_limitations(policy),
        )
        return policy.model_copy(update={"id": created.id, "role_id": role_id})

    async def remove_policy(self, role_id: int, policy_id: int) -> None:
        removed = await self.policy_repo.delete_policy(role_id, policy_id)
        if not removed:
            raise PersistenceNotFoundError("policy", policy_id)

    async def update_policy(self, policy: PersistedPolicy) -> None:
        if policy.id is None:
            raise PersistenceNotFoundError("policy", policy.id)

        updated = await self.policy_repo.replace_limitations(
            policy.id, _stored_limitations(policy)
        )
        if not updated:
            raise PersistenceNotFoundError("policy", policy.id)

    async def assign_role(
        self,
        subject_id: int,
        role_id: int,
        limitation: StoredLimitations | None = None,
    ) -> None:
        if await self.role_repo.get_by_id(role_id) is None:
            raise PersistenceNotFoundError("role", role_id)

        identifier = None
        values = None
        if limitation:
            # A role limitation holds exactly one kind
            identifier, role_values = next(iter(limitation.items()))
            values = list(role_values)

        await self.assignment_repo.assign(
            role_id=role_id,
            subject_id=subject_id,
            limitation_identifier=identifier,
            limitation_values=values,
        )

    async def unassign_role(self, subject_id: int, role_id: int) -> None:
        removed = await self.assignment_repo.unassign(role_id, subject_id)
        if not removed:
            raise PersistenceNotFoundError("role assignment", f"{role_id}/{subject_id}")

    async def load_roles_by_group_id(self, subject_id: int) -> list[PersistedRole]:
        roles = await self.role_repo.get_assigned_to_subjects([subject_id])
        return [_role_from_orm(role) for role in roles]

    async def load_policies_by_user_id(self, user_id: int) -> list[PersistedPolicy]:
        if await self.user_repo.get_by_id(user_id) is None:
            raise PersistenceNotFoundError("user", user_id)

        group_ids = await self.group_repo.get_ancestor_ids(
            await self.user_repo.get_group_ids(user_id)
        )
        roles = await self.role_repo.get_assigned_to_subjects([user_id, *group_ids])
        logger.debug(
            "Resolved %d roles for user %s through %d groups", len(roles), user_id, len(group_ids)
        )
        return [_policy_from_orm(policy) for role in roles for policy in role.policies]
