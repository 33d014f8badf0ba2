"""Persistence handler interface consumed by the role service.

Implementations raise ``PersistenceNotFoundError`` for missing records and
return storage-level values from ``cms_authz.models.persistence``.
"""

from abc import ABC, abstractmethod

from cms_authz.models.persistence.role import (
    PersistedPolicy,
    PersistedRole,
    PersistedRoleUpdate,
    StoredLimitations,
)


class PersistenceHandler(ABC):
    """Storage operations for roles, policies and role assignments."""

    @abstractmethod
    async def create_role(self, role: PersistedRole) -> PersistedRole:
        """Store a new role with its policies and return it with ids set."""

    @abstractmethod
    async def update_role(self, update: PersistedRoleUpdate) -> None:
        """Replace the identifier, names and descriptions of a role."""

    @abstractmethod
    async def load_role(self, role_id: int) -> PersistedRole:
        """Load a role by id."""

    @abstractmethod
    async def load_role_by_identifier(self, identifier: str) -> PersistedRole:
        """Load a role by identifier."""

    @abstractmethod
    async def load_roles(self) -> list[PersistedRole]:
        """Load all roles."""

    @abstractmethod
    async def delete_role(self, role_id: int) -> None:
        """Delete a role with its policies and assignments."""

    @abstractmethod
    async def add_policy(self, role_id: int, policy: PersistedPolicy) -> PersistedPolicy:
        """Add a policy to a role and return it with ids set."""

    @abstractmethod
    async def remove_policy(self, role_id: int, policy_id: int) -> None:
        """Remove a policy from a role."""

    @abstractmethod
    async def update_policy(self, policy: PersistedPolicy) -> None:
        """Replace the limitations of a stored policy."""

    @abstractmethod
    async def assign_role(
        self,
        subject_id: int,
        role_id: int,
        limitation: StoredLimitations | None = None,
    ) -> None:
        """Assign a role to a user or user group id."""

    @abstractmethod
    async def unassign_role(self, subject_id: int, role_id: int) -> None:
        """Remove a role from a user or user group id."""

    @abstractmethod
    async def load_roles_by_group_id(self, subject_id: int) -> list[PersistedRole]:
        """Load the roles assigned directly to a user or user group id."""

    @abstractmethod
    async def load_policies_by_user_id(self, user_id: int) -> list[PersistedPolicy]:
        """Load policies of roles assigned to a user and to its groups."""
