"""Storage-level value objects package."""

from cms_authz.models.persistence.role import (
    PersistedPolicy,
    PersistedRole,
    PersistedRoleAssignment,
    PersistedRoleUpdate,
    StoredLimitations,
)

__all__ = [
    "PersistedPolicy",
    "PersistedRole",
    "PersistedRoleAssignment",
    "PersistedRoleUpdate",
    "StoredLimitations",
]
