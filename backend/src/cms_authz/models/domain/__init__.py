"""Domain models package."""

from cms_authz.models.domain.limitation import (
    CustomLimitation,
    Limitation,
    LimitationIdentifier,
    RoleLimitation,
    SectionLimitation,
    SubtreeLimitation,
    get_limitation_from_identifier,
)
from cms_authz.models.domain.role import WILDCARD, Policy, Role
from cms_authz.models.domain.role_assignment import (
    RoleAssignment,
    SubjectType,
    UserGroupRoleAssignment,
    UserRoleAssignment,
)
from cms_authz.models.domain.user import User, UserGroup

__all__ = [
    "CustomLimitation",
    "Limitation",
    "LimitationIdentifier",
    "RoleLimitation",
    "SectionLimitation",
    "SubtreeLimitation",
    "get_limitation_from_identifier",
    "WILDCARD",
    "Policy",
    "Role",
    "RoleAssignment",
    "SubjectType",
    "UserGroupRoleAssignment",
    "UserRoleAssignment",
    "User",
    "UserGroup",
]
