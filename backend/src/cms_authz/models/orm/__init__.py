"""SQLAlchemy ORM models package."""

from cms_authz.models.orm.base import Base
from cms_authz.models.orm.policy import PolicyLimitationORM, PolicyORM
from cms_authz.models.orm.role import RoleORM
from cms_authz.models.orm.role_assignment import RoleAssignmentORM
from cms_authz.models.orm.user import (
    SubjectORM,
    UserGroupMembershipORM,
    UserGroupORM,
    UserORM,
)

__all__ = [
    "Base",
    "PolicyLimitationORM",
    "PolicyORM",
    "RoleORM",
    "RoleAssignmentORM",
    "SubjectORM",
    "UserGroupMembershipORM",
    "UserGroupORM",
    "UserORM",
]
