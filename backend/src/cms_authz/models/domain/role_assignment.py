"""Role assignment domain models."""

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel

from cms_authz.models.domain.limitation import RoleLimitation
from cms_authz.models.domain.role import Role
from cms_authz.models.domain.user import User, UserGroup


class SubjectType(StrEnum):
    """Kind of subject a role is assigned to."""

    USER = "user"
    USER_GROUP = "user_group"


class RoleAssignment(BaseModel):
    """Binding of a role to a subject, optionally scoped by a limitation."""

    role: Role
    limitation: RoleLimitation | None = None


class UserRoleAssignment(RoleAssignment):
    """Role assigned directly to a user."""

    subject_type: Literal[SubjectType.USER] = SubjectType.USER
    user: User


class UserGroupRoleAssignment(RoleAssignment):
    """Role assigned to a user group."""

    subject_type: Literal[SubjectType.USER_GROUP] = SubjectType.USER_GROUP
    user_group: UserGroup
