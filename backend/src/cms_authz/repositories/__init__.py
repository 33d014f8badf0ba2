"""Repositories package."""

from cms_authz.repositories.base import BaseRepository
from cms_authz.repositories.policy_repository import PolicyRepository
from cms_authz.repositories.role_assignment_repository import RoleAssignmentRepository
from cms_authz.repositories.role_repository import RoleRepository
from cms_authz.repositories.user_repository import UserGroupRepository, UserRepository

__all__ = [
    "BaseRepository",
    "PolicyRepository",
    "RoleAssignmentRepository",
    "RoleRepository",
    "UserGroupRepository",
    "UserRepository",
]
