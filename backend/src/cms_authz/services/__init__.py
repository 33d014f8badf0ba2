"""Services package."""

from cms_authz.services.role_service import RoleService
from cms_authz.services.user_service import UserLookup, UserService

__all__ = [
    "RoleService",
    "UserLookup",
    "UserService",
]
