"""DTOs package."""

from cms_authz.models.dto.role import (
    PolicyCreateRequest,
    PolicyUpdateRequest,
    RoleCreateRequest,
    RoleUpdateRequest,
)

__all__ = [
    "PolicyCreateRequest",
    "PolicyUpdateRequest",
    "RoleCreateRequest",
    "RoleUpdateRequest",
]
