"""Role service for managing roles, policies and role assignments."""

import logging
from collections.abc import Awaitable, Callable
from typing import Literal

from cms_authz.exceptions import (
    InvalidArgumentError,
    InvalidArgumentValueError,
    NotFoundError,
    PersistenceNotFoundError,
    RoleAlreadyExistsError,
    RoleNotFoundError,
    UnauthorizedError,
    UserGroupNotFoundError,
    UserNotFoundError,
)
from cms_authz.models.domain.limitation import (
    Limitation,
    RoleLimitation,
    get_limitation_from_identifier,
    is_role_limitation_identifier,
)
from cms_authz.models.domain.role import WILDCARD, Policy, Role
from cms_authz.models.domain.role_assignment import (
    RoleAssignment,
    UserGroupRoleAssignment,
    UserRoleAssignment,
)
from cms_authz.models.domain.user import User, UserGroup
from cms_authz.models.dto.role import (
    PolicyCreateRequest,
    PolicyUpdateRequest,
    RoleCreateRequest,
    RoleUpdateRequest,
)
from cms_authz.models.persistence.role import (
    PersistedPolicy,
    PersistedRole,
    PersistedRoleUpdate,
    StoredLimitations,
)
from cms_authz.persistence.handler import PersistenceHandler
from cms_authz.services.user_service import UserLookup
from cms_authz.utils.secure_logging import log_warning

logger = logging.getLogger(__name__)

# Permission module guarding every operation of this service
ROLE_MODULE = "role"

# (module, function) -> allowed
Authorizer = Callable[[str, str], Awaitable[bool]]


async def allow_all(module: str, function: str) -> bool:
    """Authorizer that grants everything."""
    return True


class RoleService:
    """Service for role, policy and role assignment operations.

    Every call goes straight to the persistence handler; nothing is cached.
    Identifier uniqueness is checked with a load before the write, which is
    not atomic with the write itself. Concurrent writers rely on the
    handler's own unique constraint.
    """

    def __init__(
        self,
        handler: PersistenceHandler,
        user_lookup: UserLookup,
        authorizer: Authorizer | None = None,
    ) -> None:
        """Initialize service with its collaborators.

        Args:
            handler: Persistence handler storing roles and assignments
            user_lookup: Loads users and user groups
            authorizer: Decides whether the caller may run a role function
        """
        self.handler = handler
        self.user_lookup = user_lookup
        self.authorizer = authorizer or allow_all

    # =========================================================================
    # Roles
    # =========================================================================

    async def create_role(self, request: RoleCreateRequest) -> Role:
        """Create a new role.

        Args:
            request: Role creation request

        Returns:
            Created role

        Raises:
            InvalidArgumentValueError: If identifier or a policy is malformed
            UnauthorizedError: If the caller may not create roles
            RoleAlreadyExistsError: If identifier already exists
        """
        if not request.identifier:
            raise InvalidArgumentValueError("identifier", request.identifier, "RoleCreateRequest")

        for policy in request.get_policies():
            self._validate_policy_create(policy)

        await self._check_access("create")

        if await self._find_role_by_identifier(request.identifier) is not None:
            raise RoleAlreadyExistsError(request.identifier)

        created = await self.handler.create_role(self._build_persistence_role(request))
        logger.info(f"Created role {created.id} ({created.identifier})")
        return self._build_domain_role(created)

    async def update_role(self, role: Role, request: RoleUpdateRequest) -> Role:
        """Update identifier, names and descriptions of a role.

        Args:
            role: Role to update
            request: Fields to change; unset fields are kept

        Returns:
            Updated role

        Raises:
            InvalidArgumentValueError: If role id or the new identifier is empty
            UnauthorizedError: If the caller may not update roles
            RoleNotFoundError: If role not found
            RoleAlreadyExistsError: If the new identifier belongs to another role
        """
        if not role.id:
            raise InvalidArgumentValueError("id", role.id, "Role")

        if request.identifier is not None and not request.identifier:
            raise InvalidArgumentValueError("identifier", request.identifier, "RoleUpdateRequest")

        await self._check_access("update")

        loaded = await self._load_persisted_role(role.id)

        if request.identifier:
            existing = await self._find_role_by_identifier(request.identifier)
            if existing is not None and existing.id != loaded.id:
                raise RoleAlreadyExistsError(request.identifier)

        update = PersistedRoleUpdate(
            id=loaded.id,
            identifier=request.identifier or loaded.identifier,
            main_language_code=(
                request.main_language_code
                if request.main_language_code is not None
                else loaded.main_language_code
            ),
            name=request.names if request.names is not None else loaded.name,
            description=(
                request.descriptions if request.descriptions is not None else loaded.description
            ),
        )
        try:
            await self.handler.update_role(update)
        except PersistenceNotFoundError as e:
            raise RoleNotFoundError(role.id) from e

        logger.info(f"Updated role {role.id}")
        return self._build_domain_role(await self._load_persisted_role(role.id))

    async def load_role(self, role_id: int) -> Role:
        """Load a role by id.

        Raises:
            InvalidArgumentValueError: If id is empty
            UnauthorizedError: If the caller may not read roles
            RoleNotFoundError: If role not found
        """
        if not role_id:
            raise InvalidArgumentValueError("id", role_id)

        await self._check_access("read")
        return self._build_domain_role(await self._load_persisted_role(role_id))

    async def load_role_by_identifier(self, identifier: str) -> Role:
        """Load a role by identifier.

        Raises:
            InvalidArgumentValueError: If identifier is empty
            UnauthorizedError: If the caller may not read roles
            RoleNotFoundError: If role not found
        """
        if not identifier:
            raise InvalidArgumentValueError("identifier", identifier)

        await self._check_access("read")

        try:
            spi_role = await self.handler.load_role_by_identifier(identifier)
        except PersistenceNotFoundError as e:
            raise RoleNotFoundError(identifier) from e

        return self._build_domain_role(spi_role)

    async def load_roles(self) -> list[Role]:
        """Load all roles; an empty list when there are none."""
        await self._check_access("read")
        spi_roles = await self.handler.load_roles()
        return [self._build_domain_role(spi_role) for spi_role in spi_roles]

    async def delete_role(self, role: Role) -> None:
        """Delete a role with its policies and assignments.

        Raises:
            InvalidArgumentValueError: If role id is empty
            UnauthorizedError: If the caller may not delete roles
            RoleNotFoundError: If role not found
        """
        if not role.id:
            raise InvalidArgumentValueError("id", role.id, "Role")

        await self._check_access("delete")

        # load role to check existence
        await self._load_persisted_role(role.id)

        try:
            await self.handler.delete_role(role.id)
        except PersistenceNotFoundError as e:
            raise RoleNotFoundError(role.id) from e

        logger.info(f"Deleted role {role.id}")

    # =========================================================================
    # Policies
    # =========================================================================

    async def add_policy(self, role: Role, request: PolicyCreateRequest) -> Role:
        """Add a new policy to a role.

        Args:
            role: Role receiving the policy
            request: Policy creation request

        Returns:
            Updated role including the new policy

        Raises:
            InvalidArgumentValueError: If role id, module or function is malformed
            UnauthorizedError: If the caller may not update roles
            RoleNotFoundError: If role not found
        """
        if not role.id:
            raise InvalidArgumentValueError("id", role.id, "Role")

        self._validate_policy_create(request)

        await self._check_access("update")

        # load role to check existence
        await self._load_persisted_role(role.id)

        spi_policy = self._build_persistence_policy(
            request.module, request.function, request.get_limitations()
        )
        try:
            created = await self.handler.add_policy(role.id, spi_policy)
        except PersistenceNotFoundError as e:
            raise RoleNotFoundError(role.id) from e

        logger.info(f"Added policy {created.id} ({request.module}/{request.function}) to role {role.id}")
        return self._build_domain_role(await self._load_persisted_role(role.id))

    async def remove_policy(self, role: Role, policy: Policy) -> Role:
        """Remove a policy from a role.

        Returns:
            Updated role without the policy

        Raises:
            InvalidArgumentValueError: If role or policy id is empty
            UnauthorizedError: If the caller may not update roles
            RoleNotFoundError: If role not found
            NotFoundError: If the policy does not belong to the role
        """
        if not role.id:
            raise InvalidArgumentValueError("id", role.id, "Role")

        if not policy.id:
            raise InvalidArgumentValueError("id", policy.id, "Policy")

        await self._check_access("update")

        # load role to check existence
        await self._load_persisted_role(role.id)

        try:
            await self.handler.remove_policy(role.id, policy.id)
        except PersistenceNotFoundError as e:
            raise NotFoundError("policy", policy.id) from e

        logger.info(f"Removed policy {policy.id} from role {role.id}")
        return self._build_domain_role(await self._load_persisted_role(role.id))

    async def update_policy(self, policy: Policy, request: PolicyUpdateRequest) -> Policy:
        """Replace the limitations of a policy; module and function are kept.

        Returns:
            Updated policy

        Raises:
            InvalidArgumentValueError: If policy id, role id, module or function is empty
            UnauthorizedError: If the caller may not update roles
            NotFoundError: If the policy does not exist
        """
        if not policy.id:
            raise InvalidArgumentValueError("id", policy.id, "Policy")

        if not policy.role_id:
            raise InvalidArgumentValueError("role_id", policy.role_id, "Policy")

        if not policy.module:
            raise InvalidArgumentValueError("module", policy.module, "Policy")

        if not policy.function:
            raise InvalidArgumentValueError("function", policy.function, "Policy")

        await self._check_access("update")

        spi_policy = self._build_persistence_policy(
            policy.module, policy.function, request.get_limitations()
        ).model_copy(update={"id": policy.id, "role_id": policy.role_id})

        try:
            await self.handler.update_policy(spi_policy)
        except PersistenceNotFoundError as e:
            raise NotFoundError("policy", policy.id) from e

        logger.info(f"Updated limitations of policy {policy.id}")
        return self._build_domain_policy(spi_policy)

    async def load_policies_by_user_id(self, user_id: int) -> list[Policy]:
        """Load policies of roles assigned to a user and to its user groups.

        Raises:
            InvalidArgumentValueError: If user id is empty
            UnauthorizedError: If the caller may not read roles
            UserNotFoundError: If user not found
        """
        if not user_id:
            raise InvalidArgumentValueError("user_id", user_id)

        await self._check_access("read")

        # load user to verify existence
        user = await self.user_lookup.load_user(user_id)

        try:
            spi_policies = await self.handler.load_policies_by_user_id(user.id)
        except PersistenceNotFoundError as e:
            raise UserNotFoundError(user_id) from e

        return [self._build_domain_policy(spi_policy) for spi_policy in spi_policies]

    # =========================================================================
    # Role Assignments
    # =========================================================================

    async def assign_role_to_user_group(
        self,
        role: Role,
        user_group: UserGroup,
        role_limitation: Limitation | None = None,
    ) -> None:
        """Assign a role to a user group, optionally scoped by a subtree or section.

        Raises:
            InvalidArgumentValueError: If an id is empty or the limitation kind is not allowed
            UnauthorizedError: If the caller may not assign roles
            RoleNotFoundError: If role not found
        """
        if not role.id:
            raise InvalidArgumentValueError("id", role.id, "Role")

        if not user_group.id:
            raise InvalidArgumentValueError("id", user_group.id, "UserGroup")

        await self._assign_role(role, user_group.id, role_limitation)
        logger.info(f"Assigned role {role.id} to user group {user_group.id}")

    async def assign_role_to_user(
        self,
        role: Role,
        user: User,
        role_limitation: Limitation | None = None,
    ) -> None:
        """Assign a role to a user, optionally scoped by a subtree or section.

        Raises:
            InvalidArgumentValueError: If an id is empty or the limitation kind is not allowed
            UnauthorizedError: If the caller may not assign roles
            RoleNotFoundError: If role not found
        """
        if not role.id:
            raise InvalidArgumentValueError("id", role.id, "Role")

        if not user.id:
            raise InvalidArgumentValueError("id", user.id, "User")

        await self._assign_role(role, user.id, role_limitation)
        logger.info(f"Assigned role {role.id} to user {user.id}")

    async def unassign_role_from_user_group(self, role: Role, user_group: UserGroup) -> None:
        """Remove a role from a user group.

        Raises:
            InvalidArgumentValueError: If an id is empty
            UnauthorizedError: If the caller may not assign roles
            RoleNotFoundError: If role not found
            InvalidArgumentError: If the role is not assigned to the user group
        """
        if not role.id:
            raise InvalidArgumentValueError("id", role.id, "Role")

        if not user_group.id:
            raise InvalidArgumentValueError("id", user_group.id, "UserGroup")

        await self._unassign_role(
            role, user_group.id, "user_group.id", "Role is not assigned to the user group"
        )
        logger.info(f"Unassigned role {role.id} from user group {user_group.id}")

    async def unassign_role_from_user(self, role: Role, user: User) -> None:
        """Remove a role from a user.

        Raises:
            InvalidArgumentValueError: If an id is empty
            UnauthorizedError: If the caller may not assign roles
            RoleNotFoundError: If role not found
            InvalidArgumentError: If the role is not assigned to the user
        """
        if not role.id:
            raise InvalidArgumentValueError("id", role.id, "Role")

        if not user.id:
            raise InvalidArgumentValueError("id", user.id, "User")

        await self._unassign_role(role, user.id, "user.id", "Role is not assigned to the user")
        logger.info(f"Unassigned role {role.id} from user {user.id}")

    async def get_role_assignments(self, role: Role) -> list[RoleAssignment]:
        """Get the users and user groups a role is assigned to.

        Stored assignments do not record whether a subject id is a user or a
        user group, so each id is looked up as a user group first and as a
        user second. Ids matching neither are skipped.

        Raises:
            InvalidArgumentValueError: If role id is empty
            UnauthorizedError: If the caller may not read roles
            RoleNotFoundError: If role not found
        """
        if not role.id:
            raise InvalidArgumentValueError("id", role.id, "Role")

        await self._check_access("read")

        spi_role = await self._load_persisted_role(role.id)
        domain_role = self._build_domain_role(spi_role)

        role_assignments: list[RoleAssignment] = []
        for assignment in spi_role.assignments:
            limitation = self._build_role_limitation(assignment.limitation)
            subject = await self._resolve_subject(assignment.subject_id)
            if isinstance(subject, UserGroup):
                role_assignments.append(
                    UserGroupRoleAssignment(
                        role=domain_role, user_group=subject, limitation=limitation
                    )
                )
            elif isinstance(subject, User):
                role_assignments.append(
                    UserRoleAssignment(role=domain_role, user=subject, limitation=limitation)
                )
            else:
                log_warning(
                    logger,
                    f"Role {role.id} is assigned to unknown subject {assignment.subject_id}",
                )

        return role_assignments

    async def get_role_assignments_for_user(self, user: User) -> list[UserRoleAssignment]:
        """Get the roles assigned directly to a user.

        Raises:
            InvalidArgumentValueError: If user id is empty
            UnauthorizedError: If the caller may not read roles
        """
        if not user.id:
            raise InvalidArgumentValueError("id", user.id, "User")

        await self._check_access("read")

        role_assignments: list[UserRoleAssignment] = []
        for spi_role, limitation in await self._load_subject_roles(user.id):
            role_assignments.append(
                UserRoleAssignment(
                    role=self._build_domain_role(spi_role), user=user, limitation=limitation
                )
            )
        return role_assignments

    async def get_role_assignments_for_user_group(
        self, user_group: UserGroup
    ) -> list[UserGroupRoleAssignment]:
        """Get the roles assigned directly to a user group.

        Raises:
            InvalidArgumentValueError: If user group id is empty
            UnauthorizedError: If the caller may not read roles
        """
        if not user_group.id:
            raise InvalidArgumentValueError("id", user_group.id, "UserGroup")

        await self._check_access("read")

        role_assignments: list[UserGroupRoleAssignment] = []
        for spi_role, limitation in await self._load_subject_roles(user_group.id):
            role_assignments.append(
                UserGroupRoleAssignment(
                    role=self._build_domain_role(spi_role),
                    user_group=user_group,
                    limitation=limitation,
                )
            )
        return role_assignments

    # =========================================================================
    # Request factories
    # =========================================================================

    def new_role_create_request(self, identifier: str) -> RoleCreateRequest:
        """Instantiate a role create request."""
        return RoleCreateRequest(identifier=identifier)

    def new_role_update_request(self) -> RoleUpdateRequest:
        """Instantiate an empty role update request."""
        return RoleUpdateRequest()

    def new_policy_create_request(self, module: str, function: str) -> PolicyCreateRequest:
        """Instantiate a policy create request."""
        return PolicyCreateRequest(module=module, function=function)

    def new_policy_update_request(self) -> PolicyUpdateRequest:
        """Instantiate a policy update request without limitations."""
        return PolicyUpdateRequest()

    # =========================================================================
    # Internals
    # =========================================================================

    async def _check_access(self, function: str) -> None:
        if not await self.authorizer(ROLE_MODULE, function):
            raise UnauthorizedError(ROLE_MODULE, function)

    def _validate_policy_create(self, request: PolicyCreateRequest) -> None:
        if not request.module:
            raise InvalidArgumentValueError("module", request.module, "PolicyCreateRequest")

        if not request.function:
            raise InvalidArgumentValueError("function", request.function, "PolicyCreateRequest")

        if request.module == WILDCARD and request.function != WILDCARD:
            raise InvalidArgumentValueError("module", request.module, "PolicyCreateRequest")

    async def _load_persisted_role(self, role_id: int) -> PersistedRole:
        try:
            return await self.handler.load_role(role_id)
        except PersistenceNotFoundError as e:
            raise RoleNotFoundError(role_id) from e

    async def _find_role_by_identifier(self, identifier: str) -> PersistedRole | None:
        try:
            return await self.handler.load_role_by_identifier(identifier)
        except PersistenceNotFoundError:
            return None

    async def _assign_role(
        self,
        role: Role,
        subject_id: int,
        role_limitation: Limitation | None,
    ) -> None:
        spi_limitation = None
        if role_limitation is not None:
            if not is_role_limitation_identifier(role_limitation.identifier):
                raise InvalidArgumentValueError(
                    "identifier", role_limitation.identifier, "RoleLimitation"
                )
            spi_limitation = {
                str(role_limitation.identifier): list(role_limitation.limitation_values)
            }

        await self._check_access("assign")

        try:
            await self.handler.assign_role(subject_id, role.id, spi_limitation)
        except PersistenceNotFoundError as e:
            raise RoleNotFoundError(role.id) from e

    async def _unassign_role(
        self,
        role: Role,
        subject_id: int,
        argument: str,
        reason: str,
    ) -> None:
        await self._check_access("assign")

        spi_role = await self._load_persisted_role(role.id)
        if subject_id not in spi_role.group_ids:
            raise InvalidArgumentError(argument, reason)

        try:
            await self.handler.unassign_role(subject_id, role.id)
        except PersistenceNotFoundError as e:
            raise InvalidArgumentError(argument, reason) from e

    async def _load_subject_roles(
        self, subject_id: int
    ) -> list[tuple[PersistedRole, RoleLimitation | None]]:
        """Roles assigned to a subject id, once per stored assignment."""
        result: list[tuple[PersistedRole, RoleLimitation | None]] = []
        for spi_role in await self.handler.load_roles_by_group_id(subject_id):
            for assignment in spi_role.assignments:
                if assignment.subject_id == subject_id:
                    result.append((spi_role, self._build_role_limitation(assignment.limitation)))
        return result

    async def _resolve_subject(self, subject_id: int) -> User | UserGroup | None:
        """Look a subject id up as a user group first, then as a user."""
        try:
            return await self.user_lookup.load_user_group(subject_id)
        except UserGroupNotFoundError:
            pass

        try:
            return await self.user_lookup.load_user(subject_id)
        except UserNotFoundError:
            return None

    def _build_domain_role(self, spi_role: PersistedRole) -> Role:
        return Role(
            id=spi_role.id,
            identifier=spi_role.identifier,
            main_language_code=spi_role.main_language_code,
            names=spi_role.name,
            descriptions=spi_role.description,
            policies=[self._build_domain_policy(spi_policy) for spi_policy in spi_role.policies],
        )

    def _build_domain_policy(self, spi_policy: PersistedPolicy) -> Policy:
        policy_limitations: list[Limitation] | Literal["*"] = WILDCARD
        if (
            spi_policy.module != WILDCARD
            and spi_policy.function != WILDCARD
            and spi_policy.limitations != WILDCARD
        ):
            policy_limitations = [
                get_limitation_from_identifier(identifier).model_copy(
                    update={"limitation_values": list(values)}
                )
                for identifier, values in spi_policy.limitations.items()
            ]

        return Policy(
            id=spi_policy.id,
            role_id=spi_policy.role_id,
            module=spi_policy.module,
            function=spi_policy.function,
            limitations=policy_limitations,
        )

    def _build_role_limitation(self, stored: StoredLimitations | None) -> RoleLimitation | None:
        if not stored:
            return None

        identifier, values = next(iter(stored.items()))
        limitation = get_limitation_from_identifier(identifier)
        if not isinstance(limitation, RoleLimitation):
            log_warning(logger, f"Ignoring stored role limitation of kind '{identifier}'")
            return None
        return limitation.model_copy(update={"limitation_values": list(values)})

    def _build_persistence_role(self, request: RoleCreateRequest) -> PersistedRole:
        return PersistedRole(
            identifier=request.identifier,
            main_language_code=request.main_language_code,
            name=dict(request.names),
            description=dict(request.descriptions),
            policies=[
                self._build_persistence_policy(
                    policy.module, policy.function, policy.get_limitations()
                )
                for policy in request.get_policies()
            ],
        )

    def _build_persistence_policy(
        self,
        module: str,
        function: str,
        limitations: list[Limitation],
    ) -> PersistedPolicy:
        limitations_to_store: StoredLimitations | Literal["*"] = WILDCARD
        if module != WILDCARD and function != WILDCARD:
            limitations_to_store = {
                str(limitation.identifier): list(limitation.limitation_values)
                for limitation in limitations
            }

        return PersistedPolicy(module=module, function=function, limitations=limitations_to_store)
