"""Role and policy request DTOs."""

from pydantic import BaseModel, Field

from cms_authz.models.domain.limitation import Limitation


class PolicyCreateRequest(BaseModel):
    """Policy creation request."""

    module: str
    function: str
    limitations: list[Limitation] = Field(default=[])

    def get_limitations(self) -> list[Limitation]:
        """Get the limitations to store with the policy."""
        return self.limitations

    def add_limitation(self, limitation: Limitation) -> None:
        """Add a limitation, replacing any existing one of the same kind."""
        self.limitations = [
            existing for existing in self.limitations if existing.identifier != limitation.identifier
        ]
        self.limitations.append(limitation)


class PolicyUpdateRequest(BaseModel):
    """Policy update request; limitations replace the stored ones."""

    limitations: list[Limitation] = Field(default=[])

    def get_limitations(self) -> list[Limitation]:
        """Get the replacement limitations."""
        return self.limitations

    def add_limitation(self, limitation: Limitation) -> None:
        """Add a limitation, replacing any existing one of the same kind."""
        self.limitations = [
            existing for existing in self.limitations if existing.identifier != limitation.identifier
        ]
        self.limitations.append(limitation)


class RoleCreateRequest(BaseModel):
    """Role creation request."""

    identifier: str
    main_language_code: str | None = None
    names: dict[str, str] = Field(default={})
    descriptions: dict[str, str] = Field(default={})
    policies: list[PolicyCreateRequest] = Field(default=[])

    def get_policies(self) -> list[PolicyCreateRequest]:
        """Get the policies created together with the role."""
        return self.policies

    def add_policy(self, policy: PolicyCreateRequest) -> None:
        """Add a policy to create together with the role."""
        self.policies.append(policy)


class RoleUpdateRequest(BaseModel):
    """Role update request. Unset fields keep their stored value."""

    identifier: str | None = None
    main_language_code: str | None = None
    names: dict[str, str] | None = None
    descriptions: dict[str, str] | None = None
