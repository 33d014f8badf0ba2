"""Role and policy domain models."""

from typing import Literal

from pydantic import BaseModel

from cms_authz.models.domain.limitation import Limitation

# Module, function or limitation set meaning "everything"
WILDCARD = "*"


class Policy(BaseModel):
    """Policy domain model.

    ``limitations`` is the wildcard sentinel when the policy covers every
    module or every function, otherwise a (possibly empty) list.
    """

    id: int
    role_id: int
    module: str
    function: str
    limitations: list[Limitation] | Literal["*"] = []

    class Config:
        """Pydantic config."""

        from_attributes = True

    def get_limitations(self) -> list[Limitation] | Literal["*"]:
        """Get the policy limitations."""
        return self.limitations

    @property
    def is_wildcard(self) -> bool:
        """Whether all limitations apply."""
        return self.limitations == WILDCARD


class Role(BaseModel):
    """Role domain model."""

    id: int
    identifier: str
    main_language_code: str | None = None
    names: dict[str, str] = {}
    descriptions: dict[str, str] = {}
    policies: list[Policy] = []

    class Config:
        """Pydantic config."""

        from_attributes = True

    def get_names(self) -> dict[str, str]:
        """Get all translated names."""
        return self.names

    def get_name(self, language_code: str) -> str | None:
        """Get the name in one language."""
        return self.names.get(language_code)

    def get_descriptions(self) -> dict[str, str]:
        """Get all translated descriptions."""
        return self.descriptions

    def get_description(self, language_code: str) -> str | None:
        """Get the description in one language."""
        return self.descriptions.get(language_code)

    def get_policies(self) -> list[Policy]:
        """Get the role policies."""
        return self.policies
