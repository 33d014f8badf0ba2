"""Storage-level role values exchanged with persistence handlers.

These mirror what a handler stores, not what callers see: limitations are a
plain mapping of identifier to values, and assignments only know subject ids.
"""

from typing import Literal

from pydantic import BaseModel

# identifier -> limitation values
StoredLimitations = dict[str, list[str]]


class PersistedPolicy(BaseModel):
    """Stored policy."""

    id: int | None = None
    role_id: int | None = None
    module: str
    function: str
    limitations: StoredLimitations | Literal["*"] = {}


class PersistedRoleAssignment(BaseModel):
    """Stored binding of a role to a subject id (user or user group)."""

    subject_id: int
    limitation: StoredLimitations | None = None


class PersistedRole(BaseModel):
    """Stored role with its policies and assignments."""

    id: int | None = None
    identifier: str
    main_language_code: str | None = None
    name: dict[str, str] = {}
    description: dict[str, str] = {}
    policies: list[PersistedPolicy] = []
    assignments: list[PersistedRoleAssignment] = []

    @property
    def group_ids(self) -> list[int]:
        """Subject ids the role is assigned to; users and groups are mixed."""
        return [assignment.subject_id for assignment in self.assignments]


class PersistedRoleUpdate(BaseModel):
    """Full replacement of a role's scalar fields."""

    id: int
    identifier: str
    main_language_code: str | None = None
    name: dict[str, str] = {}
    description: dict[str, str] = {}
