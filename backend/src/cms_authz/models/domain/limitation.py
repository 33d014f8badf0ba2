"""Limitation domain models and the limitation registry.

A limitation narrows where a policy (or a role assignment) applies. The set of
kinds is closed; any identifier outside it is kept as a ``CustomLimitation``
so limitations written by newer installations still load.
"""

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel


class LimitationIdentifier(StrEnum):
    """Stored identifiers of the built-in limitation kinds."""

    CONTENT_TYPE = "Class"
    LANGUAGE = "Language"
    LOCATION = "Node"
    OWNER = "Owner"
    PARENT_OWNER = "ParentOwner"
    PARENT_CONTENT_TYPE = "ParentClass"
    PARENT_DEPTH = "ParentDepth"
    SECTION = "Section"
    SITE_ACCESS = "SiteAccess"
    STATE = "State"
    SUBTREE = "Subtree"
    USER_GROUP = "Group"
    PARENT_USER_GROUP = "ParentGroup"


class Limitation(BaseModel):
    """Base limitation: an identifier and the values it allows."""

    identifier: str
    limitation_values: list[str] = []


class RoleLimitation(Limitation):
    """Limitation that may scope a whole role assignment."""


class ContentTypeLimitation(Limitation):
    identifier: Literal[LimitationIdentifier.CONTENT_TYPE] = LimitationIdentifier.CONTENT_TYPE


class LanguageLimitation(Limitation):
    identifier: Literal[LimitationIdentifier.LANGUAGE] = LimitationIdentifier.LANGUAGE


class LocationLimitation(Limitation):
    identifier: Literal[LimitationIdentifier.LOCATION] = LimitationIdentifier.LOCATION


class OwnerLimitation(Limitation):
    identifier: Literal[LimitationIdentifier.OWNER] = LimitationIdentifier.OWNER


class ParentOwnerLimitation(Limitation):
    identifier: Literal[LimitationIdentifier.PARENT_OWNER] = LimitationIdentifier.PARENT_OWNER


class ParentContentTypeLimitation(Limitation):
    identifier: Literal[LimitationIdentifier.PARENT_CONTENT_TYPE] = (
        LimitationIdentifier.PARENT_CONTENT_TYPE
    )


class ParentDepthLimitation(Limitation):
    identifier: Literal[LimitationIdentifier.PARENT_DEPTH] = LimitationIdentifier.PARENT_DEPTH


class SectionLimitation(RoleLimitation):
    identifier: Literal[LimitationIdentifier.SECTION] = LimitationIdentifier.SECTION


class SiteAccessLimitation(Limitation):
    identifier: Literal[LimitationIdentifier.SITE_ACCESS] = LimitationIdentifier.SITE_ACCESS


class StateLimitation(Limitation):
    identifier: Literal[LimitationIdentifier.STATE] = LimitationIdentifier.STATE


class SubtreeLimitation(RoleLimitation):
    identifier: Literal[LimitationIdentifier.SUBTREE] = LimitationIdentifier.SUBTREE


class UserGroupLimitation(Limitation):
    identifier: Literal[LimitationIdentifier.USER_GROUP] = LimitationIdentifier.USER_GROUP


class ParentUserGroupLimitation(Limitation):
    identifier: Literal[LimitationIdentifier.PARENT_USER_GROUP] = (
        LimitationIdentifier.PARENT_USER_GROUP
    )


class CustomLimitation(Limitation):
    """Limitation of a kind this installation does not know about."""

    identifier: str


LIMITATION_TYPES: dict[LimitationIdentifier, type[Limitation]] = {
    LimitationIdentifier.CONTENT_TYPE: ContentTypeLimitation,
    LimitationIdentifier.LANGUAGE: LanguageLimitation,
    LimitationIdentifier.LOCATION: LocationLimitation,
    LimitationIdentifier.OWNER: OwnerLimitation,
    LimitationIdentifier.PARENT_OWNER: ParentOwnerLimitation,
    LimitationIdentifier.PARENT_CONTENT_TYPE: ParentContentTypeLimitation,
    LimitationIdentifier.PARENT_DEPTH: ParentDepthLimitation,
    LimitationIdentifier.SECTION: SectionLimitation,
    LimitationIdentifier.SITE_ACCESS: SiteAccessLimitation,
    LimitationIdentifier.STATE: StateLimitation,
    LimitationIdentifier.SUBTREE: SubtreeLimitation,
    LimitationIdentifier.USER_GROUP: UserGroupLimitation,
    LimitationIdentifier.PARENT_USER_GROUP: ParentUserGroupLimitation,
}

# Only these kinds may scope a role assignment
ROLE_LIMITATION_IDENTIFIERS: frozenset[str] = frozenset(
    {LimitationIdentifier.SUBTREE, LimitationIdentifier.SECTION}
)


def get_limitation_from_identifier(identifier: str) -> Limitation:
    """Return an empty limitation of the kind named by ``identifier``.

    Args:
        identifier: Stored limitation identifier

    Returns:
        Limitation instance with no values; ``CustomLimitation`` for unknown
        identifiers
    """
    try:
        kind = LimitationIdentifier(identifier)
    except ValueError:
        return CustomLimitation(identifier=identifier)
    return LIMITATION_TYPES[kind]()


def is_role_limitation_identifier(identifier: str) -> bool:
    """Check whether a limitation kind may scope a role assignment."""
    return identifier in ROLE_LIMITATION_IDENTIFIERS
