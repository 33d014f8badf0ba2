"""Limitation registry tests."""

import pytest

from cms_authz.models.domain.limitation import (
    LIMITATION_TYPES,
    ContentTypeLimitation,
    CustomLimitation,
    LimitationIdentifier,
    LocationLimitation,
    OwnerLimitation,
    ParentUserGroupLimitation,
    RoleLimitation,
    SectionLimitation,
    SubtreeLimitation,
    UserGroupLimitation,
    get_limitation_from_identifier,
    is_role_limitation_identifier,
)


class TestGetLimitationFromIdentifier:
    """Identifier to limitation variant mapping."""

    @pytest.mark.parametrize(
        ("identifier", "expected_type"),
        [
            ("Class", ContentTypeLimitation),
            ("Node", LocationLimitation),
            ("Owner", OwnerLimitation),
            ("Section", SectionLimitation),
            ("Subtree", SubtreeLimitation),
            ("Group", UserGroupLimitation),
            ("ParentGroup", ParentUserGroupLimitation),
        ],
    )
    def test_known_identifiers(self, identifier, expected_type):
        limitation = get_limitation_from_identifier(identifier)

        assert type(limitation) is expected_type
        assert limitation.identifier == identifier
        assert limitation.limitation_values == []

    def test_every_known_kind_round_trips_its_identifier(self):
        for kind, limitation_type in LIMITATION_TYPES.items():
            limitation = get_limitation_from_identifier(kind.value)
            assert isinstance(limitation, limitation_type)
            assert limitation.identifier == kind

    def test_registry_covers_all_kinds(self):
        assert set(LIMITATION_TYPES) == set(LimitationIdentifier)

    def test_unknown_identifier_becomes_custom(self):
        limitation = get_limitation_from_identifier("NewState")

        assert isinstance(limitation, CustomLimitation)
        assert limitation.identifier == "NewState"

    def test_identifiers_are_case_sensitive(self):
        limitation = get_limitation_from_identifier("subtree")

        assert isinstance(limitation, CustomLimitation)

    def test_returns_fresh_instances(self):
        first = get_limitation_from_identifier("Subtree")
        first.limitation_values.append("/1/2/")

        assert get_limitation_from_identifier("Subtree").limitation_values == []


class TestRoleLimitationKinds:
    """Only subtree and section limitations may scope a role assignment."""

    def test_subtree_and_section_allowed(self):
        assert is_role_limitation_identifier(LimitationIdentifier.SUBTREE)
        assert is_role_limitation_identifier("Section")

    @pytest.mark.parametrize("identifier", ["Owner", "Class", "Node", "Custom"])
    def test_other_kinds_rejected(self, identifier):
        assert not is_role_limitation_identifier(identifier)

    def test_role_limitation_variants(self):
        assert isinstance(SubtreeLimitation(), RoleLimitation)
        assert isinstance(SectionLimitation(), RoleLimitation)
        assert not isinstance(OwnerLimitation(), RoleLimitation)
