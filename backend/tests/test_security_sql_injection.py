"""SQL injection prevention tests.

Role identifiers, names and limitation values are free text chosen by
administrators. They must reach the database as bound parameters and come
back unchanged.

Security Model:
1. PRIMARY: SQLAlchemy ORM parameterizes ALL queries (no raw SQL)
2. SECONDARY: Limitation values are stored as JSON, never as SQL fragments
"""

import os

import pytest
from sqlalchemy import select

from cms_authz.exceptions import RoleNotFoundError
from cms_authz.models.domain.limitation import CustomLimitation, SubtreeLimitation
from cms_authz.models.dto.role import PolicyCreateRequest, RoleCreateRequest
from cms_authz.models.orm.role import RoleORM

# SQL injection payloads to test
SQL_INJECTION_PAYLOADS = [
    # Classic SQL injection
    "'; DROP TABLE roles; --",
    "1' OR '1'='1",
    "1; DELETE FROM policies WHERE '1'='1",
    "' UNION SELECT * FROM users --",
    # Boolean-based blind injection
    "1' AND (SELECT COUNT(*) FROM users) > 0 --",
    # Stacked queries
    "1'; INSERT INTO role_assignments (role_id, subject_id) VALUES (1, 1); --",
    "1'; UPDATE roles SET identifier = 'Administrator'; --",
    # Comment variations
    "1'/**/OR/**/1=1--",
    "1'--",
    # PostgreSQL specific
    "$$; DROP TABLE users; $$",
    # Unicode bypass attempts
    "ʼ OR 1=1 --",
]


class TestRoleIdentifierInjection:
    """Payloads used as role identifiers are stored literally."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", SQL_INJECTION_PAYLOADS)
    async def test_identifier_round_trip(self, role_service, payload: str) -> None:
        await role_service.create_role(RoleCreateRequest(identifier="editor"))

        created = await role_service.create_role(
            RoleCreateRequest(identifier=payload, names={"eng-GB": payload})
        )
        loaded = await role_service.load_role_by_identifier(payload)

        assert loaded.id == created.id
        assert loaded.get_name("eng-GB") == payload
        # other rows untouched
        assert sorted(role.identifier for role in await role_service.load_roles()) == sorted(
            ["editor", payload]
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", SQL_INJECTION_PAYLOADS)
    async def test_lookup_does_not_match_everything(self, role_service, payload: str) -> None:
        await role_service.create_role(RoleCreateRequest(identifier="editor"))

        with pytest.raises(RoleNotFoundError):
            await role_service.load_role_by_identifier(payload)


class TestLimitationValueInjection:
    """Payloads used as limitation values are stored literally."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", SQL_INJECTION_PAYLOADS)
    async def test_policy_limitation_values(self, role_service, payload: str) -> None:
        role = await role_service.create_role(
            RoleCreateRequest(
                identifier="editor",
                policies=[
                    PolicyCreateRequest(
                        module="content",
                        function="read",
                        limitations=[CustomLimitation(identifier=payload, limitation_values=[payload])],
                    )
                ],
            )
        )

        limitation = (await role_service.load_role(role.id)).get_policies()[0].limitations[0]
        assert limitation.identifier == payload
        assert limitation.limitation_values == [payload]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", SQL_INJECTION_PAYLOADS)
    async def test_assignment_limitation_values(
        self, role_service, user_service, editor_request, payload: str
    ) -> None:
        role = await role_service.create_role(editor_request)
        user = await user_service.create_user("jane")

        await role_service.assign_role_to_user(
            role, user, SubtreeLimitation(limitation_values=[payload])
        )

        assignments = await role_service.get_role_assignments_for_user(user)
        assert assignments[0].limitation.limitation_values == [payload]


class TestNoRawSQL:
    """Verify no raw SQL usage in codebase."""

    def test_no_text_in_data_access(self) -> None:
        """Ensure repositories and handlers don't use sqlalchemy.text() for raw SQL."""
        src_dir = os.path.join(os.path.dirname(__file__), "..", "src", "cms_authz")

        for package in ("repositories", "persistence"):
            package_dir = os.path.join(src_dir, package)
            if not os.path.exists(package_dir):
                pytest.skip(f"{package} directory not found")

            for filename in os.listdir(package_dir):
                if not filename.endswith(".py"):
                    continue

                with open(os.path.join(package_dir, filename), "r") as f:
                    content = f.read()

                for i, line in enumerate(content.split("\n"), 1):
                    if ".execute(text(" in line or "= text(" in line:
                        pytest.fail(f"Potential raw SQL in {package}/{filename}:{i}: {line.strip()}")


class TestSQLAlchemyProtection:
    """SQLAlchemy binds identifier lookups as parameters."""

    def test_identifier_lookup_is_parameterized(self) -> None:
        malicious_input = "'; DROP TABLE roles; --"
        query = select(RoleORM).where(RoleORM.identifier == malicious_input)

        sql_str = str(query.compile())

        assert malicious_input not in sql_str
        assert ":identifier_1" in sql_str
