"""SQL persistence handler tests."""

import pytest

from cms_authz.exceptions import PersistenceNotFoundError, RoleAlreadyExistsError
from cms_authz.models.dto.role import RoleCreateRequest
from cms_authz.models.persistence.role import PersistedPolicy, PersistedRole, PersistedRoleUpdate


def _role(identifier: str = "editor", **kwargs) -> PersistedRole:
    return PersistedRole(identifier=identifier, name={"eng-GB": identifier.title()}, **kwargs)


class TestRoles:
    """Role storage."""

    @pytest.mark.asyncio
    async def test_create_assigns_ids(self, handler):
        created = await handler.create_role(
            _role(
                policies=[
                    PersistedPolicy(module="content", function="read", limitations={"Section": ["1"]}),
                    PersistedPolicy(module="*", function="*", limitations="*"),
                ]
            )
        )

        assert created.id is not None
        assert all(policy.id is not None for policy in created.policies)
        assert all(policy.role_id == created.id for policy in created.policies)
        assert created.policies[0].limitations == {"Section": ["1"]}
        assert created.policies[1].limitations == "*"

    @pytest.mark.asyncio
    async def test_unique_identifier_enforced(self, handler):
        await handler.create_role(_role())

        with pytest.raises(RoleAlreadyExistsError):
            await handler.create_role(_role())

    @pytest.mark.asyncio
    async def test_duplicate_create_keeps_earlier_work(self, handler, role_service, user_service):
        reader = await role_service.create_role(RoleCreateRequest(identifier="reader"))
        user = await user_service.create_user("jane")
        await role_service.assign_role_to_user(reader, user)
        await handler.create_role(_role())

        with pytest.raises(RoleAlreadyExistsError):
            await handler.create_role(_role())

        loaded = await role_service.load_role(reader.id)
        assert loaded.identifier == "reader"
        assert len(await role_service.get_role_assignments_for_user(user)) == 1
        # session stays usable after the conflict
        author = await handler.create_role(_role("author"))
        assert [role.identifier for role in await handler.load_roles()] == [
            "reader",
            "editor",
            "author",
        ]
        assert author.id is not None

    @pytest.mark.asyncio
    async def test_duplicate_create_survives_commit(self, handler, session):
        await handler.create_role(_role("reader"))
        await handler.create_role(_role())

        with pytest.raises(RoleAlreadyExistsError):
            await handler.create_role(_role())
        await session.commit()

        assert [role.identifier for role in await handler.load_roles()] == ["reader", "editor"]

    @pytest.mark.asyncio
    async def test_update_collision_keeps_earlier_work(self, handler):
        reader = await handler.create_role(_role("reader"))
        author = await handler.create_role(_role("author"))

        with pytest.raises(RoleAlreadyExistsError):
            await handler.update_role(
                PersistedRoleUpdate(id=author.id, identifier="reader", name={"eng-GB": "Author"})
            )

        assert (await handler.load_role(reader.id)).identifier == "reader"
        assert (await handler.load_role(author.id)).identifier == "author"

    @pytest.mark.asyncio
    async def test_update_replaces_scalar_fields(self, handler):
        created = await handler.create_role(_role())

        await handler.update_role(
            PersistedRoleUpdate(
                id=created.id,
                identifier="author",
                main_language_code="ger-DE",
                name={"ger-DE": "Autor"},
            )
        )

        loaded = await handler.load_role(created.id)
        assert loaded.identifier == "author"
        assert loaded.main_language_code == "ger-DE"
        assert loaded.name == {"ger-DE": "Autor"}
        assert loaded.description == {}

    @pytest.mark.asyncio
    async def test_update_missing_role(self, handler):
        with pytest.raises(PersistenceNotFoundError):
            await handler.update_role(PersistedRoleUpdate(id=9999, identifier="ghost"))

    @pytest.mark.asyncio
    async def test_load_missing(self, handler):
        with pytest.raises(PersistenceNotFoundError):
            await handler.load_role(9999)

        with pytest.raises(PersistenceNotFoundError):
            await handler.load_role_by_identifier("ghost")

    @pytest.mark.asyncio
    async def test_delete_removes_policies_and_assignments(self, handler, user_service):
        created = await handler.create_role(
            _role(policies=[PersistedPolicy(module="content", function="read", limitations={"Section": ["1"]})])
        )
        user = await user_service.create_user("jane")
        await handler.assign_role(user.id, created.id)

        await handler.delete_role(created.id)

        assert await handler.load_roles() == []
        assert await handler.load_roles_by_group_id(user.id) == []
        with pytest.raises(PersistenceNotFoundError):
            await handler.delete_role(created.id)


class TestPolicies:
    """Policy storage."""

    @pytest.mark.asyncio
    async def test_add_policy_returns_stored_policy(self, handler):
        role = await handler.create_role(_role())

        policy = await handler.add_policy(
            role.id, PersistedPolicy(module="content", function="edit", limitations={})
        )

        assert policy.id is not None
        assert policy.role_id == role.id
        assert (await handler.load_role(role.id)).policies == [policy]

    @pytest.mark.asyncio
    async def test_add_policy_to_missing_role(self, handler):
        with pytest.raises(PersistenceNotFoundError):
            await handler.add_policy(9999, PersistedPolicy(module="content", function="edit"))

    @pytest.mark.asyncio
    async def test_update_policy_to_and_from_wildcard(self, handler):
        role = await handler.create_role(
            _role(policies=[PersistedPolicy(module="content", function="read", limitations={"Section": ["1"]})])
        )
        policy = role.policies[0]

        await handler.update_policy(policy.model_copy(update={"limitations": "*"}))
        assert (await handler.load_role(role.id)).policies[0].limitations == "*"

        await handler.update_policy(policy.model_copy(update={"limitations": {"Owner": ["1"]}}))
        assert (await handler.load_role(role.id)).policies[0].limitations == {"Owner": ["1"]}

    @pytest.mark.asyncio
    async def test_remove_policy_only_from_owning_role(self, handler):
        editor = await handler.create_role(
            _role(policies=[PersistedPolicy(module="content", function="read")])
        )
        reader = await handler.create_role(_role("reader"))
        policy_id = editor.policies[0].id

        with pytest.raises(PersistenceNotFoundError):
            await handler.remove_policy(reader.id, policy_id)

        await handler.remove_policy(editor.id, policy_id)
        assert (await handler.load_role(editor.id)).policies == []


class TestAssignments:
    """Assignment storage and effective policies."""

    @pytest.mark.asyncio
    async def test_assignment_limitation_stored(self, handler, user_service):
        role = await handler.create_role(_role())
        group = await user_service.create_user_group("Editors")

        await handler.assign_role(group.id, role.id, {"Subtree": ["/1/2/"]})

        loaded = await handler.load_role(role.id)
        assert loaded.group_ids == [group.id]
        assert loaded.assignments[0].limitation == {"Subtree": ["/1/2/"]}

    @pytest.mark.asyncio
    async def test_assign_missing_role(self, handler):
        with pytest.raises(PersistenceNotFoundError):
            await handler.assign_role(1, 9999)

    @pytest.mark.asyncio
    async def test_unassign_missing_assignment(self, handler):
        role = await handler.create_role(_role())

        with pytest.raises(PersistenceNotFoundError):
            await handler.unassign_role(1, role.id)

    @pytest.mark.asyncio
    async def test_users_and_groups_share_id_space(self, user_service):
        group = await user_service.create_user_group("Editors")
        user = await user_service.create_user("jane")

        assert user.id != group.id

    @pytest.mark.asyncio
    async def test_policies_by_user_id_follow_group_parents(self, handler, user_service):
        root_role = await handler.create_role(
            _role("member", policies=[PersistedPolicy(module="user", function="login")])
        )
        members = await user_service.create_user_group("Members")
        editors = await user_service.create_user_group("Editors", parent=members)
        user = await user_service.create_user("jane", group=editors)
        await handler.assign_role(members.id, root_role.id)

        policies = await handler.load_policies_by_user_id(user.id)

        assert [(policy.module, policy.function) for policy in policies] == [("user", "login")]

    @pytest.mark.asyncio
    async def test_policies_by_missing_user(self, handler):
        with pytest.raises(PersistenceNotFoundError):
            await handler.load_policies_by_user_id(9999)
