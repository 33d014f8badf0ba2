"""Policy repository."""

from sqlalchemy import delete, select

from cms_authz.models.orm.policy import PolicyLimitationORM, PolicyORM
from cms_authz.models.persistence.role import StoredLimitations
from cms_authz.repositories.base import BaseRepository


class PolicyRepository(BaseRepository[PolicyORM]):
    """Repository for policy operations."""

    model = PolicyORM

    async def create_policy(
        self,
        role_id: int,
        module: str,
        function: str,
        limitations: StoredLimitations | None,
    ) -> PolicyORM:
        """Create a policy and its limitation rows.

        Args:
            role_id: Owning role ID
            module: Policy module
            function: Policy function
            limitations: Limitation values by identifier, None for all

        Returns:
            Created PolicyORM
        """
        policy = await self.create(
            role_id=role_id,
            module=module,
            function=function,
            limitations_wildcard=limitations is None,
        )
        await self._add_limitations(policy.id, limitations)
        return policy

    async def replace_limitations(
        self,
        policy_id: int,
        limitations: StoredLimitations | None,
    ) -> bool:
        """Replace all limitations of a policy.

        Args:
            policy_id: Policy ID
            limitations: New limitation values by identifier, None for all

        Returns:
            True if the policy exists
        """
        policy = await self.update(policy_id, limitations_wildcard=limitations is None)
        if policy is None:
            return False

        await self.session.execute(
            delete(PolicyLimitationORM)
            .where(PolicyLimitationORM.policy_id == policy_id)
            .execution_options(synchronize_session=False)
        )
        await self._add_limitations(policy_id, limitations)
        return True

    async def delete_policy(self, role_id: int, policy_id: int) -> bool:
        """Delete one policy of a role.

        Args:
            role_id: Owning role ID
            policy_id: Policy ID

        Returns:
            True if a policy was deleted
        """
        owned_policy = select(PolicyORM.id).where(
            PolicyORM.id == policy_id, PolicyORM.role_id == role_id
        )
        await self.session.execute(
            delete(PolicyLimitationORM)
            .where(PolicyLimitationORM.policy_id.in_(owned_policy))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(
            delete(PolicyORM)
            .where(PolicyORM.id == policy_id)
            .where(PolicyORM.role_id == role_id)
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()
        return result.rowcount > 0

    async def _add_limitations(
        self,
        policy_id: int,
        limitations: StoredLimitations | None,
    ) -> None:
        for identifier, values in (limitations or {}).items():
            self.session.add(
                PolicyLimitationORM(
                    policy_id=policy_id,
                    identifier=identifier,
                    limitation_values=list(values),
                )
            )
        await self.session.flush()
