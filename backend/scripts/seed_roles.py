#!/usr/bin/env python
"""Install the default roles and optionally an administrator user."""

import asyncio
import logging

from cms_authz.config import get_settings
from cms_authz.database import get_db, init_db
from cms_authz.dependencies import get_role_service, get_user_service
from cms_authz.exceptions import RoleNotFoundError
from cms_authz.models.domain.limitation import SectionLimitation
from cms_authz.models.dto.role import PolicyCreateRequest, RoleCreateRequest
from cms_authz.utils.secure_logging import configure_logging

logger = logging.getLogger("seed_roles")

DEFAULT_ROLES = [
    RoleCreateRequest(
        identifier="Administrator",
        names={"eng-GB": "Administrator"},
        policies=[PolicyCreateRequest(module="*", function="*")],
    ),
    RoleCreateRequest(
        identifier="Anonymous",
        names={"eng-GB": "Anonymous"},
        policies=[
            PolicyCreateRequest(
                module="content",
                function="read",
                limitations=[SectionLimitation(limitation_values=["1"])],
            ),
            PolicyCreateRequest(module="user", function="login"),
        ],
    ),
]


async def seed_roles(admin_login: str | None = None, create_tables: bool = False) -> bool:
    """Create missing default roles and an administrator user.

    Args:
        admin_login: Login of an administrator user to create
        create_tables: Create tables first instead of relying on migrations

    Returns:
        True when the seed committed
    """
    if create_tables:
        await init_db()

    # get_db commits once the body finishes
    async for session in get_db():
        role_service = get_role_service(session)
        user_service = get_user_service(session)

        roles = {}
        for request in DEFAULT_ROLES:
            try:
                roles[request.identifier] = await role_service.load_role_by_identifier(
                    request.identifier
                )
                logger.info(f"Role {request.identifier} already exists")
            except RoleNotFoundError:
                roles[request.identifier] = await role_service.create_role(request)

        if admin_login:
            group = await user_service.create_user_group("Administrator users")
            await user_service.create_user(login=admin_login, group=group)
            await role_service.assign_role_to_user_group(roles["Administrator"], group)

    logger.info(f"Default roles installed in {get_settings().environment}")
    return True


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Install default roles")
    parser.add_argument("--admin-login", help="Create an administrator user with this login")
    parser.add_argument(
        "--create-tables", action="store_true", help="Create tables before seeding"
    )
    args = parser.parse_args()

    configure_logging()
    asyncio.run(seed_roles(args.admin_login, args.create_tables))
