"""User and password provisioning."""

import logging

from replsetctl.commands import (
    ADMIN_DATABASE,
    ADMIN_ROLES,
    CreateUser,
    Outcome,
    UpdateUserPassword,
)
from replsetctl.connection import NodeConnection
from replsetctl.exceptions import CommandError, ConfigurationError

logger = logging.getLogger(__name__)

ADMIN_USER = "admin"


def require_admin_password(password: str | None) -> str:
    """Return ``password``, or fail when the administrator password is not configured."""
    if not password:
        raise ConfigurationError(
            "MONGODB_ADMIN_PASSWORD is not set. Authentication can not be set up."
        )
    return password


def require_user_fields(
    username: str | None,
    password: str | None,
    database: str | None,
) -> tuple[str, str, str]:
    """Return the application user fields, or fail on the first missing one."""
    if not username:
        raise ConfigurationError("MONGODB_USER is not set. Failed to create MongoDB user")
    if not password:
        raise ConfigurationError(
            f"MONGODB_PASSWORD is not set. Failed to create MongoDB user: {username}"
        )
    if not database:
        raise ConfigurationError(
            f"MONGODB_DATABASE is not set. Failed to create MongoDB user: {username}"
        )
    return username, password, database


class CredentialProvisioner:
    """Creates users and resets their passwords on a node."""

    def __init__(self, conn: NodeConnection) -> None:
        self._conn = conn

    async def create_admin(self, password: str | None) -> None:
        """Create the administrator user.

        Raises:
            ConfigurationError: If no password is given
            CommandError: If the user could not be created
        """
        password = require_admin_password(password)

        logger.info("Creating MongoDB admin user")
        await self._conn.execute(CreateUser(ADMIN_USER, password, ADMIN_ROLES, ADMIN_DATABASE))

    async def create_user(
        self,
        username: str | None,
        password: str | None,
        database: str | None,
    ) -> None:
        """Create an application user with read-write access to ``database``.

        Raises:
            ConfigurationError: If any field is missing
            CommandError: If the user could not be created
        """
        username, password, database = require_user_fields(username, password, database)

        logger.info("Creating MongoDB user %s in database %s", username, database)
        await self._conn.execute(CreateUser(username, password, ("readWrite",), database))

    async def reset_admin_password(self, password: str | None) -> Outcome:
        if not password:
            return Outcome.UNCHANGED
        return await self._reset(UpdateUserPassword(ADMIN_USER, password, ADMIN_DATABASE))

    async def reset_user_password(
        self,
        username: str | None,
        password: str | None,
        database: str | None,
    ) -> Outcome:
        if not (username and password and database):
            return Outcome.UNCHANGED
        return await self._reset(UpdateUserPassword(username, password, database))

    async def _reset(self, request: UpdateUserPassword) -> Outcome:
        try:
            await self._conn.execute(request)
        except CommandError as e:
            logger.warning("Failed to reset password of MongoDB user %s: %s", request.username, e)
            return Outcome.IGNORED
        logger.info("Password of MongoDB user %s reset", request.username)
        return Outcome.APPLIED
