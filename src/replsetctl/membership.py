"""Membership changes of this node in an existing replica set."""

import logging
from collections.abc import Callable
from typing import Any

import dns.asyncresolver

from replsetctl.address import NodeAddress
from replsetctl.commands import Outcome, ReplSetGetConfig, ReplSetReconfig
from replsetctl.config import Settings
from replsetctl.connection import NodeConnection
from replsetctl.discovery import discover_peers, replica_set_seed
from replsetctl.exceptions import CommandError, ConfigurationError, ReplSetError
from replsetctl.replset_config import add_member, remove_member

logger = logging.getLogger(__name__)


ConnectionFactory = Callable[..., NodeConnection]
Reconfigure = Callable[[dict[str, Any], str], dict[str, Any] | None]


class MembershipClient:
    """Adds or removes this node through whichever member is currently primary."""

    def __init__(
        self,
        settings: Settings,
        *,
        connection_factory: ConnectionFactory = NodeConnection,
        resolver: dns.asyncresolver.Resolver | None = None,
    ) -> None:
        self._settings = settings
        self._connection_factory = connection_factory
        self._resolver = resolver

    async def join(self, self_addr: NodeAddress) -> Outcome:
        """Advertise this node to the other replica set members.

        Raises:
            ReplSetError: If the replica set was found but did not accept the node
        """
        return await self._mutate(self_addr, add_member, "Adding %s to replica set ...")

    async def leave(self, self_addr: NodeAddress) -> Outcome:
        """Remove this node from the replica set, on a best-effort basis."""
        try:
            return await self._mutate(self_addr, remove_member, "Removing %s from replica set ...")
        except ConfigurationError:
            raise
        except ReplSetError as e:
            logger.warning("Could not remove %s from replica set: %s", self_addr, e)
            return Outcome.IGNORED

    async def _mutate(
        self,
        self_addr: NodeAddress,
        reconfigure: Reconfigure,
        message: str,
    ) -> Outcome:
        peers = await discover_peers(
            self._settings.service_name,
            port=self._settings.port,
            resolver=self._resolver,
        )
        if not peers:
            logger.warning(
                "Cannot get address of replica set: no nodes are listed in service %s",
                self._settings.service_name,
            )
            return Outcome.IGNORED

        if not self._settings.admin_password:
            raise ConfigurationError(
                "MONGODB_ADMIN_PASSWORD is not set. Cannot change replica set membership."
            )

        seed = replica_set_seed(self._settings.replica_name, peers)
        logger.debug("Replica set address: %s", seed)
        logger.info(message, self_addr)

        conn = self._connection_factory(
            [str(peer) for peer in peers],
            replica_set=self._settings.replica_name,
            username="admin",
            password=self._settings.admin_password,
            timeout=self._settings.connect_timeout,
        )
        async with conn:
            reply = await conn.execute(ReplSetGetConfig())
            config = reply.get("config")
            if not isinstance(config, dict):
                raise CommandError(0, "replSetGetConfig reply has no replica set config")
            updated = reconfigure(config, str(self_addr))
            if updated is None:
                logger.info("Replica set membership of %s already up to date", self_addr)
                return Outcome.UNCHANGED
            await conn.execute(ReplSetReconfig(updated))

        return Outcome.APPLIED
