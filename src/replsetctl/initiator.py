"""Initiation of a brand-new replica set."""

import logging

from replsetctl.commands import GroupStatus, ReplSetGetStatus, ReplSetInitiate
from replsetctl.connection import NodeConnection
from replsetctl.exceptions import ReplSetError
from replsetctl.replset_config import ReplicaSetConfig
from replsetctl.retry import poll_until

logger = logging.getLogger(__name__)


async def initiate(
    conn: NodeConnection,
    config: ReplicaSetConfig,
    *,
    interval: float = 1.0,
) -> GroupStatus:
    """Initiate a replica set on the local node and wait until it is usable.

    Must be called by exactly one node, once, when the replica set is first
    created. The wait has no attempt cap because electing a primary can take
    arbitrarily long.

    Args:
        conn: Connected, standalone local node
        config: Initial replica set configuration
        interval: Delay between status checks in seconds

    Returns:
        The first ready status observed

    Raises:
        CommandError: If the node rejects the initiation, e.g. because the
            replica set is already initiated
    """
    document = config.to_document()
    logger.info("Initiating MongoDB replica using: %s", document)
    await conn.execute(ReplSetInitiate(document))

    status: list[GroupStatus] = []

    async def is_ready() -> bool:
        try:
            reply = await conn.execute(ReplSetGetStatus())
        except ReplSetError as e:
            logger.debug("Replica set status unavailable: %s", e)
            return False
        current = GroupStatus.from_document(reply)
        logger.info(
            "Replica set state %s (startup in progress: %s)",
            current.state.value,
            current.startup_in_progress,
        )
        status[:] = [current]
        return current.ready

    await poll_until(
        is_ready,
        max_attempts=None,
        interval=interval,
        description="replica set ready",
    )
    return status[0]
