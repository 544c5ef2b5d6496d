"""Liveness probing of mongod nodes."""

import enum
import logging

from replsetctl.address import NodeAddress
from replsetctl.connection import NodeConnection
from replsetctl.exceptions import ReplSetError
from replsetctl.retry import PollResult, poll_until

logger = logging.getLogger(__name__)


class Direction(enum.Enum):
    UP = "up"
    DOWN = "down"


async def is_reachable(target: NodeAddress, timeout: float = 5.0) -> bool:
    """Check once whether the node answers a ping."""
    conn = NodeConnection([str(target)], timeout=timeout)
    try:
        await conn.connect()
    except ReplSetError as e:
        logger.debug("%s is not answering: %s", target, e)
        return False
    finally:
        await conn.close()
    return True


async def wait_for_node(
    direction: Direction,
    target: NodeAddress,
    *,
    max_attempts: int = 60,
    interval: float = 1.0,
    timeout: float = 5.0,
) -> PollResult:
    """Wait until the node at ``target`` is up or down.

    A node whose process has not started yet counts as down.
    """

    async def matches() -> bool:
        logger.info("%s Waiting for MongoDB daemon %s", target, direction.value)
        return await is_reachable(target, timeout) == (direction is Direction.UP)

    result = await poll_until(
        matches,
        max_attempts=max_attempts,
        interval=interval,
        description=f"MongoDB daemon {direction.value} at {target}",
    )
    if result.satisfied:
        logger.info("MongoDB daemon is %s", direction.value)
    else:
        logger.error("Giving up: MongoDB daemon is not %s!", direction.value)
    return result
