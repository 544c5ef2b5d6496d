"""Polling utilities with a bounded number of attempts."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from replsetctl.exceptions import ProbeTimeout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PollResult:
    """Outcome of a poll: whether the condition held and after how many attempts."""

    satisfied: bool
    attempts: int
    description: str = "condition"

    def raise_for_timeout(self) -> None:
        if not self.satisfied:
            raise ProbeTimeout(self.description, self.attempts)


async def poll_until(
    condition: Callable[[], Awaitable[bool]],
    *,
    max_attempts: int | None = 60,
    interval: float = 1.0,
    description: str = "condition",
) -> PollResult:
    """Poll an async condition at a fixed interval.

    Args:
        condition: Async callable returning True once the wait is over
        max_attempts: Maximum number of checks, None to wait forever
        interval: Delay between checks in seconds
        description: Human readable name of the condition, used in logs

    Returns:
        A PollResult; ``satisfied`` is False only when the attempts ran out
    """
    attempt = 0

    while max_attempts is None or attempt < max_attempts:
        attempt += 1
        if await condition():
            return PollResult(True, attempt, description)

        logger.debug("%s not met (attempt %d)", description, attempt)

        if max_attempts is not None and attempt >= max_attempts:
            break

        await asyncio.sleep(interval)

    return PollResult(False, attempt, description)
