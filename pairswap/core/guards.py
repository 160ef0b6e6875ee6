"""Entry guards shared by every mutating pool operation."""

from __future__ import annotations

import logging

from ..errors import DeadlineExpired, ReentrantCall

logger = logging.getLogger(__name__)


class ReentrancyGuard:
    """
    Mutual-exclusion flag held for the full duration of a mutating call.

    Used as a context manager; entering while already held raises ReentrantCall.
    """

    def __init__(self) -> None:
        self._locked = False

    @property
    def locked(self) -> bool:
        return self._locked

    def __enter__(self) -> "ReentrancyGuard":
        if self._locked:
            logger.warning("Rejected re-entrant pool call", extra={"event": "pool.reentrancy"})
            raise ReentrantCall("pool is busy")
        self._locked = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._locked = False


def check_deadline(deadline: int, now: int) -> None:
    if not isinstance(deadline, int) or isinstance(deadline, bool):
        raise TypeError("deadline must be an int")
    if deadline < now:
        raise DeadlineExpired(f"deadline {deadline} is before current time {now}")
