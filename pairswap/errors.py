"""Exception types for the pairswap pool engine.

Every failure is a synchronous rejection of the current operation. The pool
raises before its single commit step, so a raised error never leaves a partial
reserve or oracle write behind.
"""

from __future__ import annotations


class PoolError(ValueError):
    """Base class for all pool rejections."""


class DeadlineExpired(PoolError):
    """Raised when an operation is evaluated after its deadline."""


class InvalidParameters(PoolError):
    """Raised for zero, negative or otherwise malformed inputs."""


class InvalidToken(PoolError):
    """Raised when an asset is not one of the pool's two assets."""


class InsufficientLiquidity(PoolError):
    """Raised when a slippage bound is violated or share math degenerates."""


class InsufficientOutputAmount(PoolError):
    """Raised when a swap output is zero or below the caller's minimum."""


class ReserveOverflow(PoolError):
    """Raised when a balance does not fit the 112-bit reserve width."""


class FeeTooHigh(PoolError):
    """Raised when a swap fee exceeds MAX_SWAP_FEE_BPS."""


class ZeroAddress(PoolError):
    """Raised when a required address is null."""


class InvalidWindow(PoolError):
    """Raised when a TWAP window does not strictly advance in time."""


class ReentrantCall(PoolError):
    """Raised when a mutating entry point is re-entered while the pool is busy."""


class Paused(PoolError):
    """Raised when the administrative gate reports the pool as paused."""


class Unauthorized(PoolError):
    """Raised when a caller is not allowed to perform an administrative action."""


class InvariantViolation(PoolError):
    """Raised when post-trade balances would shrink the constant product."""

    def __init__(self, k_before: int, k_after: int) -> None:
        self.k_before = k_before
        self.k_after = k_after
        super().__init__(f"invariant violation: k_after ({k_after}) < k_before ({k_before})")
