"""
Reserve and oracle state of a pool.

Both records are frozen; the pool replaces them together, as one `PairState`,
in its commit step.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors import InvalidParameters
from ..kernels.fixed_point import UINT32_MODULUS, UINT256_MODULUS, require_int, require_uint112


@dataclass(frozen=True)
class ReserveState:
    """
    Recorded reserves used for pricing.

    Attributes:
        reserve0: Reserve of asset0 (uint112)
        reserve1: Reserve of asset1 (uint112)
        last_update_time: 32-bit timestamp of the last commit
    """

    reserve0: int = 0
    reserve1: int = 0
    last_update_time: int = 0

    def __post_init__(self) -> None:
        require_uint112("reserve0", self.reserve0)
        require_uint112("reserve1", self.reserve1)
        require_int("last_update_time", self.last_update_time)
        if not (0 <= self.last_update_time < UINT32_MODULUS):
            raise InvalidParameters(f"last_update_time must be a uint32: {self.last_update_time}")

    def is_empty(self) -> bool:
        return self.reserve0 == 0 and self.reserve1 == 0

    def constant_product(self) -> int:
        return self.reserve0 * self.reserve1


@dataclass(frozen=True)
class OracleAccumulator:
    """UQ112x112 time-integrals of price, modulo 2**256."""

    cumulative_price0: int = 0
    cumulative_price1: int = 0

    def __post_init__(self) -> None:
        for name, v in (("cumulative_price0", self.cumulative_price0), ("cumulative_price1", self.cumulative_price1)):
            require_int(name, v)
            if not (0 <= v < UINT256_MODULUS):
                raise InvalidParameters(f"{name} must be a uint256: {v}")


@dataclass(frozen=True)
class PairState:
    reserves: ReserveState = field(default_factory=ReserveState)
    oracle: OracleAccumulator = field(default_factory=OracleAccumulator)