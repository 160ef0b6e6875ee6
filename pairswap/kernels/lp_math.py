"""
Liquidity share math.

A small set of pure functions with explicit floor rounding:
- optimal pairing of a two-sided deposit against the live reserve ratio,
- share issuance (geometric mean for the first deposit, proportional afterwards),
- proportional redemption.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..errors import InsufficientLiquidity, InvalidParameters
from .fixed_point import require_int


MINIMUM_LIQUIDITY = 1_000


@dataclass(frozen=True)
class OptimalLiquidityResult:
    amount0_used: int
    amount1_used: int
    amount0_refund: int
    amount1_refund: int


@dataclass(frozen=True)
class BurnLiquidityResult:
    amount0_out: int
    amount1_out: int


def optimal_liquidity(
    *,
    reserve0: int,
    reserve1: int,
    amount0_desired: int,
    amount1_desired: int,
    amount0_min: int = 0,
    amount1_min: int = 0,
) -> OptimalLiquidityResult:
    """
    Compute ratio-preserving used amounts and refunds.

    For an empty pool (both reserves zero) the desired amounts are used as-is:
    the first depositor sets the price.
    """
    for name, v in (
        ("reserve0", reserve0),
        ("reserve1", reserve1),
        ("amount0_desired", amount0_desired),
        ("amount1_desired", amount1_desired),
        ("amount0_min", amount0_min),
        ("amount1_min", amount1_min),
    ):
        require_int(name, v)

    if reserve0 < 0 or reserve1 < 0:
        raise InvalidParameters("reserves must be non-negative")
    if amount0_desired <= 0 or amount1_desired <= 0:
        raise InvalidParameters(f"desired amounts must be positive: ({amount0_desired}, {amount1_desired})")
    if amount0_min < 0 or amount1_min < 0:
        raise InvalidParameters(f"minimum amounts must be non-negative: ({amount0_min}, {amount1_min})")

    if reserve0 == 0 and reserve1 == 0:
        return OptimalLiquidityResult(
            amount0_used=amount0_desired,
            amount1_used=amount1_desired,
            amount0_refund=0,
            amount1_refund=0,
        )
    if reserve0 == 0 or reserve1 == 0:
        raise InsufficientLiquidity("cannot pair against a one-sided reserve")

    amount1_optimal = (amount0_desired * reserve1) // reserve0
    if amount1_optimal <= amount1_desired:
        if amount1_optimal < amount1_min:
            raise InsufficientLiquidity(f"amount1_optimal ({amount1_optimal}) < amount1_min ({amount1_min})")
        amount0_used, amount1_used = amount0_desired, amount1_optimal
    else:
        amount0_optimal = (amount1_desired * reserve0) // reserve1
        if amount0_optimal > amount0_desired:
            raise InsufficientLiquidity(
                f"amount0_optimal ({amount0_optimal}) > amount0_desired ({amount0_desired})"
            )
        if amount0_optimal < amount0_min:
            raise InsufficientLiquidity(f"amount0_optimal ({amount0_optimal}) < amount0_min ({amount0_min})")
        amount0_used, amount1_used = amount0_optimal, amount1_desired

    if amount0_used <= 0 or amount1_used <= 0:
        raise InsufficientLiquidity("deposit too small for the current reserve ratio")

    return OptimalLiquidityResult(
        amount0_used=amount0_used,
        amount1_used=amount1_used,
        amount0_refund=amount0_desired - amount0_used,
        amount1_refund=amount1_desired - amount1_used,
    )


def mint_liquidity_initial(*, amount0: int, amount1: int, minimum_liquidity: int = MINIMUM_LIQUIDITY) -> tuple[int, int]:
    """
    Initial share issuance.

    Returns (shares_to_depositor, shares_locked). Uses the exact integer sqrt so
    large deposits do not lose precision.
    """
    require_int("amount0", amount0)
    require_int("amount1", amount1)
    require_int("minimum_liquidity", minimum_liquidity)
    if amount0 < 0 or amount1 < 0:
        raise InvalidParameters("initial amounts must be non-negative")
    if minimum_liquidity <= 0:
        raise InvalidParameters("minimum_liquidity must be positive")

    sqrt_product = math.isqrt(amount0 * amount1)
    if sqrt_product <= minimum_liquidity:
        raise InsufficientLiquidity("insufficient initial liquidity: isqrt(amount0*amount1) <= MINIMUM_LIQUIDITY")
    return sqrt_product - minimum_liquidity, minimum_liquidity


def mint_liquidity(*, reserve0: int, reserve1: int, total_supply: int, amount0: int, amount1: int) -> int:
    """
    Shares for a deposit into a pool with outstanding supply.

    shares = min(floor(amount0 * supply / reserve0), floor(amount1 * supply / reserve1))
    """
    for name, v in (
        ("reserve0", reserve0),
        ("reserve1", reserve1),
        ("total_supply", total_supply),
        ("amount0", amount0),
        ("amount1", amount1),
    ):
        require_int(name, v)

    if total_supply <= 0:
        raise InvalidParameters("total_supply must be positive; use mint_liquidity_initial")
    if reserve0 <= 0 or reserve1 <= 0:
        raise InsufficientLiquidity("cannot mint into an empty pool when total_supply > 0")
    if amount0 < 0 or amount1 < 0:
        raise InvalidParameters("deposit amounts must be non-negative")

    shares = min((amount0 * total_supply) // reserve0, (amount1 * total_supply) // reserve1)
    if shares <= 0:
        raise InsufficientLiquidity("shares minted is zero (deposit too small)")
    return shares


def burn_liquidity(*, shares: int, reserve0: int, reserve1: int, total_supply: int) -> BurnLiquidityResult:
    """Redeem shares for a strictly proportional slice of reserves (floor rounding)."""
    for name, v in (
        ("shares", shares),
        ("reserve0", reserve0),
        ("reserve1", reserve1),
        ("total_supply", total_supply),
    ):
        require_int(name, v)

    if shares <= 0:
        raise InvalidParameters(f"shares must be positive: {shares}")
    if reserve0 < 0 or reserve1 < 0:
        raise InvalidParameters("reserves must be non-negative")
    if total_supply <= 0:
        raise InsufficientLiquidity("pool has no outstanding shares")
    if shares > total_supply:
        raise InsufficientLiquidity(f"cannot burn more than total_supply: {shares} > {total_supply}")

    return BurnLiquidityResult(
        amount0_out=(shares * reserve0) // total_supply,
        amount1_out=(shares * reserve1) // total_supply,
    )
