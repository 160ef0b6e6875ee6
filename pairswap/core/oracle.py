"""
Reserve commit and TWAP kernel.

This module is intentionally small and pure:
- `commit` is the only transition that produces a new `PairState`.
- `consult_twap` averages two accumulator samples.
- The pool (imperative shell) supplies balances and the clock reading.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import InvalidWindow
from ..kernels.fixed_point import (
    elapsed_uint32,
    price_uq112,
    require_int,
    require_uint112,
    to_uint32,
    wrapping_add_uint256,
    wrapping_sub_uint256,
)
from ..state.reserves import OracleAccumulator, PairState, ReserveState


@dataclass(frozen=True)
class OracleObservation:
    """Both accumulators as of `timestamp` (32-bit)."""

    cumulative_price0: int
    cumulative_price1: int
    timestamp: int


@dataclass(frozen=True)
class PriceSample:
    """One accumulator reading for a single price direction."""

    cumulative_price: int
    timestamp: int


def _accumulate(reserves: ReserveState, oracle: OracleAccumulator, elapsed: int) -> OracleAccumulator:
    if elapsed == 0 or reserves.reserve0 == 0 or reserves.reserve1 == 0:
        return oracle
    return OracleAccumulator(
        cumulative_price0=wrapping_add_uint256(
            oracle.cumulative_price0, price_uq112(reserves.reserve1, reserves.reserve0) * elapsed
        ),
        cumulative_price1=wrapping_add_uint256(
            oracle.cumulative_price1, price_uq112(reserves.reserve0, reserves.reserve1) * elapsed
        ),
    )


def commit(state: PairState, balance0: int, balance1: int, now: int) -> PairState:
    """
    Bring reserves and accumulators up to date with the pool's true balances.

    Raises ReserveOverflow if either balance exceeds 112 bits. The accumulators
    advance by the *prior* reserves' price times the elapsed time, and only when
    both prior reserves are non-zero.
    """
    require_uint112("balance0", balance0)
    require_uint112("balance1", balance1)
    timestamp = to_uint32(now)

    elapsed = elapsed_uint32(timestamp, state.reserves.last_update_time)
    oracle = _accumulate(state.reserves, state.oracle, elapsed)

    return PairState(
        reserves=ReserveState(reserve0=balance0, reserve1=balance1, last_update_time=timestamp),
        oracle=oracle,
    )


def current_cumulative_prices(state: PairState, now: int) -> OracleObservation:
    """
    Accumulators as if a commit happened at `now`, without changing state.

    Lets consumers take a sample without forcing a trade.
    """
    timestamp = to_uint32(now)
    elapsed = elapsed_uint32(timestamp, state.reserves.last_update_time)
    oracle = _accumulate(state.reserves, state.oracle, elapsed)
    return OracleObservation(
        cumulative_price0=oracle.cumulative_price0,
        cumulative_price1=oracle.cumulative_price1,
        timestamp=timestamp,
    )


def consult_twap(start: PriceSample, end: PriceSample) -> int:
    """
    Time-weighted average price between two samples, as UQ112x112.

    Modular subtraction tolerates accumulator wraparound. Both samples must come
    from the same pool and the same price direction.
    """
    for name, v in (
        ("start.cumulative_price", start.cumulative_price),
        ("start.timestamp", start.timestamp),
        ("end.cumulative_price", end.cumulative_price),
        ("end.timestamp", end.timestamp),
    ):
        require_int(name, v)
    if end.timestamp <= start.timestamp:
        raise InvalidWindow(f"end timestamp ({end.timestamp}) must exceed start timestamp ({start.timestamp})")

    delta = wrapping_sub_uint256(end.cumulative_price, start.cumulative_price)
    return delta // (end.timestamp - start.timestamp)
