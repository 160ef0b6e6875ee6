"""
Constant-product swap kernel.

Pure, integer-only pricing with floor rounding everywhere the pool pays out:
- The fee is applied to the input first: `net_in = floor(gross_in * (D - fee_bps) / D)`.
- Pricing uses `amount_out = floor(net_in * reserve_out / (reserve_in + net_in))`.
- An optional protocol share of the input-side fee leaves the pool in the input
  asset; the rest of the fee stays in reserves.

With these rules `new_reserve_in * new_reserve_out >= reserve_in * reserve_out`.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import InsufficientLiquidity, InsufficientOutputAmount, InvalidParameters
from .fixed_point import require_int


FEE_DENOMINATOR = 10_000


def _ceil_div_nonneg(numerator: int, denominator: int) -> int:
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    if numerator < 0:
        raise ValueError("numerator must be non-negative")
    return (numerator + denominator - 1) // denominator


def _require_bps(name: str, value: int) -> None:
    require_int(name, value)
    if not (0 <= value <= FEE_DENOMINATOR):
        raise InvalidParameters(f"{name} must be in [0, {FEE_DENOMINATOR}]: {value}")


@dataclass(frozen=True)
class SwapExactInResult:
    amount_out: int
    amount_in_net: int
    fee_total: int
    protocol_fee: int
    lp_fee: int
    gross_in: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def apply_fee(amount_in: int, fee_bps: int) -> int:
    """`floor(amount_in * (D - fee_bps) / D)`."""
    require_int("amount_in", amount_in)
    _require_bps("fee_bps", fee_bps)
    if amount_in < 0:
        raise InvalidParameters(f"amount_in must be non-negative: {amount_in}")
    return (amount_in * (FEE_DENOMINATOR - fee_bps)) // FEE_DENOMINATOR


def compute_protocol_fee(*, amount_in: int, fee_bps: int, protocol_share_bps: int) -> tuple[int, int]:
    """
    Return `(fee_total, protocol_fee)` for a gross input.

    fee_total    = floor(amount_in * fee_bps / D)
    protocol_fee = floor(fee_total * protocol_share_bps / D), or 0 when either rate is 0
    """
    require_int("amount_in", amount_in)
    _require_bps("fee_bps", fee_bps)
    _require_bps("protocol_share_bps", protocol_share_bps)
    if amount_in < 0:
        raise InvalidParameters(f"amount_in must be non-negative: {amount_in}")

    fee_total = (amount_in * fee_bps) // FEE_DENOMINATOR
    if fee_bps == 0 or protocol_share_bps == 0:
        return fee_total, 0
    return fee_total, (fee_total * protocol_share_bps) // FEE_DENOMINATOR


def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int) -> int:
    """Output for an exact input against the given reserves (floor rounding)."""
    for name, v in (("amount_in", amount_in), ("reserve_in", reserve_in), ("reserve_out", reserve_out)):
        require_int(name, v)
    if amount_in <= 0:
        raise InvalidParameters(f"amount_in must be positive: {amount_in}")
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidity("cannot price against an empty reserve")

    amount_in_net = apply_fee(amount_in, fee_bps)
    return (amount_in_net * reserve_out) // (reserve_in + amount_in_net)


def get_amount_in(amount_out: int, reserve_in: int, reserve_out: int, fee_bps: int) -> int:
    """
    Minimal gross input such that `get_amount_out(result, ...) >= amount_out`.

    net_in    = ceil(reserve_in * amount_out / (reserve_out - amount_out))
    amount_in = ceil(net_in * D / (D - fee_bps))
    """
    for name, v in (("amount_out", amount_out), ("reserve_in", reserve_in), ("reserve_out", reserve_out)):
        require_int(name, v)
    _require_bps("fee_bps", fee_bps)
    if amount_out <= 0:
        raise InvalidParameters(f"amount_out must be positive: {amount_out}")
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidity("cannot price against an empty reserve")
    if amount_out >= reserve_out:
        raise InsufficientLiquidity(
            f"cannot drain full reserve: amount_out ({amount_out}) >= reserve_out ({reserve_out})"
        )
    if fee_bps == FEE_DENOMINATOR:
        raise InvalidParameters("cannot quote exact-out with a 100% fee")

    net_in = _ceil_div_nonneg(reserve_in * amount_out, reserve_out - amount_out)
    return _ceil_div_nonneg(net_in * FEE_DENOMINATOR, FEE_DENOMINATOR - fee_bps)


def quote(amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """Amount of B worth `amount_a` of A at the current reserve ratio (floor)."""
    for name, v in (("amount_a", amount_a), ("reserve_a", reserve_a), ("reserve_b", reserve_b)):
        require_int(name, v)
    if amount_a <= 0:
        raise InvalidParameters(f"amount_a must be positive: {amount_a}")
    if reserve_a <= 0 or reserve_b <= 0:
        raise InsufficientLiquidity("cannot quote against an empty reserve")
    return (amount_a * reserve_b) // reserve_a


def swap_exact_in(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_bps: int,
    protocol_share_bps: int = 0,
    amount_out_min: int = 0,
) -> SwapExactInResult:
    """
    Exact-in swap quote + post-state.

    `amount_in` is the amount the pool actually received. Raises
    InsufficientOutputAmount if the output is zero or below `amount_out_min`.
    """
    for name, v in (
        ("reserve_in", reserve_in),
        ("reserve_out", reserve_out),
        ("amount_in", amount_in),
        ("amount_out_min", amount_out_min),
    ):
        require_int(name, v)
    _require_bps("fee_bps", fee_bps)
    _require_bps("protocol_share_bps", protocol_share_bps)

    if reserve_in < 0 or reserve_out < 0:
        raise InvalidParameters("reserves must be non-negative")
    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientLiquidity("cannot swap against an empty reserve")
    if amount_in < 0:
        raise InvalidParameters(f"amount_in must be non-negative: {amount_in}")
    if amount_out_min < 0:
        raise InvalidParameters(f"amount_out_min must be non-negative: {amount_out_min}")

    k_before = reserve_in * reserve_out

    amount_in_net = apply_fee(amount_in, fee_bps)
    amount_out = (amount_in_net * reserve_out) // (reserve_in + amount_in_net)
    if amount_out == 0:
        raise InsufficientOutputAmount("amount_out is zero (trade too small)")
    if amount_out < amount_out_min:
        raise InsufficientOutputAmount(f"amount_out ({amount_out}) < amount_out_min ({amount_out_min})")
    if amount_out >= reserve_out:
        raise AssertionError("amount_out must stay below reserve_out")

    fee_total, protocol_fee = compute_protocol_fee(
        amount_in=amount_in,
        fee_bps=fee_bps,
        protocol_share_bps=protocol_share_bps,
    )
    lp_fee = amount_in - amount_in_net - protocol_fee

    new_reserve_in = reserve_in + amount_in - protocol_fee
    new_reserve_out = reserve_out - amount_out
    k_after = new_reserve_in * new_reserve_out

    return SwapExactInResult(
        amount_out=amount_out,
        amount_in_net=amount_in_net,
        fee_total=fee_total,
        protocol_fee=protocol_fee,
        lp_fee=lp_fee,
        gross_in=amount_in,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=k_after,
    )
