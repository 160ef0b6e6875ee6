"""
Administrative fee parameters (integer bps only).

`FeeConfig` is immutable; an update replaces all three fields at once.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import FeeTooHigh, InvalidParameters, ZeroAddress
from ..kernels.cpmm_swap import FEE_DENOMINATOR, compute_protocol_fee
from ..state.balances import Address, is_null_address


MAX_SWAP_FEE_BPS = 1_000
DEFAULT_SWAP_FEE_BPS = 30
DEFAULT_PROTOCOL_SHARE_BPS = 0


@dataclass(frozen=True)
class FeeConfig:
    swap_fee_bps: int
    protocol_share_bps: int
    protocol_recipient: Address

    def __post_init__(self) -> None:
        for name, v in (
            ("swap_fee_bps", self.swap_fee_bps),
            ("protocol_share_bps", self.protocol_share_bps),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise InvalidParameters(f"{name} must be non-negative: {v}")
        if self.swap_fee_bps > MAX_SWAP_FEE_BPS:
            raise FeeTooHigh(f"swap_fee_bps must be <= {MAX_SWAP_FEE_BPS}: {self.swap_fee_bps}")
        if self.protocol_share_bps > FEE_DENOMINATOR:
            raise InvalidParameters(
                f"protocol_share_bps must be <= {FEE_DENOMINATOR}: {self.protocol_share_bps}"
            )
        if is_null_address(self.protocol_recipient):
            raise ZeroAddress("protocol_recipient must be set")
        if not isinstance(self.protocol_recipient, str):
            raise TypeError("protocol_recipient must be a string")

    @property
    def protocol_fee_enabled(self) -> bool:
        return self.swap_fee_bps > 0 and self.protocol_share_bps > 0


@dataclass(frozen=True)
class FeeBreakdown:
    fee_total: int
    protocol_fee: int
    lp_fee: int


def fee_breakdown(amount_in: int, config: FeeConfig) -> FeeBreakdown:
    """Split the fee on a gross input between the protocol and liquidity providers."""
    fee_total, protocol_fee = compute_protocol_fee(
        amount_in=amount_in,
        fee_bps=config.swap_fee_bps,
        protocol_share_bps=config.protocol_share_bps,
    )
    return FeeBreakdown(fee_total=fee_total, protocol_fee=protocol_fee, lp_fee=fee_total - protocol_fee)
