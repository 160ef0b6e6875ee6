"""Events emitted by the pool for indexers and off-chain consumers.

Each event carries the literal amounts the engine computed. `to_dict()` gives a
flat, JSON-friendly record keyed by the event name.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum, unique
from typing import Any, ClassVar, Union

from ..state.balances import Address, AssetId


@unique
class Event(Enum):
    LIQUIDITY_ADDED = "LiquidityAdded"
    LIQUIDITY_REMOVED = "LiquidityRemoved"
    SWAP_EXECUTED = "SwapExecuted"
    FEES_UPDATED = "FeesUpdated"
    RESERVES_SYNCED = "ReservesSynced"


class _EventMixin:
    event: ClassVar[Event]

    def to_dict(self) -> dict[str, Any]:
        return {"event": self.event.value, **asdict(self)}  # type: ignore[call-overload]


@dataclass(frozen=True)
class LiquidityAdded(_EventMixin):
    event: ClassVar[Event] = Event.LIQUIDITY_ADDED

    sender: Address
    recipient: Address
    amount0: int
    amount1: int
    shares: int


@dataclass(frozen=True)
class LiquidityRemoved(_EventMixin):
    event: ClassVar[Event] = Event.LIQUIDITY_REMOVED

    sender: Address
    recipient: Address
    amount0: int
    amount1: int
    shares: int


@dataclass(frozen=True)
class SwapExecuted(_EventMixin):
    event: ClassVar[Event] = Event.SWAP_EXECUTED

    sender: Address
    recipient: Address
    asset_in: AssetId
    asset_out: AssetId
    amount_in: int
    amount_out: int
    protocol_fee: int


@dataclass(frozen=True)
class FeesUpdated(_EventMixin):
    event: ClassVar[Event] = Event.FEES_UPDATED

    swap_fee_bps: int
    protocol_share_bps: int
    protocol_recipient: Address


@dataclass(frozen=True)
class ReservesSynced(_EventMixin):
    event: ClassVar[Event] = Event.RESERVES_SYNCED

    reserve0: int
    reserve1: int


PoolEvent = Union[LiquidityAdded, LiquidityRemoved, SwapExecuted, FeesUpdated, ReservesSynced]
