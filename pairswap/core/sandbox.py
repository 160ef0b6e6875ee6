"""
In-memory environment for running a pool offline.

Wires a `Pool` to a shared `BalanceTable`, a `ShareTable`, a `ManualClock` and
an atomic scope over both tables, so a failed call rolls back every balance it
touched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from ..config import PoolConfig
from ..state.balances import Address, AssetId, BalanceTable
from ..state.reserves import PairState
from ..state.shares import ShareTable
from .collaborators import AdminGate, InMemoryAssets, ManualClock, atomic_scope
from .events import PoolEvent
from .pool import Pool


@dataclass
class Sandbox:
    pool: Pool
    balances: BalanceTable
    shares: ShareTable
    assets: InMemoryAssets
    clock: ManualClock
    events: List[PoolEvent] = field(default_factory=list)

    def fund(self, holder: Address, asset: AssetId, amount: int) -> None:
        """Credit `holder` with `amount` of `asset` (test faucet)."""
        self.balances.add(holder, asset, amount)

    def balance(self, holder: Address, asset: AssetId) -> int:
        return self.balances.get(holder, asset)


def create_sandbox(
    config: PoolConfig,
    *,
    clock: Optional[ManualClock] = None,
    gate: Optional[AdminGate] = None,
    transfer_fee_bps: Optional[Mapping[AssetId, int]] = None,
    state: Optional[PairState] = None,
    shares: Optional[ShareTable] = None,
    balances: Optional[BalanceTable] = None,
) -> Sandbox:
    balances = balances if balances is not None else BalanceTable()
    shares = shares if shares is not None else ShareTable()
    clock = clock if clock is not None else ManualClock()
    assets = InMemoryAssets(
        balances=balances,
        pool_address=config.address,
        transfer_fee_bps=dict(transfer_fee_bps or {}),
    )
    events: List[PoolEvent] = []
    pool = Pool.from_config(
        config,
        ledger=shares,
        assets=assets,
        clock=clock,
        gate=gate,
        atomic=atomic_scope(balances, shares),
        on_event=events.append,
        state=state,
    )
    return Sandbox(pool=pool, balances=balances, shares=shares, assets=assets, clock=clock, events=events)
