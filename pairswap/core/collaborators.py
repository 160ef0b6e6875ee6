"""
External collaborators of the pool (imperative shell).

The pool talks to the outside world only through these interfaces:
- `ShareLedger`: ownership shares (mint/burn/supply),
- `AssetTransfer`: asset movements in and out of one pool address,
- `TimeSource`: a 32-bit clock,
- `AdminGate`: authorization and pause flag.

In-memory implementations are provided for simulation and tests. Any asset
transfer may run arbitrary code (`hooks`), which is exactly where reentrancy
comes from.
"""

from __future__ import annotations

import contextlib
import time
from dataclasses import dataclass, field
from typing import Callable, ContextManager, Dict, FrozenSet, Iterator, List, Mapping, Protocol

from ..kernels.cpmm_swap import FEE_DENOMINATOR
from ..kernels.fixed_point import to_uint32
from ..state.balances import Address, Amount, AssetId, BalanceTable


class ShareLedger(Protocol):
    def mint(self, to: Address, amount: Amount) -> None: ...

    def burn(self, holder: Address, amount: Amount) -> None: ...

    def total_supply(self) -> Amount: ...

    def balance_of(self, holder: Address) -> Amount: ...


class AssetTransfer(Protocol):
    """Asset movements relative to a single pool address."""

    def transfer_from(self, asset: AssetId, owner: Address, amount: Amount) -> None: ...

    def transfer(self, asset: AssetId, to: Address, amount: Amount) -> None: ...

    def balance_of(self, asset: AssetId) -> Amount: ...


class TimeSource(Protocol):
    def now(self) -> int: ...


class AdminGate(Protocol):
    def is_paused(self) -> bool: ...

    def is_authorized(self, caller: Address) -> bool: ...


AtomicScope = Callable[[], ContextManager[object]]


class SystemClock:
    """Wall-clock seconds reduced to the 32-bit domain."""

    def now(self) -> int:
        return to_uint32(int(time.time()))


@dataclass
class ManualClock:
    """Deterministic clock for tests and offline simulation."""

    timestamp: int = 0

    def now(self) -> int:
        return to_uint32(self.timestamp)

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError(f"clock cannot move backwards: {seconds}")
        self.timestamp += seconds
        return self.now()

    def set(self, timestamp: int) -> None:
        self.timestamp = timestamp


class OpenGate:
    """Never paused; everyone is an administrator."""

    def is_paused(self) -> bool:
        return False

    def is_authorized(self, caller: Address) -> bool:
        return True


@dataclass
class StaticGate:
    admins: FrozenSet[Address] = frozenset()
    paused: bool = False

    def is_paused(self) -> bool:
        return self.paused

    def is_authorized(self, caller: Address) -> bool:
        return caller in self.admins


TransferHook = Callable[[str, AssetId, Address, Address, Amount], None]


@dataclass
class InMemoryAssets:
    """
    Asset-transfer collaborator backed by a `BalanceTable`.

    Attributes:
        balances: Shared balance table for every holder and asset
        pool_address: Holder identity of the pool in `balances`
        transfer_fee_bps: Optional per-asset fee burned on every transfer
            (simulates fee-on-transfer assets)
        hooks: Called after every movement with (kind, asset, sender, recipient, amount)
    """

    balances: BalanceTable
    pool_address: Address
    transfer_fee_bps: Mapping[AssetId, int] = field(default_factory=dict)
    hooks: List[TransferHook] = field(default_factory=list)

    def _move(self, kind: str, asset: AssetId, sender: Address, recipient: Address, amount: Amount) -> None:
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise ValueError(f"transfer amount must be a non-negative int: {amount!r}")
        fee_bps = int(self.transfer_fee_bps.get(asset, 0))
        if not (0 <= fee_bps <= FEE_DENOMINATOR):
            raise ValueError(f"transfer_fee_bps for {asset} must be in [0, {FEE_DENOMINATOR}]")
        burned = (amount * fee_bps) // FEE_DENOMINATOR
        self.balances.subtract(sender, asset, amount)
        self.balances.add(recipient, asset, amount - burned)
        for hook in list(self.hooks):
            hook(kind, asset, sender, recipient, amount)

    def transfer_from(self, asset: AssetId, owner: Address, amount: Amount) -> None:
        self._move("transfer_from", asset, owner, self.pool_address, amount)

    def transfer(self, asset: AssetId, to: Address, amount: Amount) -> None:
        self._move("transfer", asset, self.pool_address, to, amount)

    def balance_of(self, asset: AssetId) -> Amount:
        return self.balances.get(self.pool_address, asset)


class _Snapshottable(Protocol):
    def snapshot(self) -> object: ...

    def restore(self, snapshot) -> None: ...


def atomic_scope(*tables: _Snapshottable) -> AtomicScope:
    """
    Build a transaction scope over in-memory tables.

    On an exception inside the scope every table is restored to its state at
    entry and the exception propagates.
    """

    @contextlib.contextmanager
    def _scope() -> Iterator[None]:
        saved: Dict[int, object] = {id(t): t.snapshot() for t in tables}
        try:
            yield
        except BaseException:
            for t in tables:
                t.restore(saved[id(t)])
            raise

    return _scope


def no_atomic_scope() -> ContextManager[object]:
    return contextlib.nullcontext()
