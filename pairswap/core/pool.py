"""
Two-asset constant-product pool (imperative shell around the pure kernels).

Every mutating entry point follows the same shape:
1. consult the administrative gate,
2. hold the reentrancy guard and the environment's transaction scope,
3. validate deadline and amounts,
4. compute against recorded reserves with the pure kernels,
5. move assets / shares through the collaborators,
6. re-read true balances and commit reserves + oracle exactly once.

The pool's own `PairState` is written only in `_commit`, so a rejected call
never leaves a partial reserve or accumulator update behind.
"""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterator, Optional, Tuple

from ..errors import (
    InsufficientLiquidity,
    InvalidParameters,
    InvalidToken,
    InvariantViolation,
    Paused,
    Unauthorized,
    ZeroAddress,
)
from ..kernels.cpmm_swap import get_amount_in, get_amount_out, swap_exact_in
from ..kernels.fixed_point import require_int
from ..kernels.lp_math import burn_liquidity, mint_liquidity, mint_liquidity_initial, optimal_liquidity
from ..state.balances import Address, Amount, AssetId, is_null_address
from ..state.reserves import OracleAccumulator, PairState, ReserveState
from ..state.shares import LOCKED_LIQUIDITY_ADDRESS
from .collaborators import (
    AdminGate,
    AssetTransfer,
    AtomicScope,
    OpenGate,
    ShareLedger,
    SystemClock,
    TimeSource,
    no_atomic_scope,
)
from .events import (
    FeesUpdated,
    LiquidityAdded,
    LiquidityRemoved,
    PoolEvent,
    ReservesSynced,
    SwapExecuted,
)
from .fees import FeeConfig, fee_breakdown
from .guards import ReentrancyGuard, check_deadline
from .oracle import OracleObservation, commit, current_cumulative_prices

if TYPE_CHECKING:
    from ..config import PoolConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DepositResult:
    amount0: int
    amount1: int
    shares: int


@dataclass(frozen=True)
class WithdrawResult:
    amount0: int
    amount1: int
    shares: int


@dataclass(frozen=True)
class SwapResult:
    asset_in: AssetId
    asset_out: AssetId
    amount_in: int
    amount_out: int
    protocol_fee: int


@dataclass(frozen=True)
class SwapQuote:
    asset_in: AssetId
    asset_out: AssetId
    amount_in: int
    amount_out: int
    fee_total: int
    protocol_fee: int


def check_asset_pair(asset0: AssetId, asset1: AssetId) -> None:
    for name, v in (("asset0", asset0), ("asset1", asset1)):
        if not isinstance(v, str) or not v:
            raise InvalidParameters(f"{name} must be a non-empty string")
    if asset0 >= asset1:
        raise InvalidParameters(f"Assets must be in canonical order: {asset0} < {asset1}")


def _require_amount(name: str, value: int, *, positive: bool) -> int:
    require_int(name, value)
    if positive and value <= 0:
        raise InvalidParameters(f"{name} must be positive: {value}")
    if value < 0:
        raise InvalidParameters(f"{name} must be non-negative: {value}")
    return value


def _require_recipient(recipient: Address) -> None:
    if is_null_address(recipient):
        raise ZeroAddress("recipient must be set")


class Pool:
    """
    Reserve/invariant engine for one pair of assets.

    Attributes:
        address: Holder identity of the pool in the asset ledger
        asset0: First asset (must be < asset1 lexicographically)
        asset1: Second asset
    """

    def __init__(
        self,
        *,
        address: Address,
        asset0: AssetId,
        asset1: AssetId,
        ledger: ShareLedger,
        assets: AssetTransfer,
        fee_config: FeeConfig,
        clock: Optional[TimeSource] = None,
        gate: Optional[AdminGate] = None,
        atomic: Optional[AtomicScope] = None,
        on_event: Optional[Callable[[PoolEvent], None]] = None,
        state: Optional[PairState] = None,
    ) -> None:
        check_asset_pair(asset0, asset1)
        if is_null_address(address):
            raise ZeroAddress("pool address must be set")
        if not isinstance(fee_config, FeeConfig):
            raise TypeError("fee_config must be a FeeConfig")

        self.address = address
        self.asset0 = asset0
        self.asset1 = asset1
        self._ledger = ledger
        self._assets = assets
        self._fee_config = fee_config
        self._clock: TimeSource = clock if clock is not None else SystemClock()
        self._gate: AdminGate = gate if gate is not None else OpenGate()
        self._atomic: AtomicScope = atomic if atomic is not None else no_atomic_scope
        self._on_event = on_event
        self._state = state if state is not None else PairState()
        self._guard = ReentrancyGuard()

    @classmethod
    def from_config(
        cls,
        config: "PoolConfig",
        *,
        ledger: ShareLedger,
        assets: AssetTransfer,
        clock: Optional[TimeSource] = None,
        gate: Optional[AdminGate] = None,
        atomic: Optional[AtomicScope] = None,
        on_event: Optional[Callable[[PoolEvent], None]] = None,
        state: Optional[PairState] = None,
    ) -> "Pool":
        return cls(
            address=config.address,
            asset0=config.asset0,
            asset1=config.asset1,
            ledger=ledger,
            assets=assets,
            fee_config=config.fees,
            clock=clock,
            gate=gate,
            atomic=atomic,
            on_event=on_event,
            state=state,
        )

    # --- Views -------------------------------------------------------------

    @property
    def state(self) -> PairState:
        return self._state

    @property
    def reserves(self) -> ReserveState:
        return self._state.reserves

    @property
    def oracle(self) -> OracleAccumulator:
        return self._state.oracle

    @property
    def fee_config(self) -> FeeConfig:
        return self._fee_config

    @property
    def busy(self) -> bool:
        return self._guard.locked

    def total_supply(self) -> Amount:
        return self._ledger.total_supply()

    def get_reserves(self) -> Tuple[int, int, int]:
        r = self._state.reserves
        return r.reserve0, r.reserve1, r.last_update_time

    def observe(self) -> OracleObservation:
        """Accumulators as of the clock's current time (counterfactual if stale)."""
        return current_cumulative_prices(self._state, self._clock.now())

    def other_asset(self, asset: AssetId) -> AssetId:
        if asset == self.asset0:
            return self.asset1
        if asset == self.asset1:
            return self.asset0
        raise InvalidToken(f"Asset {asset} not in pool {self.address}")

    def _oriented_reserves(self, asset_in: AssetId) -> Tuple[int, int]:
        r = self._state.reserves
        if asset_in == self.asset0:
            return r.reserve0, r.reserve1
        return r.reserve1, r.reserve0

    def quote_swap(self, asset_in: AssetId, amount_in: int) -> SwapQuote:
        """Exact-in quote against current reserves, assuming no transfer fee."""
        asset_out = self.other_asset(asset_in)
        reserve_in, reserve_out = self._oriented_reserves(asset_in)
        amount_out = get_amount_out(amount_in, reserve_in, reserve_out, self._fee_config.swap_fee_bps)
        fees = fee_breakdown(amount_in, self._fee_config)
        return SwapQuote(
            asset_in=asset_in,
            asset_out=asset_out,
            amount_in=amount_in,
            amount_out=amount_out,
            fee_total=fees.fee_total,
            protocol_fee=fees.protocol_fee,
        )

    def quote_swap_exact_out(self, asset_out: AssetId, amount_out: int) -> int:
        """Minimal input of the other asset that buys at least `amount_out`."""
        asset_in = self.other_asset(asset_out)
        reserve_in, reserve_out = self._oriented_reserves(asset_in)
        return get_amount_in(amount_out, reserve_in, reserve_out, self._fee_config.swap_fee_bps)

    # --- Internals ---------------------------------------------------------

    @contextlib.contextmanager
    def _mutating(self) -> Iterator[None]:
        if self._gate.is_paused():
            raise Paused("pool is paused")
        with self._guard, self._atomic():
            yield

    def _balances(self) -> Tuple[int, int]:
        return self._assets.balance_of(self.asset0), self._assets.balance_of(self.asset1)

    def _commit(self, balance0: int, balance1: int, now: int) -> None:
        # Sole writer of reserves and accumulators.
        self._state = commit(self._state, balance0, balance1, now)
        logger.debug(
            "Reserves committed",
            extra={
                "event": "pool.commit",
                "pool": self.address,
                "reserve0": balance0,
                "reserve1": balance1,
                "timestamp": self._state.reserves.last_update_time,
            },
        )

    def _emit(self, event: PoolEvent) -> None:
        if self._on_event is not None:
            self._on_event(event)

    # --- Liquidity ---------------------------------------------------------

    def deposit(
        self,
        caller: Address,
        amount0_desired: int,
        amount1_desired: int,
        amount0_min: int,
        amount1_min: int,
        recipient: Address,
        deadline: int,
    ) -> DepositResult:
        """
        Add liquidity at the live reserve ratio and mint shares to `recipient`.

        The first deposit sets the price; `MINIMUM_LIQUIDITY` shares are locked
        forever at `LOCKED_LIQUIDITY_ADDRESS`.
        """
        with self._mutating():
            now = self._clock.now()
            check_deadline(deadline, now)
            _require_recipient(recipient)

            r = self._state.reserves
            supply = self._ledger.total_supply()
            # With no shares outstanding the depositor sets the price, whatever
            # reserves a restored or donated-to pool may record.
            opt = optimal_liquidity(
                reserve0=r.reserve0 if supply > 0 else 0,
                reserve1=r.reserve1 if supply > 0 else 0,
                amount0_desired=amount0_desired,
                amount1_desired=amount1_desired,
                amount0_min=amount0_min,
                amount1_min=amount1_min,
            )

            before0, before1 = self._balances()
            self._assets.transfer_from(self.asset0, caller, opt.amount0_used)
            self._assets.transfer_from(self.asset1, caller, opt.amount1_used)
            balance0, balance1 = self._balances()
            received0, received1 = balance0 - before0, balance1 - before1

            if supply == 0:
                shares, locked = mint_liquidity_initial(amount0=received0, amount1=received1)
                self._ledger.mint(LOCKED_LIQUIDITY_ADDRESS, locked)
            else:
                shares = mint_liquidity(
                    reserve0=r.reserve0,
                    reserve1=r.reserve1,
                    total_supply=supply,
                    amount0=received0,
                    amount1=received1,
                )
            self._ledger.mint(recipient, shares)

            self._commit(balance0, balance1, now)

        event = LiquidityAdded(
            sender=caller, recipient=recipient, amount0=received0, amount1=received1, shares=shares
        )
        logger.info(
            "Liquidity added",
            extra={"event": "pool.deposit", "pool": self.address, "amount0": received0, "amount1": received1, "shares": shares},
        )
        self._emit(event)
        return DepositResult(amount0=received0, amount1=received1, shares=shares)

    def withdraw(
        self,
        caller: Address,
        shares: int,
        amount0_min: int,
        amount1_min: int,
        recipient: Address,
        deadline: int,
    ) -> WithdrawResult:
        """Burn `shares` from `caller` and send the proportional reserves to `recipient`."""
        with self._mutating():
            now = self._clock.now()
            check_deadline(deadline, now)
            _require_amount("shares", shares, positive=True)
            _require_amount("amount0_min", amount0_min, positive=False)
            _require_amount("amount1_min", amount1_min, positive=False)
            _require_recipient(recipient)

            held = self._ledger.balance_of(caller)
            if held < shares:
                raise InsufficientLiquidity(f"caller holds {held} shares, cannot redeem {shares}")

            r = self._state.reserves
            out = burn_liquidity(
                shares=shares,
                reserve0=r.reserve0,
                reserve1=r.reserve1,
                total_supply=self._ledger.total_supply(),
            )
            if out.amount0_out == 0 and out.amount1_out == 0:
                raise InsufficientLiquidity("redemption rounds down to nothing")
            if out.amount0_out < amount0_min:
                raise InsufficientLiquidity(f"amount0_out ({out.amount0_out}) < amount0_min ({amount0_min})")
            if out.amount1_out < amount1_min:
                raise InsufficientLiquidity(f"amount1_out ({out.amount1_out}) < amount1_min ({amount1_min})")

            self._ledger.burn(caller, shares)
            if out.amount0_out > 0:
                self._assets.transfer(self.asset0, recipient, out.amount0_out)
            if out.amount1_out > 0:
                self._assets.transfer(self.asset1, recipient, out.amount1_out)

            balance0, balance1 = self._balances()
            self._commit(balance0, balance1, now)

        event = LiquidityRemoved(
            sender=caller, recipient=recipient, amount0=out.amount0_out, amount1=out.amount1_out, shares=shares
        )
        logger.info(
            "Liquidity removed",
            extra={
                "event": "pool.withdraw",
                "pool": self.address,
                "amount0": out.amount0_out,
                "amount1": out.amount1_out,
                "shares": shares,
            },
        )
        self._emit(event)
        return WithdrawResult(amount0=out.amount0_out, amount1=out.amount1_out, shares=shares)

    # --- Swaps -------------------------------------------------------------

    def swap(
        self,
        caller: Address,
        asset_in: AssetId,
        amount_in: int,
        amount_out_min: int,
        recipient: Address,
        deadline: int,
    ) -> SwapResult:
        """
        Exact-in swap of `asset_in` for the other asset.

        Pricing uses the amount the pool actually received, so assets that
        charge a transfer fee are priced on what arrived.
        """
        with self._mutating():
            now = self._clock.now()
            check_deadline(deadline, now)
            _require_amount("amount_in", amount_in, positive=True)
            _require_amount("amount_out_min", amount_out_min, positive=False)
            _require_recipient(recipient)
            if recipient == self.address:
                raise InvalidParameters("recipient must not be the pool itself")
            asset_out = self.other_asset(asset_in)

            reserve_in, reserve_out = self._oriented_reserves(asset_in)
            if reserve_in == 0 or reserve_out == 0:
                raise InsufficientLiquidity("pool has no liquidity")

            before_in = self._assets.balance_of(asset_in)
            self._assets.transfer_from(asset_in, caller, amount_in)
            actual_in = self._assets.balance_of(asset_in) - before_in

            fees = self._fee_config
            res = swap_exact_in(
                reserve_in=reserve_in,
                reserve_out=reserve_out,
                amount_in=actual_in,
                fee_bps=fees.swap_fee_bps,
                protocol_share_bps=fees.protocol_share_bps,
                amount_out_min=amount_out_min,
            )

            if res.protocol_fee > 0:
                self._assets.transfer(asset_in, fees.protocol_recipient, res.protocol_fee)
            self._assets.transfer(asset_out, recipient, res.amount_out)

            balance_in = self._assets.balance_of(asset_in)
            balance_out = self._assets.balance_of(asset_out)
            if balance_in * balance_out < res.k_before:
                logger.warning(
                    "Constant product would decrease",
                    extra={"event": "pool.invariant", "pool": self.address, "k_before": res.k_before},
                )
                raise InvariantViolation(res.k_before, balance_in * balance_out)

            if asset_in == self.asset0:
                self._commit(balance_in, balance_out, now)
            else:
                self._commit(balance_out, balance_in, now)

        event = SwapExecuted(
            sender=caller,
            recipient=recipient,
            asset_in=asset_in,
            asset_out=asset_out,
            amount_in=actual_in,
            amount_out=res.amount_out,
            protocol_fee=res.protocol_fee,
        )
        logger.info(
            "Swap executed",
            extra={
                "event": "pool.swap",
                "pool": self.address,
                "asset_in": asset_in,
                "amount_in": actual_in,
                "amount_out": res.amount_out,
                "protocol_fee": res.protocol_fee,
            },
        )
        self._emit(event)
        return SwapResult(
            asset_in=asset_in,
            asset_out=asset_out,
            amount_in=actual_in,
            amount_out=res.amount_out,
            protocol_fee=res.protocol_fee,
        )

    # --- Balance reconciliation -------------------------------------------

    def skim(self, caller: Address, recipient: Address) -> Tuple[int, int]:
        """Send any balance above the recorded reserves to `recipient`."""
        with self._mutating():
            _require_recipient(recipient)
            r = self._state.reserves
            excess = []
            for asset, reserve in ((self.asset0, r.reserve0), (self.asset1, r.reserve1)):
                amount = self._assets.balance_of(asset) - reserve
                if amount > 0:
                    self._assets.transfer(asset, recipient, amount)
                excess.append(max(amount, 0))

        logger.info(
            "Excess balances skimmed",
            extra={"event": "pool.skim", "pool": self.address, "amount0": excess[0], "amount1": excess[1]},
        )
        return excess[0], excess[1]

    def sync(self, caller: Address) -> ReserveState:
        """
        Commit the pool's true balances as reserves.

        Refused while no shares are outstanding: reserves of a pool without
        liquidity stay at zero, and donations to it can only be skimmed.
        """
        with self._mutating():
            if self._ledger.total_supply() == 0:
                raise InsufficientLiquidity("cannot sync a pool without liquidity")
            balance0, balance1 = self._balances()
            self._commit(balance0, balance1, self._clock.now())

        self._emit(ReservesSynced(reserve0=balance0, reserve1=balance1))
        return self._state.reserves

    # --- Administration ----------------------------------------------------

    def set_fee_params(
        self,
        caller: Address,
        swap_fee_bps: int,
        protocol_share_bps: int,
        protocol_recipient: Address,
    ) -> FeeConfig:
        """Replace the fee configuration atomically."""
        if not self._gate.is_authorized(caller):
            raise Unauthorized(f"{caller} may not update fee parameters")
        config = FeeConfig(
            swap_fee_bps=swap_fee_bps,
            protocol_share_bps=protocol_share_bps,
            protocol_recipient=protocol_recipient,
        )
        self._fee_config = config

        logger.info(
            "Fee parameters updated",
            extra={
                "event": "pool.fees",
                "pool": self.address,
                "swap_fee_bps": swap_fee_bps,
                "protocol_share_bps": protocol_share_bps,
            },
        )
        self._emit(
            FeesUpdated(
                swap_fee_bps=swap_fee_bps,
                protocol_share_bps=protocol_share_bps,
                protocol_recipient=protocol_recipient,
            )
        )
        return config

    def __repr__(self) -> str:
        r = self._state.reserves
        return (
            f"Pool(address={self.address[:10]}..., "
            f"assets=({self.asset0[:8]}..., {self.asset1[:8]}...), "
            f"reserves=({r.reserve0}, {r.reserve1}), "
            f"swap_fee_bps={self._fee_config.swap_fee_bps})"
        )
