from __future__ import annotations

import pytest

from pairswap.config import PoolConfig
from pairswap.core.collaborators import StaticGate
from pairswap.core.events import ReservesSynced
from pairswap.core.fees import FeeConfig
from pairswap.core.sandbox import create_sandbox
from pairswap.errors import InsufficientLiquidity, Paused, ReserveOverflow
from pairswap.kernels.fixed_point import UINT112_MAX
from pairswap.state.reserves import PairState, ReserveState

POOL = "0x" + "aa" * 20
ASSET0 = "0x" + "11" * 32
ASSET1 = "0x" + "22" * 32
LP = "0x" + "01" * 20
DONOR = "0x" + "0d" * 20
DEADLINE = 10**9


def _seeded(**kwargs):
    fees = FeeConfig(swap_fee_bps=30, protocol_share_bps=0, protocol_recipient="0x" + "fe" * 20)
    sb = create_sandbox(PoolConfig(address=POOL, asset0=ASSET0, asset1=ASSET1, fees=fees), **kwargs)
    sb.fund(LP, ASSET0, 10_000)
    sb.fund(LP, ASSET1, 20_000)
    sb.pool.deposit(LP, 10_000, 20_000, 0, 0, LP, DEADLINE)
    sb.events.clear()
    return sb


def test_skim_sends_donations_away() -> None:
    sb = _seeded()
    sb.fund(POOL, ASSET1, 777)

    assert sb.pool.skim(DONOR, DONOR) == (0, 777)
    assert sb.balance(DONOR, ASSET1) == 777
    assert sb.balance(POOL, ASSET1) == 20_000
    assert sb.pool.get_reserves()[:2] == (10_000, 20_000)


def test_sync_adopts_donations_as_reserves() -> None:
    sb = _seeded()
    sb.fund(POOL, ASSET0, 500)
    sb.clock.set(7)

    reserves = sb.pool.sync(DONOR)
    assert (reserves.reserve0, reserves.reserve1, reserves.last_update_time) == (10_500, 20_000, 7)
    assert sb.events == [ReservesSynced(reserve0=10_500, reserve1=20_000)]


def test_sync_rejects_balances_beyond_reserve_width() -> None:
    sb = _seeded()
    sb.fund(POOL, ASSET0, UINT112_MAX)
    before = sb.pool.state
    with pytest.raises(ReserveOverflow):
        sb.pool.sync(DONOR)
    assert sb.pool.state == before

    # skim is the way out of an overflowed balance.
    sb.pool.skim(DONOR, DONOR)
    assert sb.pool.sync(DONOR).reserve0 == 10_000


def test_paused_pool_rejects_skim_and_sync() -> None:
    gate = StaticGate(paused=False)
    sb = _seeded(gate=gate)
    gate.paused = True
    with pytest.raises(Paused):
        sb.pool.sync(DONOR)
    with pytest.raises(Paused):
        sb.pool.skim(DONOR, DONOR)


def test_sync_refused_on_pool_without_liquidity() -> None:
    fees = FeeConfig(swap_fee_bps=30, protocol_share_bps=0, protocol_recipient="0x" + "fe" * 20)
    sb = create_sandbox(PoolConfig(address=POOL, asset0=ASSET0, asset1=ASSET1, fees=fees))
    sb.fund(POOL, ASSET0, 1)

    with pytest.raises(InsufficientLiquidity, match="without liquidity"):
        sb.pool.sync(DONOR)
    assert sb.pool.reserves.is_empty()

    # The donation can still be skimmed and the pool opened normally.
    assert sb.pool.skim(DONOR, DONOR) == (1, 0)
    sb.fund(LP, ASSET0, 10_000)
    sb.fund(LP, ASSET1, 20_000)
    assert sb.pool.deposit(LP, 10_000, 20_000, 0, 0, LP, DEADLINE).shares == 13_142


def test_first_deposit_ignores_reserves_recorded_without_supply() -> None:
    fees = FeeConfig(swap_fee_bps=30, protocol_share_bps=0, protocol_recipient="0x" + "fe" * 20)
    state = PairState(reserves=ReserveState(reserve0=1, reserve1=0, last_update_time=0))
    sb = create_sandbox(PoolConfig(address=POOL, asset0=ASSET0, asset1=ASSET1, fees=fees), state=state)
    sb.fund(POOL, ASSET0, 1)
    sb.fund(LP, ASSET0, 10_000)
    sb.fund(LP, ASSET1, 20_000)

    res = sb.pool.deposit(LP, 10_000, 20_000, 0, 0, LP, DEADLINE)
    assert (res.amount0, res.amount1, res.shares) == (10_000, 20_000, 13_142)
    assert sb.pool.get_reserves()[:2] == (10_001, 20_000)
    assert sb.pool.total_supply() == 14_142
