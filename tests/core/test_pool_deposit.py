from __future__ import annotations

import pytest

from pairswap.config import PoolConfig
from pairswap.core.collaborators import StaticGate
from pairswap.core.events import LiquidityAdded
from pairswap.core.fees import FeeConfig
from pairswap.core.sandbox import create_sandbox
from pairswap.errors import DeadlineExpired, InsufficientLiquidity, Paused, ZeroAddress
from pairswap.kernels.lp_math import MINIMUM_LIQUIDITY
from pairswap.state.balances import ZERO_ADDRESS
from pairswap.state.shares import LOCKED_LIQUIDITY_ADDRESS

POOL = "0x" + "aa" * 20
ASSET0 = "0x" + "11" * 32
ASSET1 = "0x" + "22" * 32
LP = "0x" + "01" * 20
LP2 = "0x" + "03" * 20
DEADLINE = 10**9


def _config() -> PoolConfig:
    fees = FeeConfig(swap_fee_bps=30, protocol_share_bps=0, protocol_recipient="0x" + "fe" * 20)
    return PoolConfig(address=POOL, asset0=ASSET0, asset1=ASSET1, fees=fees)


def _funded(**kwargs):
    sb = create_sandbox(_config(), **kwargs)
    for holder in (LP, LP2):
        sb.fund(holder, ASSET0, 1_000_000)
        sb.fund(holder, ASSET1, 1_000_000)
    return sb


def test_first_deposit_mints_geometric_mean_minus_lock() -> None:
    sb = _funded()
    res = sb.pool.deposit(LP, 10_000, 20_000, 0, 0, LP, DEADLINE)

    assert (res.amount0, res.amount1, res.shares) == (10_000, 20_000, 13_142)
    assert sb.shares.balance_of(LP) == 13_142
    assert sb.shares.balance_of(LOCKED_LIQUIDITY_ADDRESS) == MINIMUM_LIQUIDITY
    assert sb.pool.total_supply() == 14_142
    assert sb.pool.get_reserves()[:2] == (10_000, 20_000)
    assert sb.events == [LiquidityAdded(sender=LP, recipient=LP, amount0=10_000, amount1=20_000, shares=13_142)]


def test_second_deposit_is_proportional() -> None:
    sb = _funded()
    sb.pool.deposit(LP, 10_000, 20_000, 0, 0, LP, DEADLINE)
    res = sb.pool.deposit(LP2, 5_000, 10_000, 0, 0, LP2, DEADLINE)

    assert res.shares == 7_071
    assert sb.pool.total_supply() == 14_142 + 7_071
    assert sb.pool.get_reserves()[:2] == (15_000, 30_000)


def test_deposit_pulls_only_the_optimal_amounts() -> None:
    sb = _funded()
    sb.pool.deposit(LP, 10_000, 20_000, 0, 0, LP, DEADLINE)
    res = sb.pool.deposit(LP2, 5_000, 50_000, 0, 0, LP2, DEADLINE)

    assert (res.amount0, res.amount1) == (5_000, 10_000)
    assert sb.balance(LP2, ASSET1) == 1_000_000 - 10_000


def test_deposit_shares_can_go_to_another_recipient() -> None:
    sb = _funded()
    sb.pool.deposit(LP, 10_000, 20_000, 0, 0, LP2, DEADLINE)
    assert sb.shares.balance_of(LP) == 0
    assert sb.shares.balance_of(LP2) == 13_142


def test_first_deposit_at_lock_boundary_rolls_back() -> None:
    sb = _funded()
    with pytest.raises(InsufficientLiquidity):
        sb.pool.deposit(LP, 1_000, 1_000, 0, 0, LP, DEADLINE)

    assert sb.balance(LP, ASSET0) == 1_000_000
    assert sb.balance(POOL, ASSET0) == 0
    assert sb.pool.total_supply() == 0
    assert sb.pool.reserves.is_empty()
    assert sb.events == []


def test_deadline_in_the_past_rejected() -> None:
    sb = _funded()
    sb.clock.set(100)
    with pytest.raises(DeadlineExpired):
        sb.pool.deposit(LP, 10_000, 20_000, 0, 0, LP, 99)
    # A deadline equal to the current time is still valid.
    res = sb.pool.deposit(LP, 10_000, 20_000, 0, 0, LP, 100)
    assert res.shares == 13_142


def test_zero_recipient_rejected() -> None:
    sb = _funded()
    with pytest.raises(ZeroAddress):
        sb.pool.deposit(LP, 10_000, 20_000, 0, 0, ZERO_ADDRESS, DEADLINE)


def test_paused_pool_rejects_deposits() -> None:
    sb = _funded(gate=StaticGate(paused=True))
    with pytest.raises(Paused):
        sb.pool.deposit(LP, 10_000, 20_000, 0, 0, LP, DEADLINE)


def test_caller_without_funds_rejected() -> None:
    sb = create_sandbox(_config())
    with pytest.raises(ValueError, match="Insufficient balance"):
        sb.pool.deposit(LP, 10_000, 20_000, 0, 0, LP, DEADLINE)
    assert sb.pool.total_supply() == 0


def test_fee_on_transfer_asset_mints_on_received_amount() -> None:
    sb = _funded(transfer_fee_bps={ASSET0: 100})
    res = sb.pool.deposit(LP, 10_000, 20_000, 0, 0, LP, DEADLINE)

    # 1% of asset0 is burned in transit; isqrt(9_900 * 20_000) == 14_071.
    assert res.amount0 == 9_900
    assert res.shares == 14_071 - MINIMUM_LIQUIDITY
    assert sb.pool.get_reserves()[:2] == (9_900, 20_000)
