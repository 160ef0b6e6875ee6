from __future__ import annotations

import pytest

from pairswap.errors import InvalidParameters, ReserveOverflow
from pairswap.kernels.fixed_point import UINT112_MAX, UINT256_MODULUS
from pairswap.state.reserves import OracleAccumulator, PairState, ReserveState


def test_default_pair_state_is_empty() -> None:
    s = PairState()
    assert s.reserves.is_empty()
    assert s.oracle == OracleAccumulator(0, 0)


def test_reserve_width_is_enforced() -> None:
    ReserveState(reserve0=UINT112_MAX, reserve1=1)
    with pytest.raises(ReserveOverflow):
        ReserveState(reserve0=UINT112_MAX + 1, reserve1=1)


def test_timestamp_must_be_uint32() -> None:
    with pytest.raises(InvalidParameters):
        ReserveState(last_update_time=2**32)


def test_accumulator_must_be_uint256() -> None:
    OracleAccumulator(cumulative_price0=UINT256_MODULUS - 1)
    with pytest.raises(InvalidParameters):
        OracleAccumulator(cumulative_price1=UINT256_MODULUS)


def test_constant_product() -> None:
    assert ReserveState(reserve0=3, reserve1=7).constant_product() == 21
