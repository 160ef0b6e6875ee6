from __future__ import annotations

import json

import pytest

from pairswap.config import PoolConfig
from pairswap.core.fees import FeeConfig
from pairswap.core.sandbox import create_sandbox
from pairswap.integration.pool_snapshot import PoolSnapshot, encode_record, snapshot_from_dict, snapshot_to_state

POOL = "0x" + "aa" * 20
ASSET0 = "0x" + "11" * 32
ASSET1 = "0x" + "22" * 32
LP = "0x" + "01" * 20
TRADER = "0x" + "02" * 20
DEADLINE = 10**9


def _config() -> PoolConfig:
    fees = FeeConfig(swap_fee_bps=30, protocol_share_bps=1_667, protocol_recipient="0x" + "fe" * 20)
    return PoolConfig(address=POOL, asset0=ASSET0, asset1=ASSET1, fees=fees)


def _traded():
    sb = create_sandbox(_config())
    sb.fund(LP, ASSET0, 10_000)
    sb.fund(LP, ASSET1, 20_000)
    sb.fund(TRADER, ASSET0, 1_000)
    sb.clock.set(10)
    sb.pool.deposit(LP, 10_000, 20_000, 0, 0, LP, DEADLINE)
    sb.clock.set(25)
    sb.pool.swap(TRADER, ASSET0, 1_000, 1, TRADER, DEADLINE)
    return sb


def test_snapshot_roundtrip_is_deterministic() -> None:
    sb = _traded()
    snap1 = PoolSnapshot.from_pool(sb.pool)
    wire = json.loads(json.dumps(snap1.to_dict()))
    snap2 = snapshot_from_dict(wire)

    assert snap1.canonical_bytes() == snap2.canonical_bytes()
    assert snap1.commitment_hex() == snap2.commitment_hex()
    assert snap1.commitment_hex() == "0x" + snap1.commitment_bytes().hex()


def test_accumulators_are_decimal_strings() -> None:
    snap = PoolSnapshot.from_pool(_traded().pool)
    assert isinstance(snap.data["cumulative_price0"], str)
    assert int(snap.data["cumulative_price0"]) > 0


def test_snapshot_rebuilds_pool_state() -> None:
    sb = _traded()
    state, fees = snapshot_to_state(PoolSnapshot.from_pool(sb.pool))

    assert state == sb.pool.state
    assert fees == sb.pool.fee_config


def test_commitment_changes_with_state() -> None:
    sb = _traded()
    before = PoolSnapshot.from_pool(sb.pool).commitment_hex()
    sb.clock.set(40)
    sb.pool.sync(LP)
    assert PoolSnapshot.from_pool(sb.pool).commitment_hex() != before


def test_snapshot_from_dict_rejects_bad_input() -> None:
    good = PoolSnapshot.from_pool(_traded().pool).to_dict()

    with pytest.raises(ValueError, match="version"):
        snapshot_from_dict({**good, "version": 2})

    bad_acc = {**good, "data": {**good["data"], "cumulative_price0": "-1"}}
    with pytest.raises(ValueError, match="decimal"):
        snapshot_from_dict(bad_acc)

    bad_reserve = {**good, "data": {**good["data"], "reserve0": "10"}}
    with pytest.raises(TypeError):
        snapshot_from_dict(bad_reserve)


def test_record_encoding_is_key_order_independent() -> None:
    assert encode_record({"b": 1, "a": "x"}) == encode_record({"a": "x", "b": 1})
    assert encode_record({"b": 1, "a": 2}) == b'{"a":2,"b":1}'


def test_record_encoding_is_ascii_only() -> None:
    assert encode_record({"asset": "café"}) == b'{"asset":"caf\\u00e9"}'


@pytest.mark.parametrize("value", [1.5, True, None, [1], {"x": 1}])
def test_record_encoding_refuses_non_flat_values(value) -> None:
    with pytest.raises(TypeError):
        encode_record({"x": value})


def test_commitment_is_domain_separated_by_version() -> None:
    snap = PoolSnapshot.from_pool(_traded().pool)
    other = PoolSnapshot(version=2, data=snap.data)
    assert snap.canonical_bytes() == other.canonical_bytes()
    assert snap.commitment_hex() != other.commitment_hex()
    assert len(snap.commitment_hex()) == 66
