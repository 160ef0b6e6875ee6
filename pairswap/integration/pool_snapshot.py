"""
Pool state snapshot encoding.

Goals:
- Deterministic JSON serialization for hashing / snapshot distribution.
- Round-trippable into `PairState` + `FeeConfig` to rebuild a `Pool`.
- Explicit versioning.

Accumulators are stored as decimal strings: they are uint256 values and many
JSON consumers cannot hold integers that wide.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

from ..core.fees import FeeConfig
from ..core.pool import Pool
from ..state.reserves import OracleAccumulator, PairState, ReserveState


POOL_SNAPSHOT_VERSION = 1
COMMITMENT_DOMAIN = b"pairswap:pool_snapshot"


def _require_str(value: Any, *, name: str, max_len: int = 4096) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    if not value:
        raise ValueError(f"{name} must be non-empty")
    if len(value) > max_len:
        raise ValueError(f"{name} too large")
    return value


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


def _require_decimal(value: Any, *, name: str) -> int:
    s = _require_str(value, name=name, max_len=80)
    if not s.isdigit():
        raise ValueError(f"{name} must be a decimal string")
    return int(s, 10)


def encode_record(record: Mapping[str, Any]) -> bytes:
    """
    Deterministic bytes for a flat record of int and str fields.

    Keys are sorted, separators carry no whitespace and output is ASCII-only,
    so equal records always hash equally. Nested values, floats and bools are
    refused.
    """
    for key, value in record.items():
        if not isinstance(key, str):
            raise TypeError("record keys must be strings")
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise TypeError(f"{key} must be an int or a string, got {type(value).__name__}")
    return json.dumps(dict(record), sort_keys=True, separators=(",", ":"), ensure_ascii=True).encode("ascii")


@dataclass(frozen=True)
class PoolSnapshot:
    """
    Deterministic, versioned snapshot of one pool.

    The commitment is *not* included inside `data` to avoid self-reference.
    """

    version: int
    data: Dict[str, Any]

    @classmethod
    def from_pool(cls, pool: Pool, *, version: int = POOL_SNAPSHOT_VERSION) -> "PoolSnapshot":
        if version != POOL_SNAPSHOT_VERSION:
            raise ValueError(f"unsupported snapshot version: {version}")
        r = pool.reserves
        o = pool.oracle
        fees = pool.fee_config
        return cls(
            version=version,
            data={
                "address": pool.address,
                "asset0": pool.asset0,
                "asset1": pool.asset1,
                "reserve0": int(r.reserve0),
                "reserve1": int(r.reserve1),
                "last_update_time": int(r.last_update_time),
                "cumulative_price0": str(o.cumulative_price0),
                "cumulative_price1": str(o.cumulative_price1),
                "swap_fee_bps": int(fees.swap_fee_bps),
                "protocol_share_bps": int(fees.protocol_share_bps),
                "protocol_recipient": fees.protocol_recipient,
                "total_supply": int(pool.total_supply()),
            },
        )

    def canonical_bytes(self) -> bytes:
        return encode_record(self.data)

    def commitment_bytes(self) -> bytes:
        # NUL-terminated domain tag keeps the prefix unambiguous.
        prefix = COMMITMENT_DOMAIN + b":v" + str(self.version).encode("ascii") + b"\x00"
        return hashlib.sha256(prefix + self.canonical_bytes()).digest()

    def commitment_hex(self) -> str:
        return "0x" + self.commitment_bytes().hex()

    def to_dict(self) -> Dict[str, Any]:
        return {"version": self.version, "data": dict(self.data)}


def snapshot_from_dict(obj: Mapping[str, Any]) -> PoolSnapshot:
    """Parse and validate a snapshot produced by `PoolSnapshot.to_dict()`."""
    if not isinstance(obj, Mapping):
        raise TypeError("snapshot must be a mapping")
    version = _require_int(obj.get("version"), name="version")
    if version != POOL_SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version: {version}")
    data = obj.get("data")
    if not isinstance(data, Mapping):
        raise TypeError("snapshot data must be a mapping")

    clean: Dict[str, Any] = {
        "address": _require_str(data.get("address"), name="address"),
        "asset0": _require_str(data.get("asset0"), name="asset0"),
        "asset1": _require_str(data.get("asset1"), name="asset1"),
        "reserve0": _require_int(data.get("reserve0"), name="reserve0"),
        "reserve1": _require_int(data.get("reserve1"), name="reserve1"),
        "last_update_time": _require_int(data.get("last_update_time"), name="last_update_time"),
        "cumulative_price0": str(_require_decimal(data.get("cumulative_price0"), name="cumulative_price0")),
        "cumulative_price1": str(_require_decimal(data.get("cumulative_price1"), name="cumulative_price1")),
        "swap_fee_bps": _require_int(data.get("swap_fee_bps"), name="swap_fee_bps"),
        "protocol_share_bps": _require_int(data.get("protocol_share_bps"), name="protocol_share_bps"),
        "protocol_recipient": _require_str(data.get("protocol_recipient"), name="protocol_recipient"),
        "total_supply": _require_int(data.get("total_supply"), name="total_supply"),
    }
    return PoolSnapshot(version=version, data=clean)


def snapshot_to_state(snapshot: PoolSnapshot) -> Tuple[PairState, FeeConfig]:
    """Rebuild the pool's reserve/oracle state and fee configuration."""
    d = snapshot.data
    state = PairState(
        reserves=ReserveState(
            reserve0=d["reserve0"],
            reserve1=d["reserve1"],
            last_update_time=d["last_update_time"],
        ),
        oracle=OracleAccumulator(
            cumulative_price0=int(d["cumulative_price0"]),
            cumulative_price1=int(d["cumulative_price1"]),
        ),
    )
    fees = FeeConfig(
        swap_fee_bps=d["swap_fee_bps"],
        protocol_share_bps=d["protocol_share_bps"],
        protocol_recipient=d["protocol_recipient"],
    )
    return state, fees
