"""
Pool configuration.

A `PoolConfig` can be built from a mapping, loaded from YAML, and adjusted with
environment overrides:

    pool:
      address: "0x00000000000000000000000000000000000000aa"
      asset0: "0xasset-a"
      asset1: "0xasset-b"
    fees:
      swap_fee_bps: 30
      protocol_share_bps: 1667
      protocol_recipient: "0x00000000000000000000000000000000000000fe"
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .core.fees import DEFAULT_PROTOCOL_SHARE_BPS, DEFAULT_SWAP_FEE_BPS, FeeConfig
from .core.pool import check_asset_pair
from .errors import InvalidParameters, ZeroAddress
from .state.balances import Address, AssetId, is_null_address

logger = logging.getLogger(__name__)

ENV_SWAP_FEE_BPS = "PAIRSWAP_SWAP_FEE_BPS"
ENV_PROTOCOL_SHARE_BPS = "PAIRSWAP_PROTOCOL_SHARE_BPS"
ENV_PROTOCOL_RECIPIENT = "PAIRSWAP_PROTOCOL_RECIPIENT"


@dataclass(frozen=True)
class PoolConfig:
    address: Address
    asset0: AssetId
    asset1: AssetId
    fees: FeeConfig

    def __post_init__(self) -> None:
        if is_null_address(self.address):
            raise ZeroAddress("pool address must be set")
        check_asset_pair(self.asset0, self.asset1)


def _require_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    if not value.strip():
        raise InvalidParameters(f"{name} must be non-empty")
    return value.strip()


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    return int(value)


def pool_config_from_mapping(obj: Mapping[str, Any]) -> PoolConfig:
    if not isinstance(obj, Mapping):
        raise TypeError("pool config must be a mapping")
    pool = obj.get("pool")
    if not isinstance(pool, Mapping):
        raise TypeError("pool config requires a 'pool' mapping")
    fees = obj.get("fees") or {}
    if not isinstance(fees, Mapping):
        raise TypeError("'fees' must be a mapping")

    fee_config = FeeConfig(
        swap_fee_bps=_require_int(fees.get("swap_fee_bps", DEFAULT_SWAP_FEE_BPS), name="fees.swap_fee_bps"),
        protocol_share_bps=_require_int(
            fees.get("protocol_share_bps", DEFAULT_PROTOCOL_SHARE_BPS), name="fees.protocol_share_bps"
        ),
        protocol_recipient=_require_str(fees.get("protocol_recipient"), name="fees.protocol_recipient"),
    )
    return PoolConfig(
        address=_require_str(pool.get("address"), name="pool.address"),
        asset0=_require_str(pool.get("asset0"), name="pool.asset0"),
        asset1=_require_str(pool.get("asset1"), name="pool.asset1"),
        fees=fee_config,
    )


def load_pool_config(path: Path | str) -> PoolConfig:
    """Load a `PoolConfig` from a YAML file."""
    p = Path(path)
    obj = yaml.safe_load(p.read_text(encoding="utf-8"))
    if not isinstance(obj, Mapping):
        raise TypeError("pool config YAML must be a mapping")
    config = pool_config_from_mapping(obj)
    logger.debug("Loaded pool config", extra={"event": "config.load", "path": str(p), "pool": config.address})
    return config


def _int_env(environ: Mapping[str, str], name: str) -> Optional[int]:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip(), 10)
    except ValueError as exc:
        raise InvalidParameters(f"{name} must be a base-10 integer: {raw!r}") from exc


def apply_env_overrides(config: PoolConfig, environ: Optional[Mapping[str, str]] = None) -> PoolConfig:
    """Override fee fields from PAIRSWAP_* environment variables, when set."""
    env = os.environ if environ is None else environ
    swap_fee_bps = _int_env(env, ENV_SWAP_FEE_BPS)
    protocol_share_bps = _int_env(env, ENV_PROTOCOL_SHARE_BPS)
    recipient = (env.get(ENV_PROTOCOL_RECIPIENT) or "").strip() or None

    if swap_fee_bps is None and protocol_share_bps is None and recipient is None:
        return config

    fees = FeeConfig(
        swap_fee_bps=config.fees.swap_fee_bps if swap_fee_bps is None else swap_fee_bps,
        protocol_share_bps=config.fees.protocol_share_bps if protocol_share_bps is None else protocol_share_bps,
        protocol_recipient=config.fees.protocol_recipient if recipient is None else recipient,
    )
    return replace(config, fees=fees)
