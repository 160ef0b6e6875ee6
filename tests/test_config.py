from __future__ import annotations

from pathlib import Path

import pytest

from pairswap.config import (
    ENV_PROTOCOL_RECIPIENT,
    ENV_PROTOCOL_SHARE_BPS,
    ENV_SWAP_FEE_BPS,
    PoolConfig,
    apply_env_overrides,
    load_pool_config,
    pool_config_from_mapping,
)
from pairswap.core.fees import DEFAULT_SWAP_FEE_BPS, FeeConfig
from pairswap.errors import FeeTooHigh, InvalidParameters, ZeroAddress

YAML_CONFIG = """\
pool:
  address: "0x00000000000000000000000000000000000000aa"
  asset0: "0xasset-a"
  asset1: "0xasset-b"
fees:
  swap_fee_bps: 25
  protocol_share_bps: 1667
  protocol_recipient: "0x00000000000000000000000000000000000000fe"
"""


def _write(tmp_path: Path, text: str) -> Path:
    p = tmp_path / "pool.yaml"
    p.write_text(text, encoding="utf-8")
    return p


def test_load_pool_config_from_yaml(tmp_path: Path) -> None:
    cfg = load_pool_config(_write(tmp_path, YAML_CONFIG))
    assert cfg.address == "0x00000000000000000000000000000000000000aa"
    assert (cfg.asset0, cfg.asset1) == ("0xasset-a", "0xasset-b")
    assert cfg.fees == FeeConfig(
        swap_fee_bps=25,
        protocol_share_bps=1_667,
        protocol_recipient="0x00000000000000000000000000000000000000fe",
    )


def test_fee_defaults_apply() -> None:
    cfg = pool_config_from_mapping(
        {
            "pool": {"address": "0xpool", "asset0": "a", "asset1": "b"},
            "fees": {"protocol_recipient": "0xfee"},
        }
    )
    assert cfg.fees.swap_fee_bps == DEFAULT_SWAP_FEE_BPS
    assert cfg.fees.protocol_share_bps == 0


def test_assets_must_be_in_canonical_order() -> None:
    with pytest.raises(InvalidParameters, match="canonical order"):
        pool_config_from_mapping(
            {"pool": {"address": "0xpool", "asset0": "b", "asset1": "a"}, "fees": {"protocol_recipient": "0xfee"}}
        )


def test_missing_sections_rejected(tmp_path: Path) -> None:
    with pytest.raises(TypeError, match="'pool'"):
        pool_config_from_mapping({"fees": {}})
    with pytest.raises(TypeError, match="mapping"):
        load_pool_config(_write(tmp_path, "- just\n- a list\n"))


def test_fee_above_cap_rejected_at_load(tmp_path: Path) -> None:
    with pytest.raises(FeeTooHigh):
        load_pool_config(_write(tmp_path, YAML_CONFIG.replace("swap_fee_bps: 25", "swap_fee_bps: 5000")))


def test_env_overrides_replace_fee_fields(tmp_path: Path) -> None:
    cfg = load_pool_config(_write(tmp_path, YAML_CONFIG))
    env = {ENV_SWAP_FEE_BPS: "10", ENV_PROTOCOL_SHARE_BPS: " 0 ", ENV_PROTOCOL_RECIPIENT: "0xnew"}
    out = apply_env_overrides(cfg, env)

    assert out.fees == FeeConfig(swap_fee_bps=10, protocol_share_bps=0, protocol_recipient="0xnew")
    assert out.address == cfg.address
    assert cfg.fees.swap_fee_bps == 25


def test_env_overrides_absent_is_identity(tmp_path: Path) -> None:
    cfg = load_pool_config(_write(tmp_path, YAML_CONFIG))
    assert apply_env_overrides(cfg, {ENV_SWAP_FEE_BPS: "  "}) is cfg


def test_env_overrides_read_process_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg = load_pool_config(_write(tmp_path, YAML_CONFIG))
    monkeypatch.setenv(ENV_SWAP_FEE_BPS, "42")
    assert apply_env_overrides(cfg).fees.swap_fee_bps == 42


def test_env_overrides_validate_values(tmp_path: Path) -> None:
    cfg = load_pool_config(_write(tmp_path, YAML_CONFIG))
    with pytest.raises(InvalidParameters, match="base-10"):
        apply_env_overrides(cfg, {ENV_SWAP_FEE_BPS: "thirty"})
    with pytest.raises(FeeTooHigh):
        apply_env_overrides(cfg, {ENV_SWAP_FEE_BPS: "1001"})


def test_pool_address_required() -> None:
    fees = FeeConfig(swap_fee_bps=30, protocol_share_bps=0, protocol_recipient="0xfee")
    with pytest.raises(ZeroAddress):
        PoolConfig(address="", asset0="a", asset1="b", fees=fees)
