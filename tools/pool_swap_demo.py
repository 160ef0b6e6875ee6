#!/usr/bin/env python3
"""Offline walk-through: seed a pool, trade against it, read the TWAP, withdraw."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pairswap.config import PoolConfig, apply_env_overrides, load_pool_config
from pairswap.core.fees import FeeConfig
from pairswap.core.oracle import PriceSample, consult_twap
from pairswap.core.sandbox import create_sandbox
from pairswap.integration.pool_snapshot import PoolSnapshot
from pairswap.kernels.fixed_point import decode_uq112


def _default_config() -> PoolConfig:
    return PoolConfig(
        address="0x" + "aa" * 20,
        asset0="0x" + "11" * 32,
        asset1="0x" + "22" * 32,
        fees=FeeConfig(swap_fee_bps=30, protocol_share_bps=1_667, protocol_recipient="0x" + "fe" * 20),
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", type=Path, default=None, help="pool config YAML (defaults to a built-in pair)")
    parser.add_argument("--amount-in", type=int, default=1_000, help="asset0 sold in the demo swap")
    parser.add_argument("--verbose", action="store_true", help="log pool operations to stderr")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = load_pool_config(args.config) if args.config is not None else _default_config()
    config = apply_env_overrides(config)

    sb = create_sandbox(config)
    pool = sb.pool
    lp = "0x" + "01" * 20
    trader = "0x" + "02" * 20
    sb.fund(lp, config.asset0, 10_000)
    sb.fund(lp, config.asset1, 20_000)
    sb.fund(trader, config.asset0, args.amount_in)

    sb.clock.set(10)
    dep = pool.deposit(lp, 10_000, 20_000, 0, 0, lp, deadline=100)
    print(f"[demo] deposit: amounts=({dep.amount0}, {dep.amount1}) shares={dep.shares} supply={pool.total_supply()}")
    start = pool.observe()

    sb.clock.set(20)
    swap = pool.swap(trader, config.asset0, args.amount_in, 1, trader, deadline=100)
    print(f"[demo] swap: in={swap.amount_in} out={swap.amount_out} protocol_fee={swap.protocol_fee}")
    r0, r1, ts = pool.get_reserves()
    print(f"[demo] reserves after swap: reserve0={r0} reserve1={r1} t={ts}")

    sb.clock.set(30)
    end = pool.observe()
    twap = consult_twap(
        PriceSample(start.cumulative_price0, start.timestamp),
        PriceSample(end.cumulative_price0, end.timestamp),
    )
    print(f"[demo] twap asset0 in asset1 over [{start.timestamp}, {end.timestamp}]: {float(decode_uq112(twap)):.6f}")

    out = pool.withdraw(lp, dep.shares, 0, 0, lp, deadline=100)
    print(f"[demo] withdraw: amounts=({out.amount0}, {out.amount1}) shares={out.shares}")
    print(f"[demo] snapshot commitment: {PoolSnapshot.from_pool(pool).commitment_hex()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
