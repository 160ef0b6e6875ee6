"""
pairswap: a two-asset constant-product pool engine.

Integer-only reserve/invariant math, proportional liquidity shares, fee-bearing
swaps and a 256-bit cumulative-price oracle for TWAP consumers.
"""

from .config import PoolConfig, apply_env_overrides, load_pool_config, pool_config_from_mapping
from .core import FeeConfig, ManualClock, Pool, consult_twap
from .core.sandbox import Sandbox, create_sandbox
from .errors import PoolError
from .kernels import FEE_DENOMINATOR, MINIMUM_LIQUIDITY

__all__ = [
    "PoolConfig",
    "apply_env_overrides",
    "load_pool_config",
    "pool_config_from_mapping",
    "FeeConfig",
    "ManualClock",
    "Pool",
    "consult_twap",
    "Sandbox",
    "create_sandbox",
    "PoolError",
    "FEE_DENOMINATOR",
    "MINIMUM_LIQUIDITY",
]
