"""
Pure integer kernels: fixed-point math, swap pricing, liquidity share math.
"""

from .cpmm_swap import FEE_DENOMINATOR, SwapExactInResult, get_amount_in, get_amount_out, quote, swap_exact_in
from .fixed_point import Q112, UINT112_MAX, decode_uq112, price_uq112
from .lp_math import (
    MINIMUM_LIQUIDITY,
    BurnLiquidityResult,
    OptimalLiquidityResult,
    burn_liquidity,
    mint_liquidity,
    mint_liquidity_initial,
    optimal_liquidity,
)

__all__ = [
    "FEE_DENOMINATOR",
    "SwapExactInResult",
    "get_amount_in",
    "get_amount_out",
    "quote",
    "swap_exact_in",
    "Q112",
    "UINT112_MAX",
    "decode_uq112",
    "price_uq112",
    "MINIMUM_LIQUIDITY",
    "BurnLiquidityResult",
    "OptimalLiquidityResult",
    "burn_liquidity",
    "mint_liquidity",
    "mint_liquidity_initial",
    "optimal_liquidity",
]
