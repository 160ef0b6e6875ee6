"""
Core pool engine: reserve/oracle commit, liquidity issuance, swaps, fees
"""

from .collaborators import InMemoryAssets, ManualClock, OpenGate, StaticGate, SystemClock, atomic_scope
from .events import Event, FeesUpdated, LiquidityAdded, LiquidityRemoved, ReservesSynced, SwapExecuted
from .fees import MAX_SWAP_FEE_BPS, FeeConfig
from .guards import ReentrancyGuard, check_deadline
from .oracle import OracleObservation, PriceSample, commit, consult_twap, current_cumulative_prices
from .pool import DepositResult, Pool, SwapQuote, SwapResult, WithdrawResult

__all__ = [
    "InMemoryAssets",
    "ManualClock",
    "OpenGate",
    "StaticGate",
    "SystemClock",
    "atomic_scope",
    "Event",
    "FeesUpdated",
    "LiquidityAdded",
    "LiquidityRemoved",
    "ReservesSynced",
    "SwapExecuted",
    "MAX_SWAP_FEE_BPS",
    "FeeConfig",
    "ReentrancyGuard",
    "check_deadline",
    "OracleObservation",
    "PriceSample",
    "commit",
    "consult_twap",
    "current_cumulative_prices",
    "DepositResult",
    "Pool",
    "SwapQuote",
    "SwapResult",
    "WithdrawResult",
]
