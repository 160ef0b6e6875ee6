"""
State records and in-memory ledgers for pairswap pools
"""

from .balances import ZERO_ADDRESS, BalanceTable
from .reserves import OracleAccumulator, PairState, ReserveState
from .shares import LOCKED_LIQUIDITY_ADDRESS, ShareTable

__all__ = [
    "ZERO_ADDRESS",
    "BalanceTable",
    "OracleAccumulator",
    "PairState",
    "ReserveState",
    "LOCKED_LIQUIDITY_ADDRESS",
    "ShareTable",
]
