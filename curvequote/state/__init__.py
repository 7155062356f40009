"""
Pool state for the quoting core
"""

from .pools import DEFAULT_FEE, FeeRate, PoolState, ReserveSnapshot, compute_pool_id, sort_tokens
from .registry import PoolRef, PoolRegistry

__all__ = [
    "DEFAULT_FEE",
    "FeeRate",
    "PoolState",
    "ReserveSnapshot",
    "compute_pool_id",
    "sort_tokens",
    "PoolRef",
    "PoolRegistry",
]
