"""
curvequote: deterministic constant-product quoting core.
"""

__version__ = "0.1.0"

from .core import ConstantProductCurve, SwapDirection, SwapQuote
from .core.cpmm import get_amount_in_for_exact_output, get_amount_out_from_exact_input
from .state import DEFAULT_FEE, FeeRate, PoolRef, PoolRegistry, PoolState

__all__ = [
    "ConstantProductCurve",
    "SwapDirection",
    "SwapQuote",
    "get_amount_in_for_exact_output",
    "get_amount_out_from_exact_input",
    "DEFAULT_FEE",
    "FeeRate",
    "PoolRef",
    "PoolRegistry",
    "PoolState",
]
