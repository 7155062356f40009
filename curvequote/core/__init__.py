"""
Core quoting algorithms
"""

from .cpmm import (
    SwapQuote,
    get_amount_in_for_exact_output,
    get_amount_out_from_exact_input,
    quote_exact_input,
    quote_exact_output,
)
from .curve import ConstantProductCurve
from .direction import ResolvedSwap, SwapDirection, resolve_swap
from .events import Event, EventLog, QuoteEvent
from .version import VersionRecord

__all__ = [
    "SwapQuote",
    "get_amount_in_for_exact_output",
    "get_amount_out_from_exact_input",
    "quote_exact_input",
    "quote_exact_output",
    "ConstantProductCurve",
    "ResolvedSwap",
    "SwapDirection",
    "resolve_swap",
    "Event",
    "EventLog",
    "QuoteEvent",
    "VersionRecord",
]
