"""
Constant-product curve: the read-only query surface of the quoting core.

Each public call:
1. resolves (input, output, zero_for_one) to a pool and oriented reserves,
2. prices the trade with the pure CPMM functions,
3. records a quote event.

Pool storage is never written by either quoting path.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..state.pools import Address, Amount
from ..state.registry import PoolRegistry
from .cpmm import (
    SwapQuote,
    get_amount_in_for_exact_output,
    get_amount_out_from_exact_input,
    quote_exact_input,
    quote_exact_output,
)
from .direction import ResolvedSwap, resolve_swap
from .events import DEFAULT_MAX_EVENTS, Event, EventLog, QuoteEvent
from .version import VersionRecord


logger = logging.getLogger(__name__)


class ConstantProductCurve:
    """
    Quoting facade over a `PoolRegistry`.

    The version string is stored once at construction. No pools are created
    here; pool creation belongs to whoever owns the registry. Without an
    explicit `event_log` the curve keeps the last `DEFAULT_MAX_EVENTS` events.
    """

    def __init__(
        self,
        version: str,
        registry: Optional[PoolRegistry] = None,
        *,
        event_log: Optional[EventLog] = None,
    ) -> None:
        self._version = VersionRecord(version)
        self.registry = registry if registry is not None else PoolRegistry()
        self.events = event_log if event_log is not None else EventLog(max_events=DEFAULT_MAX_EVENTS)

    def version(self) -> str:
        return self._version.get()

    def resolve(self, input_token: Address, output_token: Address, zero_for_one: bool) -> ResolvedSwap:
        return resolve_swap(self.registry, input_token, output_token, zero_for_one)

    def get_amount_out_from_exact_input(
        self,
        amount_in: Amount,
        input_token: Address,
        output_token: Address,
        zero_for_one: bool,
    ) -> Amount:
        """
        Returns the amount of output tokens for an exact-input swap.

        Raises:
            IdenticalTokensError, PoolNotFoundError, DirectionMismatchError,
            InvalidAmountError, InsufficientLiquidityError, ArithmeticOverflowError
        """
        swap = self.resolve(input_token, output_token, zero_for_one)
        amount_out = get_amount_out_from_exact_input(amount_in, swap.reserve_in, swap.reserve_out, swap.fee)
        self._emit(Event.AMOUNT_OUT_CALCULATED, amount_in, swap)
        return amount_out

    def get_amount_in_for_exact_output(
        self,
        amount_out: Amount,
        input_token: Address,
        output_token: Address,
        zero_for_one: bool,
    ) -> Amount:
        """
        Returns the amount of input tokens for an exact-output swap.

        Raises:
            IdenticalTokensError, PoolNotFoundError, DirectionMismatchError,
            InvalidAmountError, InsufficientLiquidityError, ArithmeticOverflowError
        """
        swap = self.resolve(input_token, output_token, zero_for_one)
        amount_in = get_amount_in_for_exact_output(amount_out, swap.reserve_in, swap.reserve_out, swap.fee)
        self._emit(Event.AMOUNT_IN_CALCULATED, amount_out, swap)
        return amount_in

    def quote_exact_input(
        self, amount_in: Amount, input_token: Address, output_token: Address, zero_for_one: bool
    ) -> SwapQuote:
        """Like `get_amount_out_from_exact_input`, with post-trade reserves."""
        swap = self.resolve(input_token, output_token, zero_for_one)
        quote = quote_exact_input(amount_in, swap.reserve_in, swap.reserve_out, swap.fee)
        self._emit(Event.AMOUNT_OUT_CALCULATED, amount_in, swap)
        return quote

    def quote_exact_output(
        self, amount_out: Amount, input_token: Address, output_token: Address, zero_for_one: bool
    ) -> SwapQuote:
        """Like `get_amount_in_for_exact_output`, with post-trade reserves."""
        swap = self.resolve(input_token, output_token, zero_for_one)
        quote = quote_exact_output(amount_out, swap.reserve_in, swap.reserve_out, swap.fee)
        self._emit(Event.AMOUNT_IN_CALCULATED, amount_out, swap)
        return quote

    def _emit(self, event: Event, amount: Amount, swap: ResolvedSwap) -> None:
        self.events.emit(
            QuoteEvent(
                event=event,
                amount=amount,
                input=swap.token_in,
                output=swap.token_out,
                zero_for_one=swap.direction.zero_for_one,
            )
        )
        logger.debug("%s pool_id=%s amount=%d", event.value, swap.pool.pool_id, amount)
