"""
Quote events.

A curve records one event per successful quote, mirroring the log entries a
contract emits. Events live in an append-only `EventLog`, separate from pool
storage, so emitting them does not count as a state change of the pool.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Dict, Iterator, List, Optional

from ..state.pools import Address, Amount


DEFAULT_MAX_EVENTS = 10_000


@unique
class Event(Enum):
    AMOUNT_OUT_CALCULATED = "AmountOutCalculated"
    AMOUNT_IN_CALCULATED = "AmountInCalculated"


@dataclass(frozen=True)
class QuoteEvent:
    """
    `amount` is the caller-supplied side of the quote: `amount_in` for
    AmountOutCalculated, `amount_out` for AmountInCalculated.
    """

    event: Event
    amount: Amount
    input: Address
    output: Address
    zero_for_one: bool

    def to_dict(self) -> Dict[str, Any]:
        amount_key = "amount_in" if self.event is Event.AMOUNT_OUT_CALCULATED else "amount_out"
        return {
            "event": self.event.value,
            amount_key: int(self.amount),
            "input": self.input,
            "output": self.output,
            "zero_for_one": bool(self.zero_for_one),
        }


class EventLog:
    """
    Append-only list of quote events.

    With `max_events` set, the oldest events are dropped past the cap;
    `None` keeps everything.
    """

    def __init__(self, *, max_events: Optional[int] = None) -> None:
        if max_events is not None and (not isinstance(max_events, int) or max_events <= 0):
            raise ValueError("max_events must be a positive int")
        self._max_events = max_events
        self._events: List[QuoteEvent] = []

    @property
    def max_events(self) -> Optional[int]:
        return self._max_events

    def emit(self, event: QuoteEvent) -> None:
        self._events.append(event)
        if self._max_events is not None and len(self._events) > self._max_events:
            del self._events[0 : len(self._events) - self._max_events]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[QuoteEvent]:
        return iter(list(self._events))

    def last(self) -> Optional[QuoteEvent]:
        return self._events[-1] if self._events else None

    def clear(self) -> None:
        self._events.clear()
