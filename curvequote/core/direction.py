"""
Swap direction and per-call swap resolution.

A quote call names its tokens twice: once by address (input, output) and once
by the `zero_for_one` flag. Both are reconciled exactly once, here, into a
`ResolvedSwap` whose `(reserve_in, reserve_out)` is always
(reserve of the token sold, reserve of the token paid out). The pricing
functions only ever see the oriented reserves.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Tuple

from ..errors import DirectionMismatchError
from ..state.pools import Address, Amount, FeeRate, ReserveSnapshot
from ..state.registry import PoolRef, PoolRegistry


@unique
class SwapDirection(Enum):
    ZERO_FOR_ONE = "zero_for_one"
    ONE_FOR_ZERO = "one_for_zero"

    @classmethod
    def from_flag(cls, zero_for_one: bool) -> "SwapDirection":
        if not isinstance(zero_for_one, bool):
            raise TypeError("zero_for_one must be a bool")
        return cls.ZERO_FOR_ONE if zero_for_one else cls.ONE_FOR_ZERO

    @property
    def zero_for_one(self) -> bool:
        return self is SwapDirection.ZERO_FOR_ONE

    def inverted(self) -> "SwapDirection":
        if self is SwapDirection.ZERO_FOR_ONE:
            return SwapDirection.ONE_FOR_ZERO
        return SwapDirection.ZERO_FOR_ONE

    def orient(self, reserves: ReserveSnapshot) -> Tuple[Amount, Amount]:
        """Return (reserve_in, reserve_out) for this direction."""
        if self is SwapDirection.ZERO_FOR_ONE:
            return reserves.reserve0, reserves.reserve1
        return reserves.reserve1, reserves.reserve0


@dataclass(frozen=True)
class ResolvedSwap:
    pool: PoolRef
    direction: SwapDirection
    token_in: Address
    token_out: Address
    reserve_in: Amount
    reserve_out: Amount
    fee: FeeRate


def resolve_swap(
    registry: PoolRegistry,
    input_token: Address,
    output_token: Address,
    zero_for_one: bool,
) -> ResolvedSwap:
    """
    Resolve (input, output, zero_for_one) to a pool and oriented reserves.

    Raises:
        IdenticalTokensError: if input_token == output_token
        PoolNotFoundError: if the pair has no pool
        DirectionMismatchError: if `zero_for_one` contradicts the token order
    """
    requested = SwapDirection.from_flag(zero_for_one)
    pool_ref, input_is_token0 = registry.resolve_pool(input_token, output_token)
    resolved = SwapDirection.from_flag(input_is_token0)
    if requested is not resolved:
        raise DirectionMismatchError(
            f"zero_for_one={zero_for_one} but input token is "
            f"{'token0' if input_is_token0 else 'token1'} of pool {pool_ref.pool_id}"
        )

    # One read of pool storage per call; everything below works on this snapshot.
    pool = registry.get_pool(pool_ref)
    reserve_in, reserve_out = resolved.orient(pool.reserves())
    if resolved is SwapDirection.ZERO_FOR_ONE:
        token_in, token_out = pool.token0, pool.token1
    else:
        token_in, token_out = pool.token1, pool.token0
    return ResolvedSwap(
        pool=pool_ref,
        direction=resolved,
        token_in=token_in,
        token_out=token_out,
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        fee=pool.fee,
    )
