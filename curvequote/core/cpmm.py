"""
Constant Product Market Maker (CPMM) quoting.

This module implements the two pricing functions of the quoting core with
deterministic rounding rules that always favor the pool.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per quote
- Space Complexity: O(1) auxiliary
- Invariant: For a quoted trade applied to the reserves,
  (reserve_in + amount_in) * (reserve_out - amount_out) >= reserve_in * reserve_out

All functions are pure: they take the oriented reserves and the pool fee as
plain values and never read or write pool storage.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import InsufficientLiquidityError, InvalidAmountError, InvariantViolationError
from ..kernels.python.full_math import (
    checked_add,
    checked_sub,
    div_wide,
    div_wide_rounding_up,
    require_uint256,
)
from ..state.pools import Amount, FeeRate


logger = logging.getLogger(__name__)


def _require_fee(fee: FeeRate) -> FeeRate:
    if not isinstance(fee, FeeRate):
        raise TypeError("fee must be a FeeRate")
    return fee


def get_amount_out_from_exact_input(
    amount_in: Amount,
    reserve_in: Amount,
    reserve_out: Amount,
    fee: FeeRate,
) -> Amount:
    """
    Compute the output amount for an exact-input swap.

    Formula:
        amount_in_with_fee = amount_in * fee.numerator
        amount_out = floor(amount_in_with_fee * reserve_out
                           / (reserve_in * fee.denominator + amount_in_with_fee))

    Intermediates are unbounded ints; only the operands have to fit uint256.
    The result is strictly less than `reserve_out`, so it always fits.

    Args:
        amount_in: Exact input amount
        reserve_in: Reserve of the token being sold
        reserve_out: Reserve of the token being bought
        fee: Pool fee rate

    Returns:
        Output amount (floor-rounded)

    Raises:
        InvalidAmountError: If amount_in == 0
        InsufficientLiquidityError: If either reserve is empty
        ArithmeticOverflowError: If an operand is outside uint256
    """
    require_uint256("amount_in", amount_in)
    require_uint256("reserve_in", reserve_in)
    require_uint256("reserve_out", reserve_out)
    _require_fee(fee)

    if amount_in == 0:
        raise InvalidAmountError("amount_in must be positive")
    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientLiquidityError(
            f"cannot swap against an empty reserve: ({reserve_in}, {reserve_out})"
        )

    amount_in_with_fee = amount_in * fee.numerator
    denominator = reserve_in * fee.denominator + amount_in_with_fee
    amount_out = div_wide(amount_in_with_fee * reserve_out, denominator)

    logger.debug(
        "exact-in quote amount_in=%d reserves=(%d, %d) fee=%d/%d -> amount_out=%d",
        amount_in,
        reserve_in,
        reserve_out,
        fee.numerator,
        fee.denominator,
        amount_out,
    )
    return amount_out


def get_amount_in_for_exact_output(
    amount_out: Amount,
    reserve_in: Amount,
    reserve_out: Amount,
    fee: FeeRate,
) -> Amount:
    """
    Compute the input amount required for an exact-output swap.

    Formula:
        amount_in = ceil(reserve_in * amount_out * fee.denominator
                         / ((reserve_out - amount_out) * fee.numerator))

    Rounding up means the protocol never under-charges: feeding the result
    back into `get_amount_out_from_exact_input` yields at least `amount_out`.

    Raises:
        InvalidAmountError: If amount_out == 0
        InsufficientLiquidityError: If a reserve is empty or amount_out >= reserve_out
        ArithmeticOverflowError: If an operand or the required input is outside uint256
    """
    require_uint256("amount_out", amount_out)
    require_uint256("reserve_in", reserve_in)
    require_uint256("reserve_out", reserve_out)
    _require_fee(fee)

    if amount_out == 0:
        raise InvalidAmountError("amount_out must be positive")
    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientLiquidityError(
            f"cannot swap against an empty reserve: ({reserve_in}, {reserve_out})"
        )
    if amount_out >= reserve_out:
        raise InsufficientLiquidityError(
            f"Cannot drain full reserve: amount_out ({amount_out}) >= reserve_out ({reserve_out})"
        )

    numerator = reserve_in * amount_out * fee.denominator
    denominator = (reserve_out - amount_out) * fee.numerator
    amount_in = div_wide_rounding_up(numerator, denominator)

    logger.debug(
        "exact-out quote amount_out=%d reserves=(%d, %d) fee=%d/%d -> amount_in=%d",
        amount_out,
        reserve_in,
        reserve_out,
        fee.numerator,
        fee.denominator,
        amount_in,
    )
    return amount_in


@dataclass(frozen=True)
class SwapQuote:
    """
    A quote together with the reserves it would leave behind.

    `new_reserve_*` describe the pool *if* a settlement collaborator applied
    the trade; nothing is written anywhere.
    """

    amount_in: Amount
    amount_out: Amount
    reserve_in: Amount
    reserve_out: Amount
    new_reserve_in: Amount
    new_reserve_out: Amount
    k_before: int
    k_after: int


def _finish_quote(amount_in: Amount, amount_out: Amount, reserve_in: Amount, reserve_out: Amount) -> SwapQuote:
    new_reserve_in = checked_add(reserve_in, amount_in)
    new_reserve_out = checked_sub(reserve_out, amount_out)
    k_before = reserve_in * reserve_out
    k_after = new_reserve_in * new_reserve_out
    if k_after < k_before:
        raise InvariantViolationError(k_before, k_after)
    return SwapQuote(
        amount_in=amount_in,
        amount_out=amount_out,
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=k_after,
    )


def quote_exact_input(amount_in: Amount, reserve_in: Amount, reserve_out: Amount, fee: FeeRate) -> SwapQuote:
    """
    Exact-input quote plus hypothetical post-trade reserves.

    Raises ArithmeticOverflowError when `reserve_in + amount_in` leaves uint256,
    even though the bare quote would succeed.
    """
    amount_out = get_amount_out_from_exact_input(amount_in, reserve_in, reserve_out, fee)
    return _finish_quote(amount_in, amount_out, reserve_in, reserve_out)


def quote_exact_output(amount_out: Amount, reserve_in: Amount, reserve_out: Amount, fee: FeeRate) -> SwapQuote:
    """Exact-output quote plus hypothetical post-trade reserves."""
    amount_in = get_amount_in_for_exact_output(amount_out, reserve_in, reserve_out, fee)
    return _finish_quote(amount_in, amount_out, reserve_in, reserve_out)
