"""
uint256 fixed-point arithmetic kernel.

Every value entering or leaving this module is an unsigned 256-bit integer.
Intermediate products are computed with Python's arbitrary-precision ints,
which act as the double-width (512-bit) accumulator: `a * b` is never
truncated, only the final quotient is range-checked.

Rounding is explicit:
- `mul_div` / `div_wide` round toward zero (floor for non-negative operands).
- `mul_div_rounding_up` / `div_wide_rounding_up` round away from zero (ceil),
  used wherever the protocol must not under-charge.

`div_wide*` take an already-formed numerator and denominator of any width,
for quotients whose operands are products of several uint256 values.
"""

from __future__ import annotations

from ...errors import ArithmeticOverflowError, DivisionByZeroError


UINT256_MAX = 2**256 - 1


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def require_uint256(name: str, value: int) -> int:
    """Validate that `value` is an int in [0, UINT256_MAX] and return it."""
    _require_int(name, value)
    if value < 0:
        raise ArithmeticOverflowError(f"{name} must be non-negative: {value}")
    if value > UINT256_MAX:
        raise ArithmeticOverflowError(f"{name} exceeds uint256")
    return int(value)


def _fit(name: str, value: int) -> int:
    if value > UINT256_MAX:
        raise ArithmeticOverflowError(f"{name} overflows uint256")
    return value


def checked_add(a: int, b: int) -> int:
    require_uint256("a", a)
    require_uint256("b", b)
    return _fit("a + b", a + b)


def checked_sub(a: int, b: int) -> int:
    require_uint256("a", a)
    require_uint256("b", b)
    if b > a:
        raise ArithmeticOverflowError(f"a - b underflows uint256: {a} - {b}")
    return a - b


def _require_wide(name: str, value: int) -> None:
    _require_int(name, value)
    if value < 0:
        raise ArithmeticOverflowError(f"{name} must be non-negative: {value}")


def div_wide(numerator: int, denominator: int) -> int:
    """
    Compute `floor(numerator / denominator)` for non-negative operands of any
    width. Only the quotient must fit uint256.

    Raises:
        DivisionByZeroError: if `denominator == 0`
        ArithmeticOverflowError: if the quotient exceeds uint256
    """
    _require_wide("numerator", numerator)
    _require_wide("denominator", denominator)
    if denominator == 0:
        raise DivisionByZeroError("division by zero")
    return _fit("quotient", numerator // denominator)


def div_wide_rounding_up(numerator: int, denominator: int) -> int:
    """Like `div_wide`, rounding up when there is a remainder."""
    _require_wide("numerator", numerator)
    _require_wide("denominator", denominator)
    if denominator == 0:
        raise DivisionByZeroError("division by zero")
    quotient, remainder = divmod(numerator, denominator)
    if remainder:
        quotient += 1
    return _fit("quotient", quotient)


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    Compute `floor(a * b / denominator)` with full intermediate precision.

    The product `a * b` may exceed 256 bits; only the quotient must fit.

    Raises:
        DivisionByZeroError: if `denominator == 0`
        ArithmeticOverflowError: if an operand or the result is outside uint256
    """
    require_uint256("a", a)
    require_uint256("b", b)
    require_uint256("denominator", denominator)
    return div_wide(a * b, denominator)


def mul_div_rounding_up(a: int, b: int, denominator: int) -> int:
    """
    Compute `ceil(a * b / denominator)` with full intermediate precision.

    Raises:
        DivisionByZeroError: if `denominator == 0`
        ArithmeticOverflowError: if an operand or the result is outside uint256
    """
    require_uint256("a", a)
    require_uint256("b", b)
    require_uint256("denominator", denominator)
    return div_wide_rounding_up(a * b, denominator)
