"""Exception types for the quoting core.

Every failure aborts the current call; nothing here is retried or recovered
locally. Each exception carries a stable ``kind`` string so outer surfaces
(the HTTP API, the offline tool) can report the error without matching on
class names.
"""

from __future__ import annotations


class QuoteError(ValueError):
    """Base class for all quoting-core failures."""

    kind = "QuoteError"


class ArithmeticOverflowError(QuoteError):
    """Raised when a uint256 operation leaves the representable range."""

    kind = "ArithmeticOverflow"


class DivisionByZeroError(QuoteError, ZeroDivisionError):
    kind = "DivisionByZero"


class PoolNotFoundError(QuoteError):
    """Raised when no pool is registered for an unordered token pair."""

    kind = "PoolNotFound"

    def __init__(self, token_a: str, token_b: str) -> None:
        self.token_a = token_a
        self.token_b = token_b
        super().__init__(f"no pool for pair ({token_a}, {token_b})")


class IdenticalTokensError(QuoteError):
    kind = "IdenticalTokens"

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"input and output token are identical: {token}")


class InsufficientLiquidityError(QuoteError):
    """Raised when the reserves cannot back the requested trade."""

    kind = "InsufficientLiquidity"


class InvalidAmountError(QuoteError):
    kind = "InvalidAmount"


class DirectionMismatchError(QuoteError):
    """Raised when a caller's zero_for_one flag disagrees with the token order."""

    kind = "DirectionMismatch"


class PoolAlreadyExistsError(QuoteError):
    kind = "PoolAlreadyExists"

    def __init__(self, pool_id: str) -> None:
        self.pool_id = pool_id
        super().__init__(f"pool already exists: {pool_id}")


class InvariantViolationError(QuoteError):
    """Raised when a quoted trade would decrease the constant product."""

    kind = "InvariantViolation"

    def __init__(self, k_before: int, k_after: int) -> None:
        self.k_before = k_before
        self.k_after = k_after
        super().__init__(f"invariant violation: new_k ({k_after}) < old_k ({k_before})")


class AlreadyInitializedError(QuoteError):
    kind = "AlreadyInitialized"


class NotInitializedError(QuoteError):
    kind = "NotInitialized"
