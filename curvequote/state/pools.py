"""
Pool state for constant-product pools.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..errors import IdenticalTokensError
from ..kernels.python.full_math import require_uint256
from .canonical import address_to_int, canonical_address, domain_sep_bytes, sha256_hex


# Type aliases
Address = str  # 20-byte hex string (0x...), canonical lowercase
Amount = int  # uint256


@dataclass(frozen=True)
class FeeRate:
    """
    Fraction of the input that is priced into a swap.

    `FeeRate(997, 1000)` keeps 99.7% of the input, i.e. a 0.3% trading fee.
    """

    numerator: int
    denominator: int

    def __post_init__(self) -> None:
        require_uint256("fee numerator", self.numerator)
        require_uint256("fee denominator", self.denominator)
        if self.numerator <= 0:
            raise ValueError(f"fee numerator must be positive: {self.numerator}")
        if self.numerator > self.denominator:
            raise ValueError(
                f"fee numerator must not exceed denominator: {self.numerator}/{self.denominator}"
            )

    @classmethod
    def from_bps(cls, fee_bps: int) -> "FeeRate":
        """Build a fee rate from a fee in basis points (30 -> 9970/10000)."""
        if not isinstance(fee_bps, int) or isinstance(fee_bps, bool):
            raise TypeError("fee_bps must be an int")
        if not (0 <= fee_bps < 10_000):
            raise ValueError(f"fee_bps must be in [0, 10000): {fee_bps}")
        return cls(numerator=10_000 - fee_bps, denominator=10_000)


DEFAULT_FEE = FeeRate(numerator=997, denominator=1000)


def sort_tokens(token_a: Address, token_b: Address) -> Tuple[Address, Address]:
    """
    Return the pair in canonical (numerically ascending) order.

    Raises:
        IdenticalTokensError: if both addresses name the same token
    """
    a = canonical_address(token_a, name="token_a")
    b = canonical_address(token_b, name="token_b")
    if a == b:
        raise IdenticalTokensError(a)
    if address_to_int(a) < address_to_int(b):
        return a, b
    return b, a


def compute_pool_id(token0: Address, token1: Address) -> str:
    """
    Deterministically compute a pool_id for a canonical token pair.

        pool_id = sha256(domain_sep("pool") || token0 || token1)
    """
    if (token0, token1) != sort_tokens(token0, token1):
        raise ValueError(f"Tokens must be in canonical order: {token0} < {token1}")
    payload = domain_sep_bytes("pool") + bytes.fromhex(token0[2:]) + bytes.fromhex(token1[2:])
    return sha256_hex(payload)


@dataclass(frozen=True)
class ReserveSnapshot:
    """Reserves of one pool as observed by a single quote call."""

    reserve0: Amount
    reserve1: Amount


@dataclass(frozen=True)
class PoolState:
    """
    State of a constant-product pool.

    Attributes:
        pool_id: Deterministic pool identifier (hex string)
        token0: Canonically first token (numerically smaller address)
        token1: Canonically second token
        reserve0: Reserve of token0
        reserve1: Reserve of token1
        fee: Fee rate applied to the input side of every swap
    """

    pool_id: str
    token0: Address
    token1: Address
    reserve0: Amount
    reserve1: Amount
    fee: FeeRate = DEFAULT_FEE

    def __post_init__(self) -> None:
        if (self.token0, self.token1) != sort_tokens(self.token0, self.token1):
            raise ValueError(f"Tokens must be in canonical order: {self.token0} < {self.token1}")
        require_uint256("reserve0", self.reserve0)
        require_uint256("reserve1", self.reserve1)
        if not isinstance(self.fee, FeeRate):
            raise TypeError("fee must be a FeeRate")

    def reserves(self) -> ReserveSnapshot:
        return ReserveSnapshot(reserve0=self.reserve0, reserve1=self.reserve1)

    def __repr__(self) -> str:
        return (
            f"PoolState(pool_id={self.pool_id[:18]}..., "
            f"tokens=({self.token0[:10]}..., {self.token1[:10]}...), "
            f"reserves=({self.reserve0}, {self.reserve1}), "
            f"fee={self.fee.numerator}/{self.fee.denominator})"
        )
