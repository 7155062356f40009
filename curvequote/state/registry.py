"""
Pool registry: maps unordered token pairs to their canonical pool.

The registry is the only owner of pool storage. Quoting code receives a
`PoolRef` and a `ReserveSnapshot` from it and never holds on to either
across calls.

Pool creation and reserve updates belong to external collaborators (liquidity
provisioning and swap settlement); `create_pool` and `sync_reserves` are the
hooks those collaborators call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple, Union

from ..errors import PoolAlreadyExistsError, PoolNotFoundError
from .canonical import canonical_address
from .pools import (
    DEFAULT_FEE,
    Address,
    Amount,
    FeeRate,
    PoolState,
    ReserveSnapshot,
    compute_pool_id,
    sort_tokens,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolRef:
    """Handle to a registered pool (its id plus canonical token order)."""

    pool_id: str
    token0: Address
    token1: Address


class PoolRegistry:
    """
    Registry of constant-product pools, one per unordered token pair.

    Pool states are immutable; `sync_reserves` replaces the stored value, so a
    snapshot taken by a quote stays consistent for the whole call.
    """

    def __init__(self) -> None:
        self._pools: Dict[str, PoolState] = {}
        self._pair_index: Dict[Tuple[Address, Address], str] = {}

    def __len__(self) -> int:
        return len(self._pools)

    def __contains__(self, pool_id: object) -> bool:
        return pool_id in self._pools

    def pools(self) -> Iterator[PoolState]:
        """Iterate pools in pool_id order."""
        for pool_id in sorted(self._pools):
            yield self._pools[pool_id]

    def add_pool(self, pool: PoolState) -> PoolRef:
        """Register an already-built pool state (used when loading snapshots)."""
        if pool.pool_id != compute_pool_id(pool.token0, pool.token1):
            raise ValueError(f"pool_id does not match token pair: {pool.pool_id}")
        pair = (pool.token0, pool.token1)
        if pair in self._pair_index:
            raise PoolAlreadyExistsError(self._pair_index[pair])
        self._pools[pool.pool_id] = pool
        self._pair_index[pair] = pool.pool_id
        logger.info(
            "pool registered pool_id=%s token0=%s token1=%s reserves=(%d, %d) fee=%d/%d",
            pool.pool_id,
            pool.token0,
            pool.token1,
            pool.reserve0,
            pool.reserve1,
            pool.fee.numerator,
            pool.fee.denominator,
        )
        return PoolRef(pool_id=pool.pool_id, token0=pool.token0, token1=pool.token1)

    def create_pool(
        self,
        token_a: Address,
        token_b: Address,
        *,
        reserve_a: Amount,
        reserve_b: Amount,
        fee: Optional[FeeRate] = None,
    ) -> PoolRef:
        """
        Create a pool for (token_a, token_b) with the given initial reserves.

        The caller's argument order is irrelevant: reserves are re-ordered
        together with the tokens.

        Raises:
            IdenticalTokensError: if token_a == token_b
            PoolAlreadyExistsError: if the pair already has a pool
            ValueError: if an initial reserve is not positive
        """
        token0, token1 = sort_tokens(token_a, token_b)
        if token0 == canonical_address(token_a):
            reserve0, reserve1 = reserve_a, reserve_b
        else:
            reserve0, reserve1 = reserve_b, reserve_a
        if reserve0 <= 0 or reserve1 <= 0:
            raise ValueError(f"Initial reserves must be positive: ({reserve0}, {reserve1})")

        pool = PoolState(
            pool_id=compute_pool_id(token0, token1),
            token0=token0,
            token1=token1,
            reserve0=reserve0,
            reserve1=reserve1,
            fee=DEFAULT_FEE if fee is None else fee,
        )
        return self.add_pool(pool)

    def _require_pool(self, pool: Union[PoolRef, str]) -> PoolState:
        pool_id = pool.pool_id if isinstance(pool, PoolRef) else pool
        state = self._pools.get(pool_id)
        if state is None:
            if isinstance(pool, PoolRef):
                raise PoolNotFoundError(pool.token0, pool.token1)
            raise PoolNotFoundError(str(pool_id), str(pool_id))
        return state

    def get_pool(self, pool: Union[PoolRef, str]) -> PoolState:
        return self._require_pool(pool)

    def sync_reserves(self, pool: Union[PoolRef, str], reserve0: Amount, reserve1: Amount) -> PoolState:
        """
        Replace the reserves of a pool after an externally settled trade or
        liquidity change.
        """
        current = self._require_pool(pool)
        updated = PoolState(
            pool_id=current.pool_id,
            token0=current.token0,
            token1=current.token1,
            reserve0=reserve0,
            reserve1=reserve1,
            fee=current.fee,
        )
        self._pools[current.pool_id] = updated
        logger.info(
            "reserves synced pool_id=%s reserves=(%d, %d) -> (%d, %d)",
            current.pool_id,
            current.reserve0,
            current.reserve1,
            reserve0,
            reserve1,
        )
        return updated

    def resolve_pool(self, input_token: Address, output_token: Address) -> Tuple[PoolRef, bool]:
        """
        Resolve a caller-ordered (input, output) pair to its canonical pool.

        Returns:
            Tuple of (pool_ref, zero_for_one) where zero_for_one is True iff
            `input_token` is the pool's token0.

        Raises:
            IdenticalTokensError: if input_token == output_token
            PoolNotFoundError: if no pool exists for the pair
        """
        token0, token1 = sort_tokens(input_token, output_token)
        pool_id = self._pair_index.get((token0, token1))
        if pool_id is None:
            raise PoolNotFoundError(token0, token1)
        zero_for_one = canonical_address(input_token) == token0
        return PoolRef(pool_id=pool_id, token0=token0, token1=token1), zero_for_one

    def current_reserves(self, pool: Union[PoolRef, str]) -> ReserveSnapshot:
        return self._require_pool(pool).reserves()
