"""
Registry snapshot encoding.

Goals:
- Deterministic JSON serialization for hashing / snapshot distribution.
- Round-trippable into a `PoolRegistry`.
- Explicit versioning.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from ..state.canonical import canonical_json_bytes, domain_sep_bytes, sha256_hex
from ..state.pools import FeeRate, PoolState
from ..state.registry import PoolRegistry


REGISTRY_SNAPSHOT_VERSION = 1


def _require_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    if not value:
        raise ValueError(f"{name} must be non-empty")
    return value


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


@dataclass(frozen=True)
class RegistrySnapshot:
    """
    Deterministic, versioned snapshot of a `PoolRegistry`.

    The commitment is *not* included inside `data` to avoid self-reference.
    """

    version: int
    data: Dict[str, Any]

    def canonical_bytes(self) -> bytes:
        return canonical_json_bytes(self.data)

    def _commitment_payload(self) -> bytes:
        return domain_sep_bytes("registry_snapshot", version=self.version) + self.canonical_bytes()

    def commitment_bytes(self) -> bytes:
        return hashlib.sha256(self._commitment_payload()).digest()

    def commitment_hex(self) -> str:
        return sha256_hex(self._commitment_payload())


def snapshot_from_registry(registry: PoolRegistry, *, version: int = REGISTRY_SNAPSHOT_VERSION) -> RegistrySnapshot:
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")

    pools_entries = [
        {
            "pool_id": pool.pool_id,
            "token0": pool.token0,
            "token1": pool.token1,
            "reserve0": int(pool.reserve0),
            "reserve1": int(pool.reserve1),
            "fee_numerator": int(pool.fee.numerator),
            "fee_denominator": int(pool.fee.denominator),
        }
        for pool in registry.pools()
    ]
    data: Dict[str, Any] = {"version": int(version), "pools": pools_entries}
    return RegistrySnapshot(version=version, data=data)


def registry_from_snapshot(snapshot: Mapping[str, Any]) -> PoolRegistry:
    """
    Rebuild a registry from `RegistrySnapshot.data`.

    Pool ids are recomputed from the token pair and must match the stored id.
    """
    if not isinstance(snapshot, Mapping):
        raise TypeError("snapshot must be a mapping")
    version = _require_int(snapshot.get("version"), name="snapshot.version")
    if version != REGISTRY_SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version: {version}")
    entries = snapshot.get("pools")
    if not isinstance(entries, list):
        raise TypeError("snapshot.pools must be a list")

    registry = PoolRegistry()
    for i, e in enumerate(entries):
        if not isinstance(e, Mapping):
            raise TypeError(f"snapshot.pools[{i}] must be an object")
        name = f"snapshot.pools[{i}]"
        pool = PoolState(
            pool_id=_require_str(e.get("pool_id"), name=f"{name}.pool_id"),
            token0=_require_str(e.get("token0"), name=f"{name}.token0"),
            token1=_require_str(e.get("token1"), name=f"{name}.token1"),
            reserve0=_require_int(e.get("reserve0"), name=f"{name}.reserve0"),
            reserve1=_require_int(e.get("reserve1"), name=f"{name}.reserve1"),
            fee=FeeRate(
                numerator=_require_int(e.get("fee_numerator"), name=f"{name}.fee_numerator"),
                denominator=_require_int(e.get("fee_denominator"), name=f"{name}.fee_denominator"),
            ),
        )
        registry.add_pool(pool)
    return registry
