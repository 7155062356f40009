# [TESTER] v1

from __future__ import annotations

import logging

import pytest

from curvequote.errors import IdenticalTokensError, PoolAlreadyExistsError, PoolNotFoundError
from curvequote.state.pools import FeeRate, PoolState, compute_pool_id
from curvequote.state.registry import PoolRef, PoolRegistry


TOKEN_A = "0x" + "11" * 20
TOKEN_B = "0x" + "22" * 20
TOKEN_C = "0x" + "33" * 20


def test_create_pool_reorders_reserves_with_tokens() -> None:
    reg = PoolRegistry()
    ref = reg.create_pool(TOKEN_B, TOKEN_A, reserve_a=500, reserve_b=100)
    assert (ref.token0, ref.token1) == (TOKEN_A, TOKEN_B)
    snap = reg.current_reserves(ref)
    # TOKEN_A (token0) was passed second, with reserve_b=100.
    assert (snap.reserve0, snap.reserve1) == (100, 500)
    assert ref.pool_id == compute_pool_id(TOKEN_A, TOKEN_B)
    assert ref.pool_id in reg
    assert len(reg) == 1


def test_create_pool_rejects_duplicates_and_bad_input() -> None:
    reg = PoolRegistry()
    reg.create_pool(TOKEN_A, TOKEN_B, reserve_a=1, reserve_b=1)
    with pytest.raises(PoolAlreadyExistsError):
        reg.create_pool(TOKEN_B, TOKEN_A, reserve_a=5, reserve_b=5, fee=FeeRate(999, 1000))
    with pytest.raises(IdenticalTokensError):
        reg.create_pool(TOKEN_C, TOKEN_C, reserve_a=1, reserve_b=1)
    with pytest.raises(ValueError):
        reg.create_pool(TOKEN_A, TOKEN_C, reserve_a=0, reserve_b=1)


def test_resolve_pool_is_symmetric() -> None:
    reg = PoolRegistry()
    reg.create_pool(TOKEN_A, TOKEN_B, reserve_a=1000, reserve_b=2000)

    ref_ab, zfo_ab = reg.resolve_pool(TOKEN_A, TOKEN_B)
    ref_ba, zfo_ba = reg.resolve_pool(TOKEN_B, TOKEN_A)
    assert ref_ab == ref_ba
    assert zfo_ab is True
    assert zfo_ba is False


def test_resolve_pool_accepts_any_address_spelling() -> None:
    reg = PoolRegistry()
    reg.create_pool(TOKEN_A, "0x" + "aa" * 20, reserve_a=1, reserve_b=1)
    ref, zfo = reg.resolve_pool("0x" + "AA" * 20, TOKEN_A[2:])
    assert ref.token1 == "0x" + "aa" * 20
    assert zfo is False


def test_resolve_pool_failures() -> None:
    reg = PoolRegistry()
    reg.create_pool(TOKEN_A, TOKEN_B, reserve_a=1, reserve_b=1)
    with pytest.raises(IdenticalTokensError):
        reg.resolve_pool(TOKEN_A, TOKEN_A)
    with pytest.raises(PoolNotFoundError) as exc_info:
        reg.resolve_pool(TOKEN_A, TOKEN_C)
    assert exc_info.value.kind == "PoolNotFound"
    with pytest.raises(PoolNotFoundError):
        reg.current_reserves(PoolRef(pool_id="0x" + "00" * 32, token0=TOKEN_A, token1=TOKEN_C))


def test_sync_reserves_replaces_state_without_touching_old_snapshots() -> None:
    reg = PoolRegistry()
    ref = reg.create_pool(TOKEN_A, TOKEN_B, reserve_a=1000, reserve_b=2000, fee=FeeRate(995, 1000))
    before = reg.get_pool(ref)
    snap_before = reg.current_reserves(ref)

    after = reg.sync_reserves(ref, 1100, 1819)
    assert (after.reserve0, after.reserve1) == (1100, 1819)
    assert after.fee == FeeRate(995, 1000)
    assert (before.reserve0, before.reserve1) == (1000, 2000)
    assert (snap_before.reserve0, snap_before.reserve1) == (1000, 2000)
    assert reg.get_pool(ref.pool_id) is after


def test_pools_iterate_in_pool_id_order() -> None:
    reg = PoolRegistry()
    reg.create_pool(TOKEN_A, TOKEN_B, reserve_a=1, reserve_b=1)
    reg.create_pool(TOKEN_A, TOKEN_C, reserve_a=1, reserve_b=1)
    reg.create_pool(TOKEN_B, TOKEN_C, reserve_a=1, reserve_b=1)
    ids = [p.pool_id for p in reg.pools()]
    assert ids == sorted(ids)
    assert len(ids) == 3


def test_add_pool_checks_pool_id() -> None:
    reg = PoolRegistry()
    bogus = PoolState(pool_id="0x" + "ff" * 32, token0=TOKEN_A, token1=TOKEN_B, reserve0=1, reserve1=1)
    with pytest.raises(ValueError):
        reg.add_pool(bogus)


def test_registry_logs_pool_lifecycle(caplog: pytest.LogCaptureFixture) -> None:
    reg = PoolRegistry()
    with caplog.at_level(logging.INFO, logger="curvequote.state.registry"):
        ref = reg.create_pool(TOKEN_A, TOKEN_B, reserve_a=10, reserve_b=20)
        reg.sync_reserves(ref, 11, 19)
    messages = [r.getMessage() for r in caplog.records]
    assert any("pool registered" in m and ref.pool_id in m for m in messages)
    assert any("reserves synced" in m for m in messages)
