# [TESTER] v1

from __future__ import annotations

import pytest

from curvequote.errors import ArithmeticOverflowError, IdenticalTokensError
from curvequote.state.canonical import canonical_address, domain_sep_bytes
from curvequote.state.pools import DEFAULT_FEE, FeeRate, PoolState, compute_pool_id, sort_tokens


TOKEN_LO = "0x" + "11" * 20
TOKEN_HI = "0x" + "22" * 20


def test_canonical_address_normalizes_case_and_prefix() -> None:
    mixed = "0xAbCdEf" + "00" * 17
    assert canonical_address(mixed) == "0xabcdef" + "00" * 17
    assert canonical_address("22" * 20) == TOKEN_HI
    assert canonical_address("0X" + "22" * 20) == TOKEN_HI


@pytest.mark.parametrize("bad", ["0x1234", "0x" + "zz" * 20, "0x" + "11" * 21, ""])
def test_canonical_address_rejects_malformed(bad: str) -> None:
    with pytest.raises(ValueError):
        canonical_address(bad)


def test_sort_tokens_is_order_independent() -> None:
    assert sort_tokens(TOKEN_LO, TOKEN_HI) == (TOKEN_LO, TOKEN_HI)
    assert sort_tokens(TOKEN_HI, TOKEN_LO) == (TOKEN_LO, TOKEN_HI)
    # Numeric order, independent of letter case.
    assert sort_tokens("0x" + "AA" * 20, "0x" + "0b" * 20) == ("0x" + "0b" * 20, "0x" + "aa" * 20)


def test_sort_tokens_rejects_identical_tokens() -> None:
    with pytest.raises(IdenticalTokensError):
        sort_tokens(TOKEN_LO, TOKEN_LO)
    with pytest.raises(IdenticalTokensError):
        sort_tokens(TOKEN_LO, TOKEN_LO.upper().replace("0X", "0x"))


def test_pool_id_is_deterministic_and_domain_separated() -> None:
    pid = compute_pool_id(TOKEN_LO, TOKEN_HI)
    assert pid == compute_pool_id(TOKEN_LO, TOKEN_HI)
    assert pid.startswith("0x") and len(pid) == 66
    assert pid != compute_pool_id(TOKEN_LO, "0x" + "33" * 20)
    assert domain_sep_bytes("pool").startswith(b"curvequote:pool:v1")
    with pytest.raises(ValueError):
        compute_pool_id(TOKEN_HI, TOKEN_LO)


def test_fee_rate_validation() -> None:
    assert DEFAULT_FEE == FeeRate(997, 1000)
    assert FeeRate.from_bps(30) == FeeRate(9970, 10_000)
    assert FeeRate(1, 1).numerator == 1  # zero-fee pool
    with pytest.raises(ValueError):
        FeeRate(0, 1000)
    with pytest.raises(ValueError):
        FeeRate(1001, 1000)
    with pytest.raises(ValueError):
        FeeRate.from_bps(10_000)
    with pytest.raises(TypeError):
        FeeRate(True, 1000)  # type: ignore[arg-type]


def _pool(reserve0: int = 1000, reserve1: int = 2000) -> PoolState:
    return PoolState(
        pool_id=compute_pool_id(TOKEN_LO, TOKEN_HI),
        token0=TOKEN_LO,
        token1=TOKEN_HI,
        reserve0=reserve0,
        reserve1=reserve1,
    )


def test_pool_state_enforces_canonical_order_and_uint256_reserves() -> None:
    with pytest.raises(ValueError):
        PoolState(pool_id="0x00", token0=TOKEN_HI, token1=TOKEN_LO, reserve0=1, reserve1=1)
    with pytest.raises(ArithmeticOverflowError):
        _pool(reserve0=-1)
    with pytest.raises(ArithmeticOverflowError):
        _pool(reserve1=2**256)


def test_pool_state_reserves_snapshot_and_repr() -> None:
    pool = _pool()
    assert pool.fee == DEFAULT_FEE
    snap = pool.reserves()
    assert (snap.reserve0, snap.reserve1) == (1000, 2000)
    assert "reserves=(1000, 2000)" in repr(pool)
    assert "fee=997/1000" in repr(pool)
