# [TESTER] v1

from __future__ import annotations

import logging

import pytest

from curvequote.config import (
    DEFAULT_VERSION,
    QuoterConfig,
    configure_logging,
    load_pools_yaml,
    pools_from_mapping,
)
from curvequote.errors import IdenticalTokensError, PoolAlreadyExistsError
from curvequote.state.pools import DEFAULT_FEE, FeeRate
from curvequote.state.registry import PoolRegistry


TOKEN_A = "0x" + "11" * 20
TOKEN_B = "0x" + "22" * 20


_ENV_VARS = (
    "CURVEQUOTE_VERSION",
    "CURVEQUOTE_FEE_NUMERATOR",
    "CURVEQUOTE_FEE_DENOMINATOR",
    "CURVEQUOTE_API_HOST",
    "CURVEQUOTE_API_PORT",
    "CURVEQUOTE_CORS_ORIGINS",
    "CURVEQUOTE_RATE_LIMIT_RPM",
    "CURVEQUOTE_MAX_EVENTS",
    "CURVEQUOTE_POOLS_FILE",
    "CURVEQUOTE_LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults_from_empty_env(clean_env: pytest.MonkeyPatch) -> None:
    cfg = QuoterConfig.from_env()
    assert cfg == QuoterConfig()
    assert cfg.version == DEFAULT_VERSION
    assert cfg.default_fee == DEFAULT_FEE
    assert cfg.pools_file is None
    assert cfg.cors_origins == ()


def test_env_overrides_and_clamping(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("CURVEQUOTE_VERSION", "cpmm/2")
    clean_env.setenv("CURVEQUOTE_FEE_NUMERATOR", "9970")
    clean_env.setenv("CURVEQUOTE_FEE_DENOMINATOR", "10000")
    clean_env.setenv("CURVEQUOTE_API_PORT", "999999")
    clean_env.setenv("CURVEQUOTE_CORS_ORIGINS", "https://b.example, *, https://a.example,")
    clean_env.setenv("CURVEQUOTE_RATE_LIMIT_RPM", "-3")
    clean_env.setenv("CURVEQUOTE_LOG_LEVEL", "debug")
    clean_env.setenv("CURVEQUOTE_POOLS_FILE", "  ")

    cfg = QuoterConfig.from_env()
    assert cfg.version == "cpmm/2"
    assert cfg.default_fee == FeeRate(9_970, 10_000)
    assert cfg.api_port == 65535
    assert cfg.cors_origins == ("https://a.example", "https://b.example")
    assert cfg.rate_limit_rpm == 0
    assert cfg.log_level == "DEBUG"
    assert cfg.pools_file is None


def test_non_integer_env_falls_back_with_warning(
    clean_env: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    clean_env.setenv("CURVEQUOTE_MAX_EVENTS", "lots")
    with caplog.at_level(logging.WARNING, logger="curvequote.config"):
        cfg = QuoterConfig.from_env()
    assert cfg.max_events == 10_000
    assert any("CURVEQUOTE_MAX_EVENTS" in r.getMessage() for r in caplog.records)


def test_fee_above_one_is_rejected(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("CURVEQUOTE_FEE_NUMERATOR", "1001")
    with pytest.raises(ValueError):
        QuoterConfig.from_env()


def test_load_pools_yaml(tmp_path) -> None:
    path = tmp_path / "pools.yaml"
    path.write_text(
        "pools:\n"
        f"  - token0: \"{TOKEN_B}\"\n"
        f"    token1: \"{TOKEN_A}\"\n"
        "    reserve0: 500\n"
        "    reserve1: 100\n"
        "    fee_numerator: 995\n"
        # unquoted hex literal, read by YAML as an int
        "  - token0: 0x1111111111111111111111111111111111111111\n"
        "    token1: \"0x3333333333333333333333333333333333333333\"\n"
        "    reserve0: 1\n"
        "    reserve1: 2\n",
        encoding="utf-8",
    )
    reg = PoolRegistry()
    refs = load_pools_yaml(path, reg)
    assert len(refs) == 2
    first = reg.get_pool(refs[0])
    assert (first.token0, first.token1) == (TOKEN_A, TOKEN_B)
    assert (first.reserve0, first.reserve1) == (100, 500)
    assert first.fee == FeeRate(995, 1000)
    assert reg.get_pool(refs[1]).token0 == TOKEN_A


def test_empty_pools_file(tmp_path) -> None:
    path = tmp_path / "pools.yaml"
    path.write_text("", encoding="utf-8")
    assert load_pools_yaml(path, PoolRegistry()) == ()


def test_pools_from_mapping_rejects_bad_documents() -> None:
    with pytest.raises(ValueError):
        pools_from_mapping([], PoolRegistry())
    with pytest.raises(ValueError):
        pools_from_mapping({"pools": {"a": 1}}, PoolRegistry())
    with pytest.raises(ValueError):
        pools_from_mapping({"pools": [{"token0": TOKEN_A, "token1": TOKEN_B, "reserve0": "1", "reserve1": 1}]}, PoolRegistry())
    with pytest.raises(ValueError):
        pools_from_mapping({"pools": [{"token0": None, "token1": TOKEN_B, "reserve0": 1, "reserve1": 1}]}, PoolRegistry())
    with pytest.raises(IdenticalTokensError):
        pools_from_mapping({"pools": [{"token0": TOKEN_A, "token1": TOKEN_A, "reserve0": 1, "reserve1": 1}]}, PoolRegistry())

    entry = {"token0": TOKEN_A, "token1": TOKEN_B, "reserve0": 1, "reserve1": 1}
    with pytest.raises(PoolAlreadyExistsError):
        pools_from_mapping({"pools": [entry, dict(entry)]}, PoolRegistry())


def test_configure_logging_installs_one_handler() -> None:
    pkg_logger = logging.getLogger("curvequote")
    saved_level = pkg_logger.level
    saved_handlers = list(pkg_logger.handlers)
    try:
        configure_logging("info")
        configure_logging(logging.DEBUG)
        ours = [h for h in pkg_logger.handlers if getattr(h, "_curvequote", False)]
        assert len(ours) == 1
        assert pkg_logger.level == logging.DEBUG
        with pytest.raises(ValueError):
            configure_logging("chatty")
    finally:
        pkg_logger.handlers[:] = saved_handlers
        pkg_logger.setLevel(saved_level)
