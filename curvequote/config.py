"""
Runtime configuration for curvequote deployments.

Settings come from `CURVEQUOTE_*` environment variables (clamped to sane
ranges) and an optional YAML pools file that seeds the registry:

    pools:
      - token0: "0x1111111111111111111111111111111111111111"
        token1: "0x2222222222222222222222222222222222222222"
        reserve0: 1000000
        reserve1: 1000000
        fee_numerator: 997      # optional, defaults to 997
        fee_denominator: 1000   # optional, defaults to 1000
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

import yaml

from .core.events import DEFAULT_MAX_EVENTS
from .state.pools import DEFAULT_FEE, FeeRate
from .state.registry import PoolRef, PoolRegistry


logger = logging.getLogger(__name__)

DEFAULT_VERSION = "curvequote-cpmm/1"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _env_int(name: str, default: int, *, lo: int, hi: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError:
        logger.warning("ignoring non-integer %s=%r, using %d", name, raw, default)
        return int(default)
    return int(min(max(v, lo), hi))


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _parse_cors_origins(value: str) -> Tuple[str, ...]:
    """
    Parse a comma-separated CORS origin list.

    '*' is ignored: operators must list trusted origins explicitly.
    """
    out = set()
    for item in (value or "").split(","):
        origin = item.strip()
        if origin and origin != "*":
            out.add(origin)
    return tuple(sorted(out))


@dataclass(frozen=True)
class QuoterConfig:
    version: str = DEFAULT_VERSION
    default_fee: FeeRate = DEFAULT_FEE
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    cors_origins: Tuple[str, ...] = ()
    rate_limit_rpm: int = 600
    max_events: int = DEFAULT_MAX_EVENTS
    pools_file: Optional[str] = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "QuoterConfig":
        fee_num = _env_int("CURVEQUOTE_FEE_NUMERATOR", DEFAULT_FEE.numerator, lo=1, hi=2**256 - 1)
        fee_den = _env_int("CURVEQUOTE_FEE_DENOMINATOR", DEFAULT_FEE.denominator, lo=1, hi=2**256 - 1)
        pools_file = _env_str("CURVEQUOTE_POOLS_FILE", "")
        return cls(
            version=_env_str("CURVEQUOTE_VERSION", DEFAULT_VERSION),
            default_fee=FeeRate(numerator=fee_num, denominator=fee_den),
            api_host=_env_str("CURVEQUOTE_API_HOST", "127.0.0.1"),
            api_port=_env_int("CURVEQUOTE_API_PORT", 8000, lo=1, hi=65535),
            cors_origins=_parse_cors_origins(_env_str("CURVEQUOTE_CORS_ORIGINS", "")),
            rate_limit_rpm=_env_int("CURVEQUOTE_RATE_LIMIT_RPM", 600, lo=0, hi=1_000_000),
            max_events=_env_int("CURVEQUOTE_MAX_EVENTS", DEFAULT_MAX_EVENTS, lo=1, hi=10_000_000),
            pools_file=pools_file or None,
            log_level=_env_str("CURVEQUOTE_LOG_LEVEL", "WARNING").upper(),
        )


def configure_logging(level: Union[str, int] = "WARNING") -> None:
    """Install a single stream handler on the package logger."""
    pkg_logger = logging.getLogger("curvequote")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level: {level!r}")
        level = resolved
    pkg_logger.setLevel(level)
    if not any(getattr(h, "_curvequote", False) for h in pkg_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._curvequote = True  # type: ignore[attr-defined]
        pkg_logger.addHandler(handler)


def _require_mapping(obj: Any, *, name: str) -> Mapping[str, Any]:
    if not isinstance(obj, Mapping):
        raise ValueError(f"{name} must be a mapping")
    return obj


def _require_amount(obj: Mapping[str, Any], key: str, *, name: str) -> int:
    value = obj.get(key)
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name}.{key} must be an int")
    return int(value)


def _require_token(obj: Mapping[str, Any], key: str, *, name: str) -> str:
    value = obj.get(key)
    # YAML 1.1 reads an unquoted 0x... literal as an int.
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value < 2**160:
        return f"0x{value:040x}"
    if not isinstance(value, str):
        raise ValueError(f"{name}.{key} must be an address string")
    return value


def pools_from_mapping(
    doc: Any,
    registry: PoolRegistry,
    *,
    default_fee: FeeRate = DEFAULT_FEE,
) -> Tuple[PoolRef, ...]:
    """Create every pool listed under `pools:` in an already-parsed document."""
    root = _require_mapping(doc, name="pools document")
    entries = root.get("pools", [])
    if not isinstance(entries, list):
        raise ValueError("pools must be a list")

    refs = []
    for i, raw in enumerate(entries):
        name = f"pools[{i}]"
        entry = _require_mapping(raw, name=name)
        token0 = _require_token(entry, "token0", name=name)
        token1 = _require_token(entry, "token1", name=name)
        fee = FeeRate(
            numerator=entry.get("fee_numerator", default_fee.numerator),
            denominator=entry.get("fee_denominator", default_fee.denominator),
        )
        refs.append(
            registry.create_pool(
                token0,
                token1,
                reserve_a=_require_amount(entry, "reserve0", name=name),
                reserve_b=_require_amount(entry, "reserve1", name=name),
                fee=fee,
            )
        )
    return tuple(refs)


def load_pools_yaml(
    path: Union[str, Path],
    registry: PoolRegistry,
    *,
    default_fee: FeeRate = DEFAULT_FEE,
) -> Tuple[PoolRef, ...]:
    """Load pool fixtures from a YAML file into `registry`."""
    text = Path(path).read_text(encoding="utf-8")
    refs = pools_from_mapping(yaml.safe_load(text) or {}, registry, default_fee=default_fee)
    logger.info("loaded %d pools from %s", len(refs), path)
    return refs
