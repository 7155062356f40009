"""
Minimal read-only HTTP API for quote requests.

The server is stdlib only. It exposes:
- GET /health
- GET /version
- GET /quote/exact-in?amount_in=&input=&output=&zero_for_one=
- GET /quote/exact-out?amount_out=&input=&output=&zero_for_one=

Amounts are decimal strings in both directions (uint256 values do not fit a
JSON double). Requests are served one at a time, so every quote observes a
consistent registry.

Security posture:
- Default-deny CORS (no wildcard)
- Basic rate limiting (per-IP, token bucket)
- Bounded request line / headers
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple
from urllib.parse import parse_qs

from ..config import QuoterConfig, configure_logging, load_pools_yaml
from ..core.curve import ConstantProductCurve
from ..core.events import EventLog
from ..errors import PoolNotFoundError, QuoteError
from ..kernels.python.full_math import UINT256_MAX


logger = logging.getLogger(__name__)

SERVICE_NAME = "curvequote-api"

_MAX_AMOUNT_DIGITS = len(str(UINT256_MAX))


class BadRequest(ValueError):
    pass


@dataclass
class RateLimitBucket:
    tokens: float
    updated_at: float


class TokenBucketRateLimiter:
    """
    Per-IP token bucket.

    A bucket left idle for a full refill period is indistinguishable from a
    new one, so such buckets are dropped by a sweep that runs at most once per
    period.

    Target complexity: amortized O(1) per request.
    """

    REFILL_PERIOD_S = 60.0

    def __init__(self, *, rpm: int, clock=time.monotonic) -> None:
        self._rpm = int(max(0, rpm))
        self._capacity = float(max(1, rpm)) if rpm > 0 else 0.0
        self._refill_per_s = float(rpm) / self.REFILL_PERIOD_S if rpm > 0 else 0.0
        self._buckets: Dict[str, RateLimitBucket] = {}
        self._clock = clock
        self._last_sweep = float(clock())

    def __len__(self) -> int:
        return len(self._buckets)

    def _evict_idle(self, now: float) -> None:
        if now - self._last_sweep < self.REFILL_PERIOD_S:
            return
        self._last_sweep = now
        idle = [k for k, b in self._buckets.items() if now - b.updated_at >= self.REFILL_PERIOD_S]
        for k in idle:
            del self._buckets[k]

    def allow(self, key: str) -> bool:
        if self._rpm <= 0:
            return True
        now = self._clock()
        self._evict_idle(now)
        b = self._buckets.get(key)
        if b is None:
            self._buckets[key] = RateLimitBucket(tokens=self._capacity - 1.0, updated_at=now)
            return True
        dt = max(0.0, now - b.updated_at)
        b.tokens = min(self._capacity, b.tokens + dt * self._refill_per_s)
        b.updated_at = now
        if b.tokens >= 1.0:
            b.tokens -= 1.0
            return True
        return False


def _single(query: Mapping[str, Sequence[str]], key: str) -> str:
    values = query.get(key)
    if not values:
        raise BadRequest(f"missing parameter: {key}")
    if len(values) != 1:
        raise BadRequest(f"duplicate parameter: {key}")
    return values[0]


def _parse_amount(query: Mapping[str, Sequence[str]], key: str) -> int:
    raw = _single(query, key).strip()
    if not raw.isdigit() or len(raw) > _MAX_AMOUNT_DIGITS:
        raise BadRequest(f"{key} must be a decimal uint256")
    return int(raw)


def _parse_bool(query: Mapping[str, Sequence[str]], key: str) -> bool:
    raw = _single(query, key).strip().lower()
    if raw in ("true", "1"):
        return True
    if raw in ("false", "0"):
        return False
    raise BadRequest(f"{key} must be true or false")


def route(curve: ConstantProductCurve, path: str, query: Mapping[str, Sequence[str]]) -> Tuple[int, Dict[str, Any]]:
    """
    Dispatch one GET request to the curve.

    Returns:
        Tuple of (http_status, json_body)
    """
    if path == "/health":
        return 200, {"status": "healthy", "service": SERVICE_NAME, "pools": len(curve.registry)}

    if path == "/version":
        return 200, {"service": SERVICE_NAME, "version": curve.version()}

    if path not in ("/quote/exact-in", "/quote/exact-out"):
        return 404, {"ok": False, "error": "not_found"}

    try:
        input_token = _single(query, "input")
        output_token = _single(query, "output")
        zero_for_one = _parse_bool(query, "zero_for_one")
        if path == "/quote/exact-in":
            amount_in = _parse_amount(query, "amount_in")
            amount_out = curve.get_amount_out_from_exact_input(amount_in, input_token, output_token, zero_for_one)
        else:
            amount_out = _parse_amount(query, "amount_out")
            amount_in = curve.get_amount_in_for_exact_output(amount_out, input_token, output_token, zero_for_one)
    except BadRequest as exc:
        return 400, {"ok": False, "error": "bad_request", "detail": str(exc)}
    except PoolNotFoundError as exc:
        return 404, {"ok": False, "error": exc.kind, "detail": str(exc)}
    except QuoteError as exc:
        return 400, {"ok": False, "error": exc.kind, "detail": str(exc)}
    except (TypeError, ValueError) as exc:
        # Malformed addresses are rejected by address canonicalization.
        return 400, {"ok": False, "error": "bad_request", "detail": str(exc)}

    return 200, {
        "ok": True,
        "amount_in": str(amount_in),
        "amount_out": str(amount_out),
        "zero_for_one": zero_for_one,
    }


class _Handler(BaseHTTPRequestHandler):
    server_version = "CurveQuoteApi/1"

    # Bound request line / headers to avoid memory abuse.
    max_requestline = 8192
    max_headers = 100

    def _client_ip(self) -> str:
        # Trust boundary: we do NOT trust X-Forwarded-For.
        try:
            return str(self.client_address[0])
        except (IndexError, TypeError):
            return "unknown"

    def _allowed_cors_origin_or_none(self) -> Optional[str]:
        origin = self.headers.get("Origin")
        if not isinstance(origin, str) or not origin:
            return None
        allowed = self.server.cors_origins  # type: ignore[attr-defined]
        return origin if origin in allowed else None

    def _write_json(self, status: int, obj: object, *, cors_origin: Optional[str]) -> None:
        body = json.dumps(obj, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
        self.send_response(int(status))
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Cache-Control", "no-store")
        self.send_header("Content-Length", str(len(body)))
        if cors_origin is not None:
            self.send_header("Access-Control-Allow-Origin", cors_origin)
            self.send_header("Vary", "Origin")
        self.end_headers()
        self.wfile.write(body)

    def do_OPTIONS(self) -> None:  # noqa: N802
        cors_origin = self._allowed_cors_origin_or_none()
        self.send_response(204)
        if cors_origin is not None:
            self.send_header("Access-Control-Allow-Origin", cors_origin)
            self.send_header("Access-Control-Allow-Methods", "GET,OPTIONS")
            self.send_header("Access-Control-Allow-Headers", "Content-Type")
            self.send_header("Access-Control-Max-Age", "600")
            self.send_header("Vary", "Origin")
        self.end_headers()

    def do_GET(self) -> None:  # noqa: N802
        limiter: TokenBucketRateLimiter = self.server.rate_limiter  # type: ignore[attr-defined]
        if not limiter.allow(self._client_ip()):
            logger.warning("rate limited client=%s", self._client_ip())
            self._write_json(429, {"ok": False, "error": "rate_limited"}, cors_origin=None)
            return

        cors_origin = self._allowed_cors_origin_or_none()
        path, _, raw_query = (self.path or "").partition("?")
        query = parse_qs(raw_query, keep_blank_values=True)
        curve: ConstantProductCurve = self.server.curve  # type: ignore[attr-defined]

        status, body = route(curve, path, query)
        if status >= 400:
            logger.warning("rejected %s status=%d error=%s", path, status, body.get("error"))
        self._write_json(status, body, cors_origin=cors_origin)

    def log_message(self, fmt: str, *args: object) -> None:
        # Avoid leaking query strings into logs.
        msg = fmt % args if args else fmt
        logger.debug("%s %s => %s", self.command, (self.path or "").split("?", 1)[0], msg)


def make_server(curve: ConstantProductCurve, config: QuoterConfig) -> HTTPServer:
    httpd = HTTPServer((config.api_host, config.api_port), _Handler)
    # Attach config to server instance (used by handler).
    httpd.curve = curve  # type: ignore[attr-defined]
    httpd.cors_origins = frozenset(config.cors_origins)  # type: ignore[attr-defined]
    httpd.rate_limiter = TokenBucketRateLimiter(rpm=config.rate_limit_rpm)  # type: ignore[attr-defined]
    return httpd


def build_curve(config: QuoterConfig) -> ConstantProductCurve:
    curve = ConstantProductCurve(config.version, event_log=EventLog(max_events=config.max_events))
    if config.pools_file:
        load_pools_yaml(config.pools_file, curve.registry, default_fee=config.default_fee)
    return curve


def main(argv: Optional[Sequence[str]] = None) -> int:
    _ = argv
    config = QuoterConfig.from_env()
    configure_logging(config.log_level)
    httpd = make_server(build_curve(config), config)
    logger.info(
        "%s listening on http://%s:%d (cors_origins=%s, rpm=%d)",
        SERVICE_NAME,
        config.api_host,
        config.api_port,
        list(config.cors_origins),
        config.rate_limit_rpm,
    )
    try:
        httpd.serve_forever(poll_interval=0.25)
    finally:
        httpd.server_close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
