#!/usr/bin/env python3
"""
Offline quote demo: build a registry (from a YAML pools file or a single
demo pool), then print an exact-in and an exact-out quote for one pair.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from curvequote.config import DEFAULT_VERSION, configure_logging, load_pools_yaml
from curvequote.core.curve import ConstantProductCurve
from curvequote.errors import QuoteError
from curvequote.state.pools import FeeRate


TOKEN_A = "0x" + "11" * 20
TOKEN_B = "0x" + "22" * 20


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description=__doc__)
    p.add_argument("--pools", help="YAML pools file (default: one demo pool)")
    p.add_argument("--input", default=TOKEN_A, help="input token address")
    p.add_argument("--output", default=TOKEN_B, help="output token address")
    p.add_argument("--amount-in", type=int, default=1_000)
    p.add_argument("--amount-out", type=int, default=996)
    p.add_argument("--reserves", type=int, nargs=2, default=[1_000_000, 1_000_000], metavar=("R_IN", "R_OUT"))
    p.add_argument("--fee", type=int, nargs=2, default=[997, 1000], metavar=("NUM", "DEN"))
    p.add_argument("--log-level", default="WARNING")
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    configure_logging(args.log_level)

    curve = ConstantProductCurve(DEFAULT_VERSION)
    if args.pools:
        load_pools_yaml(args.pools, curve.registry)
    else:
        curve.registry.create_pool(
            args.input,
            args.output,
            reserve_a=args.reserves[0],
            reserve_b=args.reserves[1],
            fee=FeeRate(numerator=args.fee[0], denominator=args.fee[1]),
        )

    try:
        _pool_ref, zero_for_one = curve.registry.resolve_pool(args.input, args.output)
        swap = curve.resolve(args.input, args.output, zero_for_one)
    except QuoteError as exc:
        print(f"[quote-demo] FAIL ({exc.kind}): {exc}")
        return 1
    print(f"[quote-demo] version={curve.version()} pool_id={swap.pool.pool_id}")
    print(
        f"[quote-demo] reserve_in={swap.reserve_in} reserve_out={swap.reserve_out} "
        f"fee={swap.fee.numerator}/{swap.fee.denominator} zero_for_one={zero_for_one}"
    )

    try:
        out_q = curve.quote_exact_input(args.amount_in, args.input, args.output, zero_for_one)
        in_q = curve.quote_exact_output(args.amount_out, args.input, args.output, zero_for_one)
    except QuoteError as exc:
        print(f"[quote-demo] FAIL ({exc.kind}): {exc}")
        return 1

    print(f"[quote-demo] exact-in:  amount_in={out_q.amount_in} -> amount_out={out_q.amount_out} (k {out_q.k_before} -> {out_q.k_after})")
    print(f"[quote-demo] exact-out: amount_out={in_q.amount_out} <- amount_in={in_q.amount_in} (k {in_q.k_before} -> {in_q.k_after})")
    for event in curve.events:
        print(f"[quote-demo] event {event.to_dict()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
