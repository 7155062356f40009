"""
Deterministic canonical encodings.

Addresses are normalized to lowercase, 0x-prefixed 20-byte hex so that the
same token always maps to the same key regardless of how a caller spelled it.
JSON helpers are used for pool ids and registry snapshot commitments.
"""

from __future__ import annotations

import hashlib
import json
import re
from typing import Any


ADDRESS_BYTES = 20

_HEX_CHARS_RE = re.compile(r"^[0-9a-fA-F]+$")


def canonical_address(value: str, *, name: str = "address") -> str:
    """
    Canonicalize a 20-byte address (lowercase, 0x-prefixed).

    Accepts either 0x-prefixed or raw hex input, in any letter case.
    """
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a str")
    s = value.strip()
    if s[:2].lower() == "0x":
        s = s[2:]
    expected_len = 2 * ADDRESS_BYTES
    if len(s) != expected_len:
        raise ValueError(f"{name} must be {ADDRESS_BYTES} bytes (hex length {expected_len})")
    if not _HEX_CHARS_RE.fullmatch(s):
        raise ValueError(f"{name} must be valid hex")
    return "0x" + s.lower()


def address_to_int(address: str) -> int:
    return int(canonical_address(address), 16)


def _reject_floats(value: Any) -> None:
    if isinstance(value, float):
        raise TypeError("floats are not allowed in canonical encoding")
    if isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeError("dict keys must be str for canonical encoding")
            _reject_floats(v)
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            _reject_floats(item)


def canonical_json_bytes(value: Any) -> bytes:
    """
    Canonical JSON encoding for hashing.

    Rules:
    - UTF-8
    - sort_keys=True
    - separators=(',', ':') (no whitespace)
    - floats rejected (uint256 amounts must stay exact)
    """
    _reject_floats(value)
    text = json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )
    return text.encode("utf-8")


def sha256_hex(data: bytes) -> str:
    return "0x" + hashlib.sha256(data).hexdigest()


def domain_sep_bytes(label: str, version: int = 1) -> bytes:
    """
    Create a domain separation prefix.

    The output is ASCII-only and NUL-terminated to make concatenation unambiguous.
    """
    if not isinstance(label, str) or not label:
        raise TypeError("label must be a non-empty str")
    if "\x00" in label:
        raise ValueError("label must not contain NUL")
    try:
        label_bytes = label.encode("ascii")
    except UnicodeEncodeError as exc:
        raise ValueError("label must be ASCII") from exc
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")
    return b"curvequote:" + label_bytes + b":v" + str(version).encode("ascii") + b"\x00"
