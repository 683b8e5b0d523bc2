"""Lenient Base64 encoding and decoding."""

from __future__ import annotations

import base64
import string

_ALPHABET = frozenset(string.ascii_letters + string.digits + "+/")


def encode(data: bytes | str) -> str:
    """Base64-encode bytes, or a string as UTF-8."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    if not data:
        return ""
    return base64.b64encode(data).decode("ascii")


def decode(encoded: str) -> bytes:
    """Decode Base64, ignoring characters outside the alphabet and missing padding."""
    cleaned = "".join(c for c in encoded if c in _ALPHABET)
    if len(cleaned) % 4 == 1:
        cleaned = cleaned[:-1]
    if not cleaned:
        return b""
    cleaned += "=" * (-len(cleaned) % 4)
    return base64.b64decode(cleaned)


def decode_to_string(encoded: str) -> str:
    """Decode Base64 into text, replacing invalid UTF-8 sequences."""
    return decode(encoded).decode("utf-8", errors="replace")