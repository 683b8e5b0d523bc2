"""Small text helpers: splitting, trimming, case mapping and hex conversion."""

from __future__ import annotations

_WHITESPACE = " \t\n\v\f\r"
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def split(text: str, delimiter: str) -> list[str]:
    """Split on ``delimiter``, dropping empty pieces."""
    return [piece for piece in text.split(delimiter) if piece]


def trim(text: str) -> str:
    """Remove ASCII whitespace from both ends."""
    return text.strip(_WHITESPACE)


def to_lower(text: str) -> str:
    """Lower-case ASCII letters only."""
    return "".join(c.lower() if c.isascii() else c for c in text)


def to_upper(text: str) -> str:
    """Upper-case ASCII letters only."""
    return "".join(c.upper() if c.isascii() else c for c in text)


def replace(text: str, old: str, new: str) -> str:
    """Replace every non-overlapping occurrence of ``old`` with ``new``."""
    if not old:
        raise ValueError("the text to replace must not be empty")
    return text.replace(old, new)


def to_hex(data: bytes) -> str:
    """Render bytes as lower-case hex pairs, each followed by a space."""
    return "".join(f"{byte:02x} " for byte in data)


def from_hex(text: str) -> bytes:
    """Parse whitespace-separated two-character hex tokens; tokens of other lengths are skipped."""
    result = bytearray()
    for token in text.split():
        if len(token) != 2:
            continue
        digits = ""
        for char in token:
            if char not in _HEX_DIGITS:
                break
            digits += char
        if not digits:
            raise ValueError(f"invalid hex byte: {token!r}")
        result.append(int(digits, 16))
    return bytes(result)