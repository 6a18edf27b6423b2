"""
Descriptor Token Parsing

Lenient conversions for the comma-separated arguments of an operation
descriptor. None of these functions raise: a malformed token resolves to
zero or to the caller's default.
"""

import re
from typing import List, Optional

WILDCARD = "*"

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_HEX_PREFIX = re.compile(r"\s*([0-9a-fA-F]+)")

_TRUE_WORDS = {"true", "t", "yes", "y", "on", "1", "enable", "enabled"}


def explode(text: str, separator: str = ",") -> List[str]:
    """
    Split text into tokens on a separator.

    Empty text has no tokens. Empty tokens between separators are kept so
    positional arguments stay in their slots.

    Args:
        text: Argument string (e.g. "800,*,bilinear")
        separator: Single separator character

    Returns:
        List of raw tokens with surrounding whitespace removed
    """
    if not text:
        return []
    return [token.strip() for token in text.split(separator)]


def is_wildcard(token: Optional[str]) -> bool:
    """Check if token is the wildcard meaning "use the slot default"."""
    return token is not None and token.strip() == WILDCARD


def as_int(token: Optional[str], default: int = 0) -> int:
    """
    Parse leading integer of a token.

    "12px" gives 12, "*" and "abc" give the default.
    """
    if not token:
        return default
    match = _INT_PREFIX.match(token)
    if not match:
        return default
    return int(match.group(1))


def as_float(token: Optional[str], default: float = 0.0) -> float:
    """
    Parse leading float of a token.

    "0.25x" gives 0.25, "*" and "abc" give the default.
    """
    if not token:
        return default
    match = _FLOAT_PREFIX.match(token)
    if not match:
        return default
    return float(match.group(1))


def as_hex(token: Optional[str], default: int = 0) -> int:
    """Parse leading hex digits of a token as an unsigned 32-bit value."""
    if not token:
        return default
    match = _HEX_PREFIX.match(token)
    if not match:
        return default
    return int(match.group(1), 16) & 0xFFFFFFFF


def as_bool(token: Optional[str]) -> bool:
    """True for true/t/yes/y/on/1/enable/enabled (any case), else False."""
    if not token:
        return False
    return token.strip().lower() in _TRUE_WORDS


def is_numeric(token: Optional[str]) -> bool:
    """Check if token is a bare (optionally signed) integer."""
    if not token:
        return False
    return re.fullmatch(r"[+-]?\d+", token.strip()) is not None


def clamp(value, low, high):
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def saturate(value: float) -> float:
    """Clamp value into [0, 1]."""
    return clamp(value, 0.0, 1.0)


def trunc_div(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


class ArgCursor:
    """
    Positional reader over exploded descriptor arguments.

    Reading past the last argument yields None, which every parse helper
    treats as "slot not supplied".
    """

    def __init__(self, args: List[str]):
        self.args = list(args)
        self.index = 0

    def __len__(self) -> int:
        return len(self.args)

    def next(self) -> Optional[str]:
        if self.index >= len(self.args):
            self.index += 1
            return None
        token = self.args[self.index]
        self.index += 1
        return token

    def has(self, count: int) -> bool:
        """True if at least count arguments were supplied."""
        return len(self.args) >= count
