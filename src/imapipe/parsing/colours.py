"""
Colour Tokens

RGBA colour value plus the rules for reading a colour from a descriptor
token: "#RRGGBBAA" hex, a fixed set of names, or (where allowed) a bare
integer broadcast to all four channels.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional, Tuple

from .tokens import as_hex, as_int, clamp, is_numeric


@dataclass(frozen=True)
class Colour:
    """
    RGBA colour with 8 bits per channel.

    Attributes:
        r: Red 0-255
        g: Green 0-255
        b: Blue 0-255
        a: Alpha 0-255 (255 is opaque)
    """
    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 255

    @property
    def rgba(self) -> Tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)

    @classmethod
    def from_hex(cls, value: int) -> "Colour":
        """Build from a packed 0xRRGGBBAA integer."""
        return cls(
            (value >> 24) & 0xFF,
            (value >> 16) & 0xFF,
            (value >> 8) & 0xFF,
            value & 0xFF,
        )

    @classmethod
    def grey_level(cls, value: int) -> "Colour":
        """Same value in all four channels, clamped to 0-255."""
        value = clamp(value, 0, 255)
        return cls(value, value, value, value)

    def __str__(self) -> str:
        return f"{self.r:02x},{self.g:02x},{self.b:02x},{self.a:02x}"


BLACK = Colour(0, 0, 0, 255)
WHITE = Colour(255, 255, 255, 255)
GREY = Colour(128, 128, 128, 255)
RED = Colour(255, 0, 0, 255)
GREEN = Colour(0, 255, 0, 255)
BLUE = Colour(0, 0, 255, 255)
YELLOW = Colour(255, 255, 0, 255)
CYAN = Colour(0, 255, 255, 255)
MAGENTA = Colour(255, 0, 255, 255)
TRANSPARENT = Colour(0, 0, 0, 0)

NAMED_COLOURS = MappingProxyType({
    "black": BLACK,
    "white": WHITE,
    "grey": GREY,
    "gray": GREY,
    "red": RED,
    "green": GREEN,
    "blue": BLUE,
    "yellow": YELLOW,
    "cyan": CYAN,
    "magenta": MAGENTA,
    "transparent": TRANSPARENT,
    "trans": TRANSPARENT,
})


def lookup_colour(token: Optional[str], allow_numeric: bool = False) -> Optional[Colour]:
    """
    Resolve a colour token.

    Args:
        token: "#RRGGBBAA", a colour name (any case) or, with allow_numeric,
               a bare integer such as "128"
        allow_numeric: Accept a bare integer broadcast to RGBA

    Returns:
        Colour, or None if the token names no colour (including "*")
    """
    if not token:
        return None
    token = token.strip()
    if token.startswith("#"):
        return Colour.from_hex(as_hex(token[1:]))
    if allow_numeric and is_numeric(token):
        return Colour.grey_level(as_int(token))
    return NAMED_COLOURS.get(token.lower())


def parse_colour(token: Optional[str], default: Colour, allow_numeric: bool = False) -> Colour:
    """Resolve a colour token, keeping the default when it names no colour."""
    colour = lookup_colour(token, allow_numeric=allow_numeric)
    return default if colour is None else colour
