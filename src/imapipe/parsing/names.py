"""
Name Tables

Immutable lookup tables for the named tokens of the descriptor grammar:
resample filters, edge modes, anchors and channel masks. All lookups are
case-insensitive and fall back to a caller-supplied default.
"""

from enum import Enum, IntFlag
from typing import Optional

from .tokens import is_wildcard


class ResampleFilter(Enum):
    """Resampling filters, valued by their descriptor names"""
    NEAREST = "nearest"
    BOX = "box"
    BILINEAR = "bilinear"
    BICUBIC = "bicubic"
    BICUBIC_CATMULLROM = "bicubic_catmullrom"
    BICUBIC_MITCHELL = "bicubic_mitchell"
    BICUBIC_CARDINAL = "bicubic_cardinal"
    BICUBIC_BSPLINE = "bicubic_bspline"
    LANCZOS_NARROW = "lanczos_narrow"
    LANCZOS = "lanczos"
    LANCZOS_WIDE = "lanczos_wide"
    NONE = "none"  # Only accepted where a filter may be switched off (rotate)


class EdgeMode(Enum):
    """How resampling reads pixels beyond the image edge"""
    CLAMP = "clamp"
    WRAP = "wrap"


class Anchor(Enum):
    """Nine reference positions for crops and canvas resizes"""
    TL = "tl"
    TM = "tm"
    TR = "tr"
    ML = "ml"
    MM = "mm"
    MR = "mr"
    BL = "bl"
    BM = "bm"
    BR = "br"

    @property
    def column(self) -> int:
        """0 left, 1 middle, 2 right"""
        return "lmr".index(self.value[1])

    @property
    def row(self) -> int:
        """0 top, 1 middle, 2 bottom"""
        return "tmb".index(self.value[0])


class Channels(IntFlag):
    """Bit set over the four colour channels"""
    NONE = 0
    R = 1
    G = 2
    B = 4
    A = 8
    RGB = 7
    RGBA = 15

    @property
    def label(self) -> str:
        """Channel letters in RGBA order, e.g. "RGA"."""
        return "".join(name for name, bit in _CHANNEL_BITS if self & bit)

    @property
    def indices(self):
        """Band indices (0-3) selected by the mask."""
        return [index for index, (_, bit) in enumerate(_CHANNEL_BITS) if self & bit]

    def lowest(self) -> "Channels":
        """Only the lowest set bit (R before G before B before A)."""
        for _, bit in _CHANNEL_BITS:
            if self & bit:
                return bit
        return Channels.NONE


_CHANNEL_BITS = (
    ("R", Channels.R),
    ("G", Channels.G),
    ("B", Channels.B),
    ("A", Channels.A),
)


class AdjustChannels(Enum):
    """Channel selection for levels, contrast and brightness"""
    RGB = "rgb"
    R = "r"
    G = "g"
    B = "b"
    A = "a"

    @property
    def mask(self) -> Channels:
        return Channels[self.name]


def parse_filter(
    token: Optional[str],
    default: ResampleFilter,
    allow_none: bool = False
) -> ResampleFilter:
    """
    Look up a resample filter by name.

    Args:
        token: Filter name, any case
        default: Returned for "*", missing or unknown names
        allow_none: Accept "none" (rotation up/down filters)

    Returns:
        ResampleFilter
    """
    if not token or is_wildcard(token):
        return default
    try:
        resample_filter = ResampleFilter(token.strip().lower())
    except ValueError:
        return default
    if resample_filter is ResampleFilter.NONE and not allow_none:
        return default
    return resample_filter


def parse_edge_mode(token: Optional[str], default: EdgeMode = EdgeMode.CLAMP) -> EdgeMode:
    """Look up an edge mode by name, falling back to default."""
    if not token:
        return default
    try:
        return EdgeMode(token.strip().lower())
    except ValueError:
        return default


def parse_anchor(token: Optional[str], default: Anchor = Anchor.MM) -> Anchor:
    """Look up a two-letter anchor code (tl, tm, ... br), falling back to default."""
    if not token:
        return default
    try:
        return Anchor(token.strip().lower())
    except ValueError:
        return default


def parse_channel_letters(token: Optional[str], wildcard: Channels = Channels.RGBA) -> Channels:
    """
    Build a channel mask from the r/g/b/a letters found in a token.

    A "*" anywhere in the token adds the wildcard set. Letters are matched
    case-insensitively. Missing tokens give an empty mask.
    """
    mask = Channels.NONE
    if not token:
        return mask
    lowered = token.lower()
    if "*" in lowered:
        mask |= wildcard
    for letter, bit in _CHANNEL_BITS:
        if letter.lower() in lowered:
            mask |= bit
    return mask


def parse_adjust_channels(
    token: Optional[str],
    default: AdjustChannels = AdjustChannels.RGB
) -> AdjustChannels:
    """Look up rgb/r/g/b/a ("*" is rgb), falling back to default."""
    if not token:
        return default
    if is_wildcard(token):
        return AdjustChannels.RGB
    try:
        return AdjustChannels(token.strip().lower())
    except ValueError:
        return default
