"""Descriptor token, colour and name parsing"""

from .colours import NAMED_COLOURS, Colour, lookup_colour, parse_colour
from .names import (
    AdjustChannels,
    Anchor,
    Channels,
    EdgeMode,
    ResampleFilter,
    parse_adjust_channels,
    parse_anchor,
    parse_channel_letters,
    parse_edge_mode,
    parse_filter,
)
from .tokens import as_bool, as_float, as_int, explode, is_wildcard

__all__ = [
    "Colour",
    "NAMED_COLOURS",
    "lookup_colour",
    "parse_colour",
    "AdjustChannels",
    "Anchor",
    "Channels",
    "EdgeMode",
    "ResampleFilter",
    "parse_adjust_channels",
    "parse_anchor",
    "parse_channel_letters",
    "parse_edge_mode",
    "parse_filter",
    "as_bool",
    "as_float",
    "as_int",
    "explode",
    "is_wildcard",
]
