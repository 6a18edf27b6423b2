"""
Tone Adjustment Curves

Levels, contrast and brightness are applied as 256-entry lookup tables so
a frame is remapped with a single Pillow point() call per adjustment.
"""

import math

import numpy as np
from PIL import Image as PILImage

from ..parsing.names import Channels

_RAMP = np.arange(256, dtype=np.float64) / 255.0
_EPSILON = 1e-6


def _to_table(values: np.ndarray) -> np.ndarray:
    return np.rint(np.clip(values, 0.0, 1.0) * 255.0).astype(np.uint8)


def levels_table(
    black_point: float,
    mid_point: float,
    white_point: float,
    black_out: float,
    white_out: float,
    power_mid_gamma: bool
) -> np.ndarray:
    """
    Build a levels lookup table.

    Input is normalised so black_point maps to 0 and white_point to 1. The
    mid point is then sent to 0.5, either by a power curve (power_mid_gamma)
    or by two linear segments. The result is scaled into
    [black_out, white_out].

    Args:
        black_point: Input black point 0-1
        mid_point: Input mid point 0-1, between black and white point
        white_point: Input white point 0-1
        black_out: Output black level
        white_out: Output white level
        power_mid_gamma: Use a gamma curve through the mid point

    Returns:
        uint8 array of 256 entries
    """
    span = max(white_point - black_point, _EPSILON)
    value = np.clip((_RAMP - black_point) / span, 0.0, 1.0)
    mid = min(max((mid_point - black_point) / span, _EPSILON), 1.0 - _EPSILON)

    if power_mid_gamma:
        gamma = math.log(0.5) / math.log(mid)
        value = np.power(value, gamma)
    else:
        value = np.where(
            value < mid,
            0.5 * value / mid,
            0.5 + 0.5 * (value - mid) / (1.0 - mid)
        )

    return _to_table(black_out + value * (white_out - black_out))


def contrast_table(contrast: float) -> np.ndarray:
    """
    Build a contrast lookup table.

    0.5 is the identity, 0 flattens everything to mid grey and values
    toward 1 steepen the curve around mid grey.
    """
    angle = min(contrast, 1.0 - _EPSILON) * math.pi / 2.0
    slope = math.tan(angle)
    return _to_table((_RAMP - 0.5) * slope + 0.5)


def brightness_table(brightness: float) -> np.ndarray:
    """
    Build a brightness lookup table.

    0.5 is the identity, 0 is fully dark and 1 fully bright.
    """
    return _to_table(_RAMP + (brightness - 0.5) * 2.0)


def apply_table(frame: PILImage.Image, table: np.ndarray, channels: Channels) -> PILImage.Image:
    """
    Remap the selected channels of an RGBA frame through a lookup table.

    Args:
        frame: RGBA frame
        table: 256-entry uint8 table
        channels: Channels to remap, the rest pass through

    Returns:
        New RGBA frame
    """
    identity = list(range(256))
    mapped = table.tolist()
    lut = []
    for bit in (Channels.R, Channels.G, Channels.B, Channels.A):
        lut.extend(mapped if channels & bit else identity)
    return frame.point(lut)
