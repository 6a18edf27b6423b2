"""
Rotate Operation

rotate[angle,mode,upfilter,downfilter,fill]

The angle is in degrees unless it contains an "r" (radians). A handful of
exact spellings select lossless quarter turns instead of a resampled
rotation:

    "90" "90.0" "acw" "ccw"   anticlockwise 90
    "-90" "-90.0" "cw"        clockwise 90
    "180" "180.0"             half turn
    "*" (or any zero angle)   no rotation

Non-exact rotations grow the canvas to the rotated bounding box. Mode
"crop" (default) then cuts the largest centred window free of fill, and
"resize" additionally scales that window back to the original size.
"""

import math
from enum import Enum

from ..parsing.colours import BLACK, parse_colour
from ..parsing.names import Anchor, EdgeMode, ResampleFilter, parse_filter
from ..parsing.tokens import as_float, is_wildcard
from .base import Operation


class ExactRotation(Enum):
    OFF = "off"
    ZERO = "zero"
    ACW90 = "acw90"
    CW90 = "cw90"
    R180 = "r180"


class RotateMode(Enum):
    FILL = "fill"
    CROP = "crop"
    RESIZE = "resize"


_EXACT_TOKENS = {
    "90": ExactRotation.ACW90,
    "90.0": ExactRotation.ACW90,
    "acw": ExactRotation.ACW90,
    "ccw": ExactRotation.ACW90,
    "-90": ExactRotation.CW90,
    "-90.0": ExactRotation.CW90,
    "cw": ExactRotation.CW90,
    "180": ExactRotation.R180,
    "180.0": ExactRotation.R180,
    "*": ExactRotation.ZERO,
}


def recrop_size(orig_w: int, orig_h: int, rot_w: int, rot_h: int):
    """
    Size of the centred window to cut from a rotated bounding box.

    Args:
        orig_w: Width before rotation
        orig_h: Height before rotation
        rot_w: Width of the rotated bounding box
        rot_h: Height of the rotated bounding box

    Returns:
        (new_w, new_h, orig_w, orig_h), the original size swapped if the
        rotation turned a landscape image portrait or vice versa
    """
    aspect_flip = (orig_w > orig_h and rot_w < rot_h) or (orig_w < orig_h and rot_w > rot_h)
    if aspect_flip:
        orig_w, orig_h = orig_h, orig_w

    dx = rot_w - orig_w
    dy = rot_h - orig_h
    new_w = orig_w - dx
    new_h = orig_h - dy

    if dx > orig_w // 2:
        new_w = orig_w - orig_w // 2
        new_h = (new_w * orig_h) // orig_w
    elif dy > orig_h // 2:
        new_h = orig_h - orig_h // 2
        new_w = (new_h * orig_w) // orig_h

    return new_w, new_h, orig_w, orig_h


class Rotate(Operation):
    """Rotate by an exact quarter turn or an arbitrary angle"""

    NAME = "Rotate"

    def parse(self, args):
        self.exact = ExactRotation.ZERO
        self.angle = 0.0  # Radians
        self.mode = RotateMode.CROP
        self.filter_up = ResampleFilter.BILINEAR
        self.filter_down = ResampleFilter.NONE
        self.filter_up_given = False
        self.fill = BLACK

        if not args.has(1):
            return self.invalid("At least 1 argument required.")

        token = args.next()
        # Exact spellings are case-sensitive
        if token in _EXACT_TOKENS:
            self.exact = _EXACT_TOKENS[token]
            return True

        degrees = "r" not in token
        angle = as_float(token.replace("r", ""))
        if angle == 0.0:
            self.exact = ExactRotation.ZERO
            return True

        self.exact = ExactRotation.OFF
        self.angle = math.radians(angle) if degrees else angle

        mode = args.next()
        try:
            self.mode = RotateMode(mode.lower()) if mode else RotateMode.CROP
        except ValueError:
            self.mode = RotateMode.CROP

        token = args.next()
        self.filter_up_given = bool(token) and not is_wildcard(token)
        self.filter_up = parse_filter(token, ResampleFilter.BILINEAR, allow_none=True)
        self.filter_down = parse_filter(args.next(), ResampleFilter.NONE, allow_none=True)
        self.fill = parse_colour(args.next(), BLACK)
        return True

    def run(self, image):
        if self.exact is ExactRotation.ZERO:
            return self.skip("Zero rotation specified.")
        if self.exact is ExactRotation.ACW90:
            self.log("Rotate90[Anticlockwise:true]")
            image.rotate90(True)
            return True
        if self.exact is ExactRotation.CW90:
            self.log("Rotate90[Anticlockwise:false]")
            image.rotate90(False)
            return True
        if self.exact is ExactRotation.R180:
            self.log("2X Rotate90[Anticlockwise:true]")
            image.rotate90(True)
            image.rotate90(True)
            return True

        orig_w, orig_h = image.width, image.height
        if orig_w <= 0 or orig_h <= 0:
            return False

        self.log(
            "Rotate[rad:%f deg:%f upfilt:%s dnfilt:%s fill:%s]",
            self.angle, math.degrees(self.angle),
            self.filter_up.value, self.filter_down.value, self.fill
        )
        image.rotate(self.angle, self.fill, self.filter_up, self.filter_down)

        if self.mode in (RotateMode.CROP, RotateMode.RESIZE):
            new_w, new_h, orig_w, orig_h = recrop_size(orig_w, orig_h, image.width, image.height)
            self.log("Crop[w:%d h:%d anc:mm]", new_w, new_h)
            image.crop_anchor(new_w, new_h, Anchor.MM)

        if self.mode is RotateMode.RESIZE:
            resample_filter = ResampleFilter.NEAREST
            if self.filter_up_given and self.filter_up is not ResampleFilter.NONE:
                resample_filter = self.filter_up
            self.log("Resample[w:%d h:%d filt:%s edge:clamp]", orig_w, orig_h, resample_filter.value)
            image.resample(orig_w, orig_h, resample_filter, EdgeMode.CLAMP)

        return True
