"""
Tone Adjustment Operations

- levels[black,mid,white,outblack,outwhite,frame,channels,powermidgamma]
- contrast[value,frame,channels]
- brightness[value,frame,channels]

A frame of "*" (the default) adjusts every frame. A frame number adjusts
that frame only; the image frame cursor is restored afterwards.
"""

from ..parsing.names import AdjustChannels, parse_adjust_channels
from ..parsing.tokens import as_bool, as_float, as_int, clamp, is_wildcard, saturate
from .base import Operation

ALL_FRAMES = -1


def parse_frame(token) -> int:
    """Frame selector, ALL_FRAMES when absent or "*"."""
    if token is None or is_wildcard(token):
        return ALL_FRAMES
    return as_int(token)


def _float_or(token, default: float) -> float:
    """Float value of a token, default when absent or "*"."""
    if token is None or is_wildcard(token):
        return default
    return as_float(token)


class _FrameScoped(Operation):
    """Selects the frame an adjustment applies to"""

    frame_number = ALL_FRAMES

    def adjust(self, image, func) -> bool:
        """
        Run func(all_frames) inside an adjustment session.

        The frame cursor is moved to the selected frame for the duration and
        restored afterwards.
        """
        original_frame = image.frame_num
        all_frames = True
        if self.frame_number > ALL_FRAMES:
            image.frame_num = clamp(self.frame_number, 0, image.get_num_frames() - 1)
            all_frames = False

        image.adjustment_begin()
        try:
            return func(all_frames)
        finally:
            image.adjustment_end()
            image.frame_num = original_frame


class Levels(_FrameScoped):
    """Remap black, mid and white input points and the output range"""

    NAME = "Levels"

    def parse(self, args):
        self.black_point = 0.0
        self.mid_point = 0.5
        self.white_point = 1.0
        self.out_black = 0.0
        self.out_white = 1.0
        self.frame_number = ALL_FRAMES
        self.channels = AdjustChannels.RGB
        self.power_mid_gamma = False

        if not args.has(3):
            return self.invalid("At least 3 arguments required.")

        self.black_point = saturate(_float_or(args.next(), 0.0))
        mid_token = args.next()
        self.white_point = saturate(_float_or(args.next(), 1.0))

        if is_wildcard(mid_token):
            # Auto mid point
            self.white_point = max(self.white_point, self.black_point)
            self.mid_point = (self.white_point + self.black_point) / 2.0
        else:
            self.mid_point = max(saturate(as_float(mid_token)), self.black_point)
            self.white_point = max(self.white_point, self.mid_point)

        self.out_black = _float_or(args.next(), 0.0)
        self.out_white = max(_float_or(args.next(), 1.0), self.out_black)

        self.frame_number = parse_frame(args.next())
        self.channels = parse_adjust_channels(args.next(), AdjustChannels.RGB)

        token = args.next()
        if token is not None:
            self.power_mid_gamma = is_wildcard(token) or as_bool(token)
        return True

    @property
    def is_identity(self) -> bool:
        return (self.black_point, self.mid_point, self.white_point, self.out_black, self.out_white) == (
            0.0, 0.5, 1.0, 0.0, 1.0
        )

    def run(self, image):
        if self.is_identity:
            return self.skip("All point levels at default.")

        def levels(all_frames):
            self.log(
                "AdjustLevels[blackpoint:%4.2f midpoint:%4.2f whitepoint:%4.2f "
                "outblackpoint:%4.2f outwhitepoint:%4.2f powermidgamma:%s channels:%s allframes:%s]",
                self.black_point, self.mid_point, self.white_point,
                self.out_black, self.out_white,
                str(self.power_mid_gamma).lower(), self.channels.value, str(all_frames).lower()
            )
            return image.adjust_levels(
                self.black_point, self.mid_point, self.white_point,
                self.out_black, self.out_white, self.power_mid_gamma,
                self.channels, all_frames
            )

        return self.adjust(image, levels)


class _SingleValue(_FrameScoped):
    """Adjustment with a single 0-1 value where 0.5 is the identity"""

    PRIMITIVE = ""
    FIELD = ""

    def parse(self, args):
        self.value = 0.5
        self.frame_number = ALL_FRAMES
        self.channels = AdjustChannels.RGB

        if not args.has(1):
            return self.invalid("At least 1 argument required.")

        token = args.next()
        self.value = 0.5 if is_wildcard(token) else saturate(as_float(token))
        self.frame_number = parse_frame(args.next())
        self.channels = parse_adjust_channels(args.next(), AdjustChannels.RGB)
        return True

    def adjust_image(self, image, all_frames) -> bool:
        raise NotImplementedError

    def run(self, image):
        if self.value == 0.5:
            return self.skip("Value of 0.5 does not modify image.")

        def single(all_frames):
            self.log(
                "%s[%s:%4.2f channels:%s allframes:%s]",
                self.PRIMITIVE, self.FIELD, self.value, self.channels.value, str(all_frames).lower()
            )
            return self.adjust_image(image, all_frames)

        return self.adjust(image, single)


class Contrast(_SingleValue):
    NAME = "Contrast"
    PRIMITIVE = "AdjustContrast"
    FIELD = "contrast"

    def adjust_image(self, image, all_frames):
        return image.adjust_contrast(self.value, self.channels, all_frames)


class Brightness(_SingleValue):
    NAME = "Brightness"
    PRIMITIVE = "AdjustBrightness"
    FIELD = "brightness"

    def adjust_image(self, image, all_frames):
        return image.adjust_brightness(self.value, self.channels, all_frames)
