"""
Colour Operations

- quantize[method,numcolours,checkexact,sampfilt,dither]
- channel[mode,channels,colour]
"""

from enum import Enum

from ..parsing.colours import BLACK, parse_colour
from ..parsing.names import Channels, parse_channel_letters
from ..parsing.tokens import as_bool, as_float, as_int, clamp, is_wildcard
from .base import Operation


class QuantizeMethod(Enum):
    FIXED = "fix"
    SPATIAL = "spc"
    NEU = "neu"
    WU = "wu"


class Quantize(Operation):
    """
    Reduce the number of colours.

    The fourth argument depends on the method: a filter size (1, 3 or 5)
    for spatial, a sample factor (1-30) for neu. The dither level (0-30) is
    only read by spatial.
    """

    NAME = "Quantize"

    def parse(self, args):
        self.method = QuantizeMethod.WU
        self.num_colours = 256
        self.check_exact = False
        self.samp_filt = 0
        self.dither = 0.0

        if not args.has(2):
            return self.invalid("At least 2 arguments required.")

        token = (args.next() or "").lower()
        if is_wildcard(token):
            self.method = QuantizeMethod.WU
        else:
            try:
                self.method = QuantizeMethod(token)
            except ValueError:
                self.method = QuantizeMethod.WU

        token = args.next()
        self.num_colours = 256 if is_wildcard(token) else as_int(token)
        self.num_colours = clamp(self.num_colours, 2, 256)

        token = args.next()
        if token is not None:
            self.check_exact = as_bool(token)

        token = args.next()
        if self.method is QuantizeMethod.SPATIAL:
            self.samp_filt = 3
            if token is not None and not is_wildcard(token):
                self.samp_filt = as_int(token)
            if self.samp_filt not in (1, 3, 5):
                self.samp_filt = 3
        elif self.method is QuantizeMethod.NEU:
            self.samp_filt = 1
            if token is not None and not is_wildcard(token):
                self.samp_filt = clamp(as_int(token), 1, 30)

        token = args.next()
        if self.method is QuantizeMethod.SPATIAL and token is not None and not is_wildcard(token):
            self.dither = clamp(as_float(token), 0.0, 30.0)
        return True

    def run(self, image):
        exact = str(self.check_exact).lower()
        if self.method is QuantizeMethod.FIXED:
            self.log("QuantizeFixed[numcolours:%d exact:%s]", self.num_colours, exact)
            return image.quantize_fixed(self.num_colours, self.check_exact)

        if self.method is QuantizeMethod.SPATIAL:
            self.log(
                "QuantizeSpatial[numcolours:%d exact:%s dith:%f filt:%d]",
                self.num_colours, exact, self.dither, self.samp_filt
            )
            return image.quantize_spatial(self.num_colours, self.check_exact, self.dither, self.samp_filt)

        if self.method is QuantizeMethod.NEU:
            self.log("QuantizeNeu[numcolours:%d exact:%s samp:%d]", self.num_colours, exact, self.samp_filt)
            return image.quantize_neu(self.num_colours, self.check_exact, self.samp_filt)

        self.log("QuantizeWu[numcolours:%d exact:%s]", self.num_colours, exact)
        return image.quantize_wu(self.num_colours, self.check_exact)


class ChannelMode(Enum):
    SET = "set"
    BLEND = "blend"
    SPREAD = "spread"
    INTENSITY = "intens"


# Channels selected by "*" for each mode
_WILDCARD_CHANNELS = {
    ChannelMode.SET: Channels.RGB,
    ChannelMode.BLEND: Channels.RGBA,
    ChannelMode.SPREAD: Channels.R,
    ChannelMode.INTENSITY: Channels.RGB,
}


class Channel(Operation):
    """
    Per-channel edits.

    Modes:
        set:    overwrite the masked channels with the colour
        blend:  blend the colour (by its alpha) into the masked channels,
                and set alpha to the colour's alpha if A is masked
        spread: copy one channel into R, G and B
        intens: write the pixel intensity into the masked channels
    """

    NAME = "Channel"

    def parse(self, args):
        self.mode = ChannelMode.BLEND
        self.colour = BLACK

        token = args.next()
        if token and not is_wildcard(token):
            try:
                self.mode = ChannelMode(token.lower())
            except ValueError:
                self.mode = ChannelMode.BLEND
        self.channels = _WILDCARD_CHANNELS[self.mode]

        token = args.next()
        if token is not None:
            channels = parse_channel_letters(token, _WILDCARD_CHANNELS[self.mode])
            self.channels = channels or Channels.R
            if self.mode is ChannelMode.SPREAD:
                self.channels = self.channels.lowest()

        self.colour = parse_colour(args.next(), BLACK, allow_numeric=True)
        return True

    def run(self, image):
        channels = self.channels.label
        if self.mode is ChannelMode.SET:
            self.log("SetAllPixels[colour:%s channels:%s]", self.colour, channels)
            return image.set_all_pixels(self.colour, self.channels)

        if self.mode is ChannelMode.BLEND:
            final_alpha = self.colour.a if self.channels & Channels.A else -1
            self.log(
                "AlphaBlendColour[colour:%s channels:%s finalAlpha:%d]",
                self.colour, channels, final_alpha
            )
            return image.alpha_blend_colour(self.colour, self.channels, final_alpha)

        if self.mode is ChannelMode.SPREAD:
            self.log("Spread[channel:%s]", channels)
            return image.spread(self.channels)

        self.log("Intensity[channels:%s]", channels)
        return image.intensity(self.channels)
