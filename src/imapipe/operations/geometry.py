"""
Geometry Operations

Resize, Canvas, Aspect, Deborder, Crop and Flip.

Argument layouts (positional, "*" keeps the slot default):
- resize[width,height,filter,edgemode]
- canvas[width,height,anchor,fill,anchorx,anchory]
- aspect[num:den,mode,anchor,fill,anchorx,anchory]
- deborder[colour,channels]
- crop[mode,x,y,maxx|width,maxy|height,fill]
- flip[h|v]
"""

from ..parsing.colours import BLACK, TRANSPARENT, lookup_colour, parse_colour
from ..parsing.names import (
    Anchor,
    Channels,
    EdgeMode,
    ResampleFilter,
    parse_anchor,
    parse_channel_letters,
    parse_edge_mode,
    parse_filter,
)
from ..parsing.tokens import as_int, explode
from .base import Operation, anchor_coordinate, anchor_origin, preserve_aspect


class Resize(Operation):
    """Resample to a new size, preserving aspect if one side is unset"""

    NAME = "Resize"

    def parse(self, args):
        self.width = 0
        self.height = 0
        self.filter = ResampleFilter.BILINEAR
        self.edge_mode = EdgeMode.CLAMP

        if not args.has(2):
            return self.invalid("At least 2 arguments required.")

        self.width = as_int(args.next())
        self.height = as_int(args.next())
        if self.width <= 0 and self.height <= 0:
            return self.invalid("Width or Height or both must be specified.")

        self.filter = parse_filter(args.next(), ResampleFilter.BILINEAR)
        self.edge_mode = parse_edge_mode(args.next(), EdgeMode.CLAMP)
        return True

    def run(self, image):
        src_w, src_h = image.width, image.height
        if src_w <= 0 or src_h <= 0:
            return False

        dst_w, dst_h = preserve_aspect(src_w, src_h, self.width, self.height)
        if (dst_w, dst_h) == (src_w, src_h):
            return self.skip("Image already has correct dimensions.")

        self.log(
            "Resample[Dim:%dx%d Filter:%s EdgeMode:%s]",
            dst_w, dst_h, self.filter.value, self.edge_mode.value
        )
        image.resample(dst_w, dst_h, self.filter, self.edge_mode)
        return True


class _Placement(Operation):
    """
    Shared anchor/fill handling for operations that crop or pad to a
    computed size (Canvas, Aspect).
    """

    def parse_placement(self, args) -> None:
        self.anchor = parse_anchor(args.next(), Anchor.MM)
        self.fill = parse_colour(args.next(), BLACK)
        self.anchor_x = anchor_coordinate(args.next())
        self.anchor_y = anchor_coordinate(args.next())

    def place(self, image, src_w: int, src_h: int, dst_w: int, dst_h: int) -> None:
        if self.anchor_x >= 0 and self.anchor_y >= 0:
            origin_x = anchor_origin(self.anchor_x, src_w, dst_w)
            origin_y = anchor_origin(self.anchor_y, src_h, dst_h)
            self.log(
                "Crop[Dim:%dx%d Origin:%d,%d Fill:%s]",
                dst_w, dst_h, origin_x, origin_y, self.fill
            )
            image.crop(dst_w, dst_h, origin_x, origin_y, self.fill)
        else:
            self.log("Crop[Dim:%dx%d Anchor:%s Fill:%s]", dst_w, dst_h, self.anchor.value, self.fill)
            image.crop_anchor(dst_w, dst_h, self.anchor, self.fill)


class Canvas(_Placement):
    """Crop or pad to a new size without resampling"""

    NAME = "Canvas"

    def parse(self, args):
        self.width = 0
        self.height = 0
        self.anchor = Anchor.MM
        self.fill = BLACK
        self.anchor_x = self.anchor_y = -1

        if not args.has(2):
            return self.invalid("At least 2 arguments required.")

        self.width = as_int(args.next())
        self.height = as_int(args.next())
        if self.width <= 0 and self.height <= 0:
            return self.invalid("Width or Height or both must be specified.")

        self.parse_placement(args)
        return True

    def run(self, image):
        src_w, src_h = image.width, image.height
        if src_w <= 0 or src_h <= 0:
            return False

        dst_w, dst_h = preserve_aspect(src_w, src_h, self.width, self.height)
        if (dst_w, dst_h) == (src_w, src_h):
            return self.skip("Image has same dimensions.")

        self.place(image, src_w, src_h, dst_w, dst_h)
        return True


class Aspect(_Placement):
    """
    Crop (or letterbox) to an aspect ratio.

    Crop mode shrinks the side that is too long for the ratio, letterbox
    mode grows the side that is too short and fills the new area.
    """

    NAME = "Aspect"

    CROP = "crop"
    LETTERBOX = "letterbox"

    _MODES = {"crop": CROP, "letter": LETTERBOX, "letterbox": LETTERBOX}

    def parse(self, args):
        self.num = 16
        self.den = 9
        self.mode = self.CROP
        self.anchor = Anchor.MM
        self.fill = BLACK
        self.anchor_x = self.anchor_y = -1

        if not args.has(2):
            return self.invalid("At least 2 arguments required.")

        ratio = explode(args.next(), ":")
        if len(ratio) == 2:
            self.num = as_int(ratio[0])
            self.den = as_int(ratio[1])
            if self.num <= 0:
                self.num = 16
            if self.den <= 0:
                self.den = 9

        self.mode = self._MODES.get((args.next() or "").lower(), self.CROP)
        self.parse_placement(args)
        return True

    def target_size(self, src_w: int, src_h: int):
        """Size after applying the ratio, rounding to the nearest pixel."""
        dst_w, dst_h = src_w, src_h
        # Compare num/den against src_w/src_h without floating point
        wider = self.num * src_h > self.den * src_w
        narrower = self.num * src_h < self.den * src_w

        if self.mode == self.CROP:
            if wider:
                dst_h = round(src_w * self.den / self.num)
            elif narrower:
                dst_w = round(src_h * self.num / self.den)
        else:
            if wider:
                dst_w = round(src_h * self.num / self.den)
            elif narrower:
                dst_h = round(src_w * self.den / self.num)
        return dst_w, dst_h

    def run(self, image):
        src_w, src_h = image.width, image.height
        if src_w <= 0 or src_h <= 0:
            return False

        dst_w, dst_h = self.target_size(src_w, src_h)
        if (dst_w, dst_h) == (src_w, src_h):
            return self.skip("Image has same dimensions.")

        self.place(image, src_w, src_h, dst_w, dst_h)
        return True


class Deborder(Operation):
    """Trim uniform-colour borders"""

    NAME = "Deborder"

    def parse(self, args):
        # None means sample the top-left pixel when applied
        self.test_colour = lookup_colour(args.next())
        self.channels = Channels.RGBA

        token = args.next()
        if token is not None:
            self.channels = parse_channel_letters(token, Channels.RGBA) or Channels.RGBA
        return True

    def run(self, image):
        if image.width <= 0 or image.height <= 0:
            return False

        test_colour = self.test_colour
        if test_colour is None:
            test_colour = image.get_pixel(0, 0)

        self.log("Crop[Col:%s Channels:%s]", test_colour, self.channels.label)
        image.deborder(test_colour, self.channels)
        return True


class Crop(Operation):
    """
    Cut a rectangle, padding with the fill colour outside the source.

    Absolute mode takes inclusive max coordinates, relative mode a size.
    """

    NAME = "Crop"

    ABSOLUTE = "abs"
    RELATIVE = "rel"

    def parse(self, args):
        self.mode = self.ABSOLUTE
        self.origin_x = 0
        self.origin_y = 0
        self.width_or_max_x = 4
        self.height_or_max_y = 4
        self.fill = TRANSPARENT

        if not args.has(5):
            return self.invalid("At least 5 arguments required.")

        mode = (args.next() or "").lower()
        if mode in (self.ABSOLUTE, self.RELATIVE):
            self.mode = mode

        unset = 3 if self.mode == self.ABSOLUTE else 4
        self.origin_x = as_int(args.next())
        self.origin_y = as_int(args.next())
        self.width_or_max_x = as_int(args.next())
        self.height_or_max_y = as_int(args.next())
        if self.width_or_max_x <= 0:
            self.width_or_max_x = unset
        if self.height_or_max_y <= 0:
            self.height_or_max_y = unset

        if self.origin_x < 0 or self.origin_y < 0:
            return self.invalid("OriginX and OriginY must be >= 0.")

        width, height = self.size
        if self.mode == self.ABSOLUTE and (width < 4 or height < 4):
            return self.invalid("MaxX and MaxY must be at least 3 bigger than origin.")
        if self.mode == self.RELATIVE and (width < 4 or height < 4):
            return self.invalid("Width and Height must be >= 4")

        self.fill = parse_colour(args.next(), TRANSPARENT)
        return True

    @property
    def size(self):
        """Final (width, height) of the crop window."""
        if self.mode == self.ABSOLUTE:
            return (
                self.width_or_max_x + 1 - self.origin_x,
                self.height_or_max_y + 1 - self.origin_y,
            )
        return self.width_or_max_x, self.height_or_max_y

    def run(self, image):
        width, height = self.size
        self.log(
            "Crop[w:%d h:%d x:%d y:%d fill:%s]",
            width, height, self.origin_x, self.origin_y, self.fill
        )
        image.crop(width, height, self.origin_x, self.origin_y, self.fill)
        return True


class Flip(Operation):
    """Mirror horizontally (default) or vertically"""

    NAME = "Flip"

    _HORIZONTAL = {"h", "H", "horizontal", "Horizontal"}
    _VERTICAL = {"v", "V", "vertical", "Vertical"}

    def parse(self, args):
        self.horizontal = True
        token = args.next()
        if token in self._VERTICAL:
            self.horizontal = False
        elif token in self._HORIZONTAL:
            self.horizontal = True
        return True

    def run(self, image):
        self.log("Flip[horizontal:%s]", str(self.horizontal).lower())
        image.flip(self.horizontal)
        return True
