"""
In-Memory Image

A (possibly multi-frame) RGBA image with the mutation primitives the
operation pipeline calls into. Every primitive changes all frames in place,
except tone adjustments which can be scoped to the current frame.

Coordinates have their origin at the top-left pixel.
"""

import logging
import math
from pathlib import Path
from typing import List, Optional

import numpy as np
from PIL import Image as PILImage
from PIL import ImageOps, ImageSequence

from ..config import DEFAULT_CONFIG
from ..parsing.colours import BLACK, TRANSPARENT, Colour
from ..parsing.names import AdjustChannels, Anchor, Channels, EdgeMode, ResampleFilter
from ..parsing.tokens import trunc_div
from . import adjust, quantize
from .formats import FormatDetector

logger = logging.getLogger(__name__)

_PIL_FILTERS = {
    ResampleFilter.NEAREST: PILImage.Resampling.NEAREST,
    ResampleFilter.BOX: PILImage.Resampling.BOX,
    ResampleFilter.BILINEAR: PILImage.Resampling.BILINEAR,
    ResampleFilter.BICUBIC: PILImage.Resampling.BICUBIC,
    ResampleFilter.BICUBIC_CATMULLROM: PILImage.Resampling.BICUBIC,
    ResampleFilter.BICUBIC_MITCHELL: PILImage.Resampling.BICUBIC,
    ResampleFilter.BICUBIC_CARDINAL: PILImage.Resampling.BICUBIC,
    ResampleFilter.BICUBIC_BSPLINE: PILImage.Resampling.BICUBIC,
    ResampleFilter.LANCZOS_NARROW: PILImage.Resampling.LANCZOS,
    ResampleFilter.LANCZOS: PILImage.Resampling.LANCZOS,
    ResampleFilter.LANCZOS_WIDE: PILImage.Resampling.LANCZOS,
    ResampleFilter.NONE: PILImage.Resampling.NEAREST,
}

# Image.rotate() only takes nearest, bilinear and bicubic
_PIL_ROTATE_FILTERS = {
    PILImage.Resampling.NEAREST: PILImage.Resampling.NEAREST,
    PILImage.Resampling.BOX: PILImage.Resampling.BILINEAR,
    PILImage.Resampling.BILINEAR: PILImage.Resampling.BILINEAR,
    PILImage.Resampling.BICUBIC: PILImage.Resampling.BICUBIC,
    PILImage.Resampling.LANCZOS: PILImage.Resampling.BICUBIC,
}

# Filter support radius in source pixels, used to size the wrap padding
_WRAP_MARGIN = 4


def pil_filter(resample_filter: ResampleFilter) -> int:
    """Pillow resampling constant for a filter."""
    return _PIL_FILTERS[resample_filter]


class Image:
    """
    Mutable RGBA image made of one or more frames.

    Attributes:
        frames: Pillow RGBA frames
        frame_num: Current frame cursor (used by single-frame adjustments)
        durations: Per-frame display durations in ms (animated formats)
    """

    def __init__(self, frames: List[PILImage.Image], durations: Optional[List[int]] = None):
        self.frames = [f if f.mode == "RGBA" else f.convert("RGBA") for f in frames]
        self.durations = list(durations) if durations else [0] * len(self.frames)
        self.frame_num = 0
        self._adjust_originals: Optional[List[PILImage.Image]] = None

    # ------------------------------------------------------------------
    # Construction and I/O

    @classmethod
    def open(cls, image_path: Path) -> "Image":
        """
        Load every frame of an image file.

        EXIF orientation is applied to each frame.

        Args:
            image_path: Path to image file

        Returns:
            Image with all frames converted to RGBA
        """
        frames = []
        durations = []
        with PILImage.open(image_path) as img:
            for frame in ImageSequence.Iterator(img):
                durations.append(int(frame.info.get("duration", 0)))
                frames.append(ImageOps.exif_transpose(frame).convert("RGBA"))
        logger.debug("Loaded %s (%d frame(s))", image_path, len(frames))
        return cls(frames, durations)

    @classmethod
    def from_pil(cls, img: PILImage.Image) -> "Image":
        return cls([img.copy()])

    @classmethod
    def new(cls, width: int, height: int, colour: Colour = BLACK, num_frames: int = 1) -> "Image":
        """Solid-colour image, mostly useful for tests and canvases."""
        frames = [PILImage.new("RGBA", (width, height), colour.rgba) for _ in range(num_frames)]
        return cls(frames)

    def to_pil(self, frame: Optional[int] = None) -> PILImage.Image:
        """Copy of one frame (the current frame by default)."""
        index = self.frame_num if frame is None else frame
        return self.frames[index].copy()

    def save(self, output_path: Path, **save_kwargs) -> None:
        """
        Write the image, all frames if the format can hold them.

        Formats without alpha get an RGB copy.
        """
        output_path = Path(output_path)
        image_format = FormatDetector.detect_format(output_path)
        frames = self.frames
        if not FormatDetector.supports_alpha(image_format):
            frames = [f.convert("RGB") for f in frames]

        if len(frames) > 1 and FormatDetector.supports_frames(image_format):
            frames[0].save(
                output_path,
                save_all=True,
                append_images=frames[1:],
                duration=self.durations,
                loop=0,
                **save_kwargs
            )
        else:
            frames[min(self.frame_num, len(frames) - 1)].save(output_path, **save_kwargs)

    # ------------------------------------------------------------------
    # Queries

    @property
    def current(self) -> Optional[PILImage.Image]:
        if not self.frames:
            return None
        return self.frames[min(self.frame_num, len(self.frames) - 1)]

    @property
    def width(self) -> int:
        return self.current.width if self.current else 0

    @property
    def height(self) -> int:
        return self.current.height if self.current else 0

    def get_num_frames(self) -> int:
        return len(self.frames)

    def get_pixel(self, x: int, y: int) -> Colour:
        """Colour of a pixel in the current frame (black if out of range)."""
        frame = self.current
        if frame is None or not (0 <= x < frame.width and 0 <= y < frame.height):
            return BLACK
        return Colour(*frame.getpixel((x, y)))

    def _same_size(self, width: int, height: int) -> bool:
        return all(f.size == (width, height) for f in self.frames)

    # ------------------------------------------------------------------
    # Geometry

    def crop(self, width: int, height: int, origin_x: int, origin_y: int, fill: Colour = TRANSPARENT) -> bool:
        """
        Cut a width x height window whose top-left corner sits at origin.

        Parts of the window outside the source are filled with fill, so this
        also pads (negative origin or window larger than the source).

        Returns:
            False if the window is the whole image already
        """
        if width <= 0 or height <= 0 or not self.frames:
            return False
        if self._same_size(width, height) and origin_x == 0 and origin_y == 0:
            return False

        cropped = []
        for frame in self.frames:
            canvas = PILImage.new("RGBA", (width, height), fill.rgba)
            canvas.paste(frame, (-origin_x, -origin_y))
            cropped.append(canvas)
        self.frames = cropped
        return True

    def crop_anchor(self, width: int, height: int, anchor: Anchor, fill: Colour = TRANSPARENT) -> bool:
        """
        Crop or pad to width x height keeping the anchor position fixed.

        Returns:
            False if every frame already has that size
        """
        if width <= 0 or height <= 0 or not self.frames:
            return False
        if self._same_size(width, height):
            return False

        cropped = []
        for frame in self.frames:
            origin_x = (0, trunc_div(frame.width - width, 2), frame.width - width)[anchor.column]
            origin_y = (0, trunc_div(frame.height - height, 2), frame.height - height)[anchor.row]
            canvas = PILImage.new("RGBA", (width, height), fill.rgba)
            canvas.paste(frame, (-origin_x, -origin_y))
            cropped.append(canvas)
        self.frames = cropped
        return True

    def deborder(self, test_colour: Colour, channels: Channels = Channels.RGBA) -> bool:
        """
        Trim edge rows and columns made entirely of test_colour.

        Only the channels in the mask are compared. A frame that is border
        everywhere is left alone.

        Returns:
            False if no frame had a border
        """
        indices = channels.indices
        if not indices:
            return False

        target = np.array(test_colour.rgba, dtype=np.uint8)[indices]
        changed = False
        trimmed = []
        for frame in self.frames:
            pixels = np.asarray(frame)
            is_border = np.all(pixels[:, :, indices] == target, axis=2)
            keep_rows = ~is_border.all(axis=1)
            keep_cols = ~is_border.all(axis=0)
            if not keep_rows.any():
                trimmed.append(frame)
                continue

            top = int(np.argmax(keep_rows))
            bottom = len(keep_rows) - int(np.argmax(keep_rows[::-1]))
            left = int(np.argmax(keep_cols))
            right = len(keep_cols) - int(np.argmax(keep_cols[::-1]))
            if (left, top, right, bottom) == (0, 0, frame.width, frame.height):
                trimmed.append(frame)
                continue

            trimmed.append(frame.crop((left, top, right, bottom)))
            changed = True

        self.frames = trimmed
        return changed

    def resample(
        self,
        width: int,
        height: int,
        resample_filter: ResampleFilter = ResampleFilter.BILINEAR,
        edge_mode: EdgeMode = EdgeMode.CLAMP
    ) -> bool:
        """
        Rescale every frame to width x height.

        Returns:
            False if every frame already has that size
        """
        if width <= 0 or height <= 0 or not self.frames:
            return False
        if self._same_size(width, height):
            return False

        resample = pil_filter(resample_filter)
        self.frames = [
            self._resample_frame(frame, width, height, resample, edge_mode)
            for frame in self.frames
        ]
        return True

    @staticmethod
    def _resample_frame(frame, width, height, resample, edge_mode):
        if edge_mode is not EdgeMode.WRAP:
            return frame.resize((width, height), resample)

        # Surround the frame with wrapped copies of itself so the filter
        # kernel samples the opposite edge, then resample the interior box.
        pad_x = min(frame.width, _WRAP_MARGIN * max(1, math.ceil(frame.width / width)))
        pad_y = min(frame.height, _WRAP_MARGIN * max(1, math.ceil(frame.height / height)))
        pixels = np.pad(np.asarray(frame), ((pad_y, pad_y), (pad_x, pad_x), (0, 0)), mode="wrap")
        padded = PILImage.fromarray(pixels)
        box = (pad_x, pad_y, pad_x + frame.width, pad_y + frame.height)
        return padded.resize((width, height), resample, box=box)

    def flip(self, horizontal: bool) -> bool:
        """Mirror left-right (horizontal) or top-bottom."""
        method = PILImage.Transpose.FLIP_LEFT_RIGHT if horizontal else PILImage.Transpose.FLIP_TOP_BOTTOM
        self.frames = [f.transpose(method) for f in self.frames]
        return bool(self.frames)

    def rotate90(self, anticlockwise: bool) -> bool:
        """Lossless quarter turn."""
        method = PILImage.Transpose.ROTATE_90 if anticlockwise else PILImage.Transpose.ROTATE_270
        self.frames = [f.transpose(method) for f in self.frames]
        return bool(self.frames)

    def rotate(
        self,
        angle: float,
        fill: Colour = BLACK,
        filter_up: ResampleFilter = ResampleFilter.BILINEAR,
        filter_down: ResampleFilter = ResampleFilter.NONE,
        upscale: Optional[int] = None
    ) -> bool:
        """
        Rotate about the centre by angle radians (positive is anticlockwise).

        The canvas grows to the rotated bounding box and exposed pixels are
        filled with fill.

        Filters:
            filter_up none:    nearest neighbour rotation, colours preserved
            filter_up set:     upscale with filter_up, rotate, then downscale
                               with filter_down (none = box reduction)

        Returns:
            False for a zero angle
        """
        if angle == 0.0 or not self.frames:
            return False

        degrees = math.degrees(angle)
        factor = DEFAULT_CONFIG.ROTATE_UPSCALE if upscale is None else max(1, upscale)
        self.frames = [
            self._rotate_frame(frame, degrees, fill, filter_up, filter_down, factor)
            for frame in self.frames
        ]
        return True

    @staticmethod
    def _rotate_frame(frame, degrees, fill, filter_up, filter_down, factor):
        nearest = PILImage.Resampling.NEAREST
        if filter_up is ResampleFilter.NONE:
            return frame.rotate(degrees, resample=nearest, expand=True, fillcolor=fill.rgba)

        if factor == 1:
            resample = _PIL_ROTATE_FILTERS[pil_filter(filter_up)]
            return frame.rotate(degrees, resample=resample, expand=True, fillcolor=fill.rgba)

        big = frame.resize((frame.width * factor, frame.height * factor), pil_filter(filter_up))
        rotated = big.rotate(degrees, resample=nearest, expand=True, fillcolor=fill.rgba)
        if filter_down is ResampleFilter.NONE:
            return rotated.reduce(factor)

        size = (math.ceil(rotated.width / factor), math.ceil(rotated.height / factor))
        return rotated.resize(size, pil_filter(filter_down))

    # ------------------------------------------------------------------
    # Tone adjustments

    def adjustment_begin(self) -> bool:
        """
        Start an adjustment session.

        Adjustments inside a session are computed from the snapshot taken
        here, so calling adjust_* again replaces rather than compounds.
        """
        if not self.frames:
            return False
        self._adjust_originals = [f.copy() for f in self.frames]
        return True

    def adjustment_end(self) -> bool:
        self._adjust_originals = None
        return True

    def _adjust(self, table, channels: AdjustChannels, all_frames: bool) -> bool:
        if not self.frames:
            return False
        if all_frames:
            targets = range(len(self.frames))
        else:
            targets = [min(max(self.frame_num, 0), len(self.frames) - 1)]

        for index in targets:
            source = self.frames[index]
            if self._adjust_originals is not None:
                source = self._adjust_originals[index]
            self.frames[index] = adjust.apply_table(source, table, channels.mask)
        return True

    def adjust_levels(
        self,
        black_point: float,
        mid_point: float,
        white_point: float,
        black_out: float,
        white_out: float,
        power_mid_gamma: bool = False,
        channels: AdjustChannels = AdjustChannels.RGB,
        all_frames: bool = True
    ) -> bool:
        table = adjust.levels_table(black_point, mid_point, white_point, black_out, white_out, power_mid_gamma)
        return self._adjust(table, channels, all_frames)

    def adjust_contrast(
        self,
        contrast: float,
        channels: AdjustChannels = AdjustChannels.RGB,
        all_frames: bool = True
    ) -> bool:
        return self._adjust(adjust.contrast_table(contrast), channels, all_frames)

    def adjust_brightness(
        self,
        brightness: float,
        channels: AdjustChannels = AdjustChannels.RGB,
        all_frames: bool = True
    ) -> bool:
        return self._adjust(adjust.brightness_table(brightness), channels, all_frames)

    # ------------------------------------------------------------------
    # Quantization

    def quantize_fixed(self, num_colours: int, check_exact: bool = False) -> bool:
        self.frames = [quantize.quantize_fixed(f, num_colours, check_exact) for f in self.frames]
        return bool(self.frames)

    def quantize_spatial(
        self,
        num_colours: int,
        check_exact: bool = False,
        dither_level: float = 0.0,
        filter_size: int = 3
    ) -> bool:
        self.frames = [
            quantize.quantize_spatial(f, num_colours, check_exact, dither_level, filter_size)
            for f in self.frames
        ]
        return bool(self.frames)

    def quantize_neu(self, num_colours: int, check_exact: bool = False, sample_factor: int = 1) -> bool:
        self.frames = [
            quantize.quantize_neu(f, num_colours, check_exact, sample_factor)
            for f in self.frames
        ]
        return bool(self.frames)

    def quantize_wu(self, num_colours: int, check_exact: bool = False) -> bool:
        self.frames = [quantize.quantize_wu(f, num_colours, check_exact) for f in self.frames]
        return bool(self.frames)

    # ------------------------------------------------------------------
    # Channel operations

    def _map_pixels(self, func) -> bool:
        if not self.frames:
            return False
        mapped = []
        for frame in self.frames:
            pixels = np.array(frame, dtype=np.uint8)
            func(pixels)
            mapped.append(PILImage.fromarray(pixels))
        self.frames = mapped
        return True

    def set_all_pixels(self, colour: Colour, channels: Channels = Channels.RGBA) -> bool:
        """Overwrite the masked channels of every pixel with colour."""
        indices = channels.indices
        values = np.array(colour.rgba, dtype=np.uint8)

        def fill(pixels):
            for index in indices:
                pixels[:, :, index] = values[index]

        return self._map_pixels(fill)

    def alpha_blend_colour(self, colour: Colour, channels: Channels = Channels.RGB, final_alpha: int = -1) -> bool:
        """
        Blend colour over the masked RGB channels using colour's alpha.

        Args:
            colour: Blend colour, its alpha is the blend weight
            channels: Colour channels to blend
            final_alpha: Alpha to write afterwards, -1 leaves alpha untouched
        """
        weight = colour.a / 255.0
        indices = [i for i in channels.indices if i < 3]
        values = colour.rgba

        def blend(pixels):
            for index in indices:
                mixed = pixels[:, :, index] * (1.0 - weight) + values[index] * weight
                pixels[:, :, index] = np.rint(mixed).astype(np.uint8)
            if final_alpha >= 0:
                pixels[:, :, 3] = min(final_alpha, 255)

        return self._map_pixels(blend)

    def spread(self, channel: Channels) -> bool:
        """Copy one channel into R, G and B."""
        indices = channel.indices
        if len(indices) != 1:
            return False
        source = indices[0]

        def broadcast(pixels):
            pixels[:, :, 0:3] = pixels[:, :, source:source + 1]

        return self._map_pixels(broadcast)

    def intensity(self, channels: Channels = Channels.RGB) -> bool:
        """Write the RGB mean of each pixel into the masked channels."""
        indices = channels.indices

        def write_intensity(pixels):
            value = np.rint(pixels[:, :, 0:3].mean(axis=2)).astype(np.uint8)
            for index in indices:
                pixels[:, :, index] = value

        return self._map_pixels(write_intensity)
