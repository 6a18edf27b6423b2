"""
Colour Quantization

Palette reduction for RGBA frames. The colour channels are reduced and the
alpha channel is carried over untouched.

Method mapping onto Pillow:
- Fixed:   fixed uniform palette, independent of the image
- Wu:      median cut (variance-splitting boxes)
- Neu:     fast octree palette learned from a sample-factor-reduced copy
- Spatial: median cut palette learned from a copy smoothed by the filter
           size, Floyd-Steinberg dithering when the dither level is above 0
"""

from typing import List, Sequence, Tuple

from PIL import Image as PILImage
from PIL import ImageFilter


def _split_alpha(frame: PILImage.Image) -> Tuple[PILImage.Image, PILImage.Image]:
    return frame.convert("RGB"), frame.getchannel("A")


def _merge_alpha(quantized: PILImage.Image, alpha: PILImage.Image) -> PILImage.Image:
    red, green, blue = quantized.convert("RGB").split()
    return PILImage.merge("RGBA", (red, green, blue, alpha))


def _is_exact(rgb: PILImage.Image, num_colours: int) -> bool:
    """True if the frame already uses at most num_colours colours."""
    return rgb.getcolors(maxcolors=num_colours) is not None


def _palette_image(colours: Sequence[Tuple[int, int, int]]) -> PILImage.Image:
    """
    Build a "P" image usable as a quantize() palette.

    Unused slots repeat the last colour so they never add a new colour.
    """
    colours = list(colours)[:256]
    colours.extend([colours[-1]] * (256 - len(colours)))
    flat: List[int] = []
    for colour in colours:
        flat.extend(colour)
    palette = PILImage.new("P", (1, 1))
    palette.putpalette(flat)
    return palette


def _learned_colours(paletted: PILImage.Image, num_colours: int) -> List[Tuple[int, int, int]]:
    """Colours actually used by a quantize() result, at most num_colours."""
    palette = paletted.getpalette() or [0, 0, 0]
    used = sorted(index for _, index in paletted.getcolors(maxcolors=256) or [])
    colours = [tuple(palette[3 * index:3 * index + 3]) for index in used[:num_colours]]
    return colours or [(0, 0, 0)]


def fixed_palette(num_colours: int) -> List[Tuple[int, int, int]]:
    """
    Uniform palette of at most num_colours colours.

    Uses the largest n*n*n RGB cube that fits, or a grey ramp when fewer
    than 8 colours are requested.
    """
    levels = 1
    while (levels + 1) ** 3 <= num_colours:
        levels += 1

    if levels < 2:
        steps = max(num_colours, 2)
        return [(round(255 * i / (steps - 1)),) * 3 for i in range(steps)]

    values = [round(255 * i / (levels - 1)) for i in range(levels)]
    return [(r, g, b) for r in values for g in values for b in values]


def quantize_fixed(frame: PILImage.Image, num_colours: int, check_exact: bool) -> PILImage.Image:
    rgb, alpha = _split_alpha(frame)
    if check_exact and _is_exact(rgb, num_colours):
        return frame
    palette = _palette_image(fixed_palette(num_colours))
    quantized = rgb.quantize(palette=palette, dither=PILImage.Dither.NONE)
    return _merge_alpha(quantized, alpha)


def quantize_wu(frame: PILImage.Image, num_colours: int, check_exact: bool) -> PILImage.Image:
    rgb, alpha = _split_alpha(frame)
    if check_exact and _is_exact(rgb, num_colours):
        return frame
    quantized = rgb.quantize(
        colors=num_colours,
        method=PILImage.Quantize.MEDIANCUT,
        dither=PILImage.Dither.NONE
    )
    return _merge_alpha(quantized, alpha)


def quantize_neu(
    frame: PILImage.Image,
    num_colours: int,
    check_exact: bool,
    sample_factor: int
) -> PILImage.Image:
    rgb, alpha = _split_alpha(frame)
    if check_exact and _is_exact(rgb, num_colours):
        return frame

    sample = rgb.reduce(sample_factor) if sample_factor > 1 else rgb
    learned = sample.quantize(colors=num_colours, method=PILImage.Quantize.FASTOCTREE)
    palette = _palette_image(_learned_colours(learned, num_colours))
    quantized = rgb.quantize(palette=palette, dither=PILImage.Dither.NONE)
    return _merge_alpha(quantized, alpha)


def quantize_spatial(
    frame: PILImage.Image,
    num_colours: int,
    check_exact: bool,
    dither_level: float,
    filter_size: int
) -> PILImage.Image:
    rgb, alpha = _split_alpha(frame)
    if check_exact and _is_exact(rgb, num_colours):
        return frame

    radius = (filter_size - 1) // 2
    smoothed = rgb.filter(ImageFilter.BoxBlur(radius)) if radius > 0 else rgb
    learned = smoothed.quantize(colors=num_colours, method=PILImage.Quantize.MEDIANCUT)
    palette = _palette_image(_learned_colours(learned, num_colours))

    dither = PILImage.Dither.FLOYDSTEINBERG if dither_level > 0.0 else PILImage.Dither.NONE
    quantized = rgb.quantize(palette=palette, dither=dither)
    return _merge_alpha(quantized, alpha)
