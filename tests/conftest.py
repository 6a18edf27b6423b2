"""
Shared fixtures

Images are built in memory with Pillow; RecordingImage stands in for an
Image where only the dispatched primitive calls matter.
"""

import numpy as np
import pytest
from PIL import Image as PILImage

from imapipe.image import Image
from imapipe.parsing.colours import Colour


class RecordingImage:
    """Records primitive calls and tracks size like a real Image would."""

    def __init__(self, width=100, height=100, num_frames=1, pixel=Colour(0, 0, 0, 255)):
        self.width = width
        self.height = height
        self.num_frames = num_frames
        self.frame_num = 0
        self.pixel = pixel
        self.calls = []
        self.frame_during_adjust = None

    def _record(self, name, *args):
        self.calls.append((name, args))
        return True

    @property
    def names(self):
        return [name for name, _ in self.calls]

    def call(self, name):
        """Arguments of the first call to a primitive."""
        for call_name, args in self.calls:
            if call_name == name:
                return args
        raise AssertionError(f"{name} was not called; calls: {self.names}")

    def get_num_frames(self):
        return self.num_frames

    def get_pixel(self, x, y):
        self._record("get_pixel", x, y)
        return self.pixel

    def crop(self, width, height, origin_x, origin_y, fill):
        self.width, self.height = width, height
        return self._record("crop", width, height, origin_x, origin_y, fill)

    def crop_anchor(self, width, height, anchor, fill=None):
        self.width, self.height = width, height
        return self._record("crop_anchor", width, height, anchor, fill)

    def deborder(self, test_colour, channels):
        return self._record("deborder", test_colour, channels)

    def resample(self, width, height, resample_filter, edge_mode):
        self.width, self.height = width, height
        return self._record("resample", width, height, resample_filter, edge_mode)

    def flip(self, horizontal):
        return self._record("flip", horizontal)

    def rotate90(self, anticlockwise):
        self.width, self.height = self.height, self.width
        return self._record("rotate90", anticlockwise)

    def rotate(self, angle, fill, filter_up, filter_down):
        # Bounding box of the rotated rectangle
        cos, sin = abs(np.cos(angle)), abs(np.sin(angle))
        width = int(np.ceil(self.width * cos + self.height * sin))
        height = int(np.ceil(self.width * sin + self.height * cos))
        self.width, self.height = width, height
        return self._record("rotate", angle, fill, filter_up, filter_down)

    def adjustment_begin(self):
        self.frame_during_adjust = self.frame_num
        return self._record("adjustment_begin")

    def adjustment_end(self):
        return self._record("adjustment_end")

    def adjust_levels(self, *args):
        return self._record("adjust_levels", *args)

    def adjust_contrast(self, *args):
        return self._record("adjust_contrast", *args)

    def adjust_brightness(self, *args):
        return self._record("adjust_brightness", *args)

    def quantize_fixed(self, *args):
        return self._record("quantize_fixed", *args)

    def quantize_spatial(self, *args):
        return self._record("quantize_spatial", *args)

    def quantize_neu(self, *args):
        return self._record("quantize_neu", *args)

    def quantize_wu(self, *args):
        return self._record("quantize_wu", *args)

    def set_all_pixels(self, *args):
        return self._record("set_all_pixels", *args)

    def alpha_blend_colour(self, *args):
        return self._record("alpha_blend_colour", *args)

    def spread(self, *args):
        return self._record("spread", *args)

    def intensity(self, *args):
        return self._record("intensity", *args)


def gradient_pil(width, height):
    """RGBA image with distinct values per pixel (red by x, green by y)."""
    x = np.linspace(0, 255, width, dtype=np.float64)
    y = np.linspace(0, 255, height, dtype=np.float64)
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :, 0] = np.rint(x)[np.newaxis, :]
    pixels[:, :, 1] = np.rint(y)[:, np.newaxis]
    pixels[:, :, 2] = 64
    pixels[:, :, 3] = 255
    return PILImage.fromarray(pixels)


@pytest.fixture
def recording_image():
    return RecordingImage()


@pytest.fixture
def make_recording():
    return RecordingImage


@pytest.fixture
def make_gradient():
    """Factory for gradient Images: make_gradient(width, height)."""
    def factory(width=64, height=48):
        return Image.from_pil(gradient_pil(width, height))
    return factory


@pytest.fixture
def make_solid():
    """Factory for solid-colour Images: make_solid(width, height, colour)."""
    def factory(width=32, height=32, colour=Colour(200, 100, 50, 255), num_frames=1):
        return Image.new(width, height, colour, num_frames=num_frames)
    return factory


@pytest.fixture
def png_file(tmp_path):
    """A 120x80 gradient PNG on disk."""
    path = tmp_path / "gradient.png"
    gradient_pil(120, 80).save(path)
    return path
