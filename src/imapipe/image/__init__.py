"""In-memory image and its mutation primitives"""

from .formats import FormatDetector, ImageFormat
from .image import Image, pil_filter

__all__ = ["Image", "FormatDetector", "ImageFormat", "pil_filter"]
