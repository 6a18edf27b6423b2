"""
Image Format Detection

Which files the pipeline can read and write, and what each format can hold.
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Set



class ImageFormat(Enum):
    """Supported image formats (values are Pillow format names)"""
    JPEG = "JPEG"
    PNG = "PNG"
    TIFF = "TIFF"
    GIF = "GIF"
    WEBP = "WEBP"
    BMP = "BMP"
    TGA = "TGA"
    ICO = "ICO"


class FormatDetector:
    """Detect and validate image formats"""

    FORMAT_MAP = {
        '.jpg': ImageFormat.JPEG,
        '.jpeg': ImageFormat.JPEG,
        '.png': ImageFormat.PNG,
        '.apng': ImageFormat.PNG,
        '.tiff': ImageFormat.TIFF,
        '.tif': ImageFormat.TIFF,
        '.gif': ImageFormat.GIF,
        '.webp': ImageFormat.WEBP,
        '.bmp': ImageFormat.BMP,
        '.tga': ImageFormat.TGA,
        '.ico': ImageFormat.ICO,
    }

    SUPPORTED_EXTENSIONS: Set[str] = set(FORMAT_MAP)

    # Formats that can store an alpha channel
    ALPHA_FORMATS: Set[ImageFormat] = {
        ImageFormat.PNG, ImageFormat.TIFF, ImageFormat.GIF,
        ImageFormat.WEBP, ImageFormat.TGA, ImageFormat.ICO,
    }

    # Formats that can store more than one frame
    MULTIFRAME_FORMATS: Set[ImageFormat] = {
        ImageFormat.PNG, ImageFormat.TIFF, ImageFormat.GIF, ImageFormat.WEBP,
    }

    @staticmethod
    def detect_format(file_path: Path) -> Optional[ImageFormat]:
        """
        Detect format from file extension.

        Args:
            file_path: Path to image file

        Returns:
            ImageFormat enum or None if unsupported
        """
        return FormatDetector.FORMAT_MAP.get(Path(file_path).suffix.lower())

    @staticmethod
    def is_supported(file_path: Path) -> bool:
        """Check if the extension is one the pipeline reads and writes."""
        return Path(file_path).suffix.lower() in FormatDetector.SUPPORTED_EXTENSIONS

    @staticmethod
    def supports_alpha(image_format: Optional[ImageFormat]) -> bool:
        return image_format in FormatDetector.ALPHA_FORMATS

    @staticmethod
    def supports_frames(image_format: Optional[ImageFormat]) -> bool:
        return image_format in FormatDetector.MULTIFRAME_FORMATS
