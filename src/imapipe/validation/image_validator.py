"""
Image Validation Module

Two stages guard a pipeline run: a file check before decoding (existence,
size, extension) and an image check on the decoded frames (frame count and
the dimension range every size-changing operation clamps into).
"""

from pathlib import Path
from typing import Optional, Tuple

from ..config import DEFAULT_CONFIG, MAX_DIMENSION
from ..image.formats import FormatDetector
from ..image.image import Image


class ImageValidator:
    """Validate image files and decoded images before processing"""

    MAX_FILE_SIZE = DEFAULT_CONFIG.MAX_FILE_SIZE
    MAX_DIMENSIONS = (MAX_DIMENSION, MAX_DIMENSION)

    @staticmethod
    def check_file(file_path: Path) -> Optional[str]:
        """
        Check a file can be handed to the decoder.

        Args:
            file_path: Path to image file

        Returns:
            Error message, or None if the file passes
        """
        file_path = Path(file_path)
        if not file_path.exists():
            return f"File not found: {file_path}"
        if not file_path.is_file():
            return f"Not a file: {file_path}"

        size = file_path.stat().st_size
        if size == 0:
            return "File is empty"
        if size > ImageValidator.MAX_FILE_SIZE:
            size_mb = size / 1024 / 1024
            max_mb = ImageValidator.MAX_FILE_SIZE / 1024 / 1024
            return f"File too large: {size_mb:.1f} MB (max {max_mb:.0f} MB)"

        if not FormatDetector.is_supported(file_path):
            return f"Unsupported format: {file_path.suffix}"
        return None

    @staticmethod
    def check_image(image: Image) -> Optional[str]:
        """
        Check every decoded frame is inside the pipeline's dimension range.

        Returns:
            Error message naming the first bad frame, or None
        """
        if image.get_num_frames() == 0:
            return "No frames decoded"

        max_w, max_h = ImageValidator.MAX_DIMENSIONS
        for index, frame in enumerate(image.frames):
            w, h = frame.size
            if w < 1 or h < 1:
                return f"Frame {index} is empty: {w}x{h}px"
            if w > max_w or h > max_h:
                return f"Frame {index} too large: {w}x{h}px (max {max_w}x{max_h}px)"
        return None

    @staticmethod
    def load(file_path: Path) -> Tuple[Optional[Image], Optional[str]]:
        """
        Check the file, decode it once and check the decoded frames.

        Args:
            file_path: Path to image file

        Returns:
            (image, None) on success, (None, error_message) otherwise
        """
        error = ImageValidator.check_file(file_path)
        if error is not None:
            return None, error

        try:
            image = Image.open(file_path)
        except Exception as e:
            return None, f"Cannot open image: {e}"

        error = ImageValidator.check_image(image)
        if error is not None:
            return None, error
        return image, None

    @staticmethod
    def validate_file(file_path: Path) -> Tuple[bool, Optional[str]]:
        """(is_valid, error_message) for a file, see load()."""
        _, error = ImageValidator.load(file_path)
        return error is None, error

    @staticmethod
    def is_valid(file_path: Path) -> bool:
        valid, _ = ImageValidator.validate_file(file_path)
        return valid
