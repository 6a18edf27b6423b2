"""
imapipe - Descriptor-driven batch image transformation

This library provides:
- Operation descriptors ("resize[800,*,bilinear]", "rotate[30,crop]", ...)
- Geometry: resize, canvas, aspect, deborder, crop, flip, rotate
- Tone: levels, contrast, brightness
- Colour: quantize, channel set/blend/spread/intensity
- Pipelines applied to single files or batches

Example:
    >>> from imapipe import Pipeline, process_image
    >>> from pathlib import Path
    >>>
    >>> pipeline = Pipeline.from_descriptors(["resize[800,*]", "quantize[wu,64]"])
    >>> result = process_image(Path("photo.png"), pipeline, output_path=Path("small.png"))
    >>> if result.success:
    ...     print(f"Size: {result.width}x{result.height}")
"""

from .version import __version__

# Errors and configuration
from .config import DEFAULT_CONFIG, PipelineConfig
from .errors import DescriptorError, ImapipeError, PipelineError
from .logging_config import setup_logging

# Image
from .image import FormatDetector, Image, ImageFormat

# Parsing
from .parsing import AdjustChannels, Anchor, Channels, Colour, EdgeMode, ResampleFilter

# Operations
from .operations import OperationDescriptor, parse_descriptor, parse_operation
from .pipeline import Pipeline

# Models
from .models import ProcessResult

# Validation
from .validation import ImageValidator

# High-level API
from .api import batch_process, process_image

__all__ = [
    # Version
    "__version__",
    # Config
    "PipelineConfig",
    "DEFAULT_CONFIG",
    "setup_logging",
    # Errors
    "ImapipeError",
    "DescriptorError",
    "PipelineError",
    # Image
    "Image",
    "ImageFormat",
    "FormatDetector",
    # Parsing
    "Colour",
    "Anchor",
    "Channels",
    "AdjustChannels",
    "EdgeMode",
    "ResampleFilter",
    # Operations
    "OperationDescriptor",
    "parse_descriptor",
    "parse_operation",
    "Pipeline",
    # Models
    "ProcessResult",
    # Validation
    "ImageValidator",
    # High-level API
    "process_image",
    "batch_process",
]
