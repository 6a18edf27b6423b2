"""
Pipeline Configuration

Defaults for the pipeline and the file-level API. Values can be overridden
from the environment.
"""

import os
from dataclasses import dataclass

from .parsing.tokens import as_int

# Every operation that computes a new size clamps into this range.
MIN_DIMENSION = 4
MAX_DIMENSION = 32768


@dataclass
class PipelineConfig:
    """Configuration for building and running pipelines"""

    # Logging
    LOG_LEVEL: str = os.getenv("IMAPIPE_LOG_LEVEL", "INFO")

    # Raise on unknown/malformed descriptors instead of skipping them
    STRICT_DESCRIPTORS: bool = os.getenv("IMAPIPE_STRICT", "0").lower() in ("1", "true", "yes")

    # Oversampling factor used by filtered (non-exact) rotations
    ROTATE_UPSCALE: int = as_int(os.getenv("IMAPIPE_ROTATE_UPSCALE"), 2)

    # Input file limits for process_image()
    MAX_FILE_SIZE: int = as_int(os.getenv("IMAPIPE_MAX_FILE_SIZE"), 500 * 1024 * 1024)

    def __post_init__(self):
        if self.ROTATE_UPSCALE < 1:
            self.ROTATE_UPSCALE = 1


DEFAULT_CONFIG = PipelineConfig()
