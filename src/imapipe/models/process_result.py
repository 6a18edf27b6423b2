"""
Process Result Model

Represents the result of running a pipeline over a single image file.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class ProcessResult:
    """
    Result from processing a single image.

    width/height/frames describe the image after the pipeline ran.
    """
    success: bool
    source_path: Optional[Path] = None
    output_path: Optional[Path] = None
    width: Optional[int] = None
    height: Optional[int] = None
    frames: Optional[int] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        """Check if processing failed"""
        return not self.success
