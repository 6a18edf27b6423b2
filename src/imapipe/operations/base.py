"""
Operation Base

An operation is parsed once from its comma-separated argument string and
then applied to any number of images. Parsing never raises: a descriptor
that cannot be honoured leaves the operation with valid == False and logs a
warning naming the reason.
"""

import logging
from typing import Tuple

from ..config import MAX_DIMENSION, MIN_DIMENSION
from ..errors import PipelineError
from ..parsing.tokens import ArgCursor, as_int, clamp, explode, trunc_div

logger = logging.getLogger(__name__)


class Operation:
    """
    Base class for the pipeline operations.

    Subclasses set NAME, implement parse() (returning True when the
    arguments are usable) and run() (the apply step).

    Attributes:
        args: Raw argument string
        valid: True if parsing fully succeeded
    """

    NAME = "Operation"

    def __init__(self, args: str = ""):
        self.args = args or ""
        self.valid = bool(self.parse(ArgCursor(explode(self.args))))

    def parse(self, args: ArgCursor) -> bool:
        raise NotImplementedError

    def run(self, image) -> bool:
        raise NotImplementedError

    def apply(self, image) -> bool:
        """
        Apply the operation to an image in place.

        Args:
            image: Image to mutate

        Returns:
            True on success (including logged no-ops)

        Raises:
            PipelineError: If the operation is not valid
        """
        if not self.valid:
            raise PipelineError(f"Operation {self.NAME} is invalid and cannot be applied")
        return self.run(image)

    def invalid(self, reason: str) -> bool:
        logger.warning("Operation %s Invalid. %s", self.NAME, reason)
        return False

    def log(self, message: str, *params) -> None:
        """Log the primitive being invoked: "Name | Primitive[...]"."""
        logger.info(f"{self.NAME} | {message}", *params)

    def skip(self, reason: str) -> bool:
        """Log a no-op and report success."""
        logger.info("%s not applied. %s", self.NAME, reason)
        return True

    def __repr__(self) -> str:
        state = "" if self.valid else " invalid"
        return f"<{self.__class__.__name__}[{self.args}]{state}>"


def preserve_aspect(src_w: int, src_h: int, width: int, height: int) -> Tuple[int, int]:
    """
    Resolve a requested size where one side may be unset (<= 0).

    The unset side keeps the source aspect ratio, truncated toward zero.
    Both sides are then clamped to the supported dimension range.
    """
    if width <= 0:
        width = int(height * src_w / src_h)
    elif height <= 0:
        height = int(width * src_h / src_w)
    return (
        clamp(width, MIN_DIMENSION, MAX_DIMENSION),
        clamp(height, MIN_DIMENSION, MAX_DIMENSION),
    )


def anchor_coordinate(token) -> int:
    """Explicit anchor coordinate, -1 when absent or "*"."""
    if not token or token.startswith("*"):
        return -1
    return as_int(token)


def anchor_origin(anchor: int, src: int, dst: int) -> int:
    """
    Crop origin along one axis for an explicit anchor coordinate.

    Multiplies before dividing and truncates toward zero.
    """
    return trunc_div(anchor * (src - dst), src)
