"""
Pipeline

An ordered list of valid operations applied left to right, once each, to
one image at a time.
"""

import logging
from typing import Iterable, Iterator, List, Optional

from .config import DEFAULT_CONFIG
from .errors import DescriptorError, PipelineError
from .operations.base import Operation
from .operations.catalog import parse_operation

logger = logging.getLogger(__name__)


class Pipeline:
    """
    Sequence of operations.

    Invalid operations are dropped on construction, so everything in the
    pipeline can be applied.

    Example:
        >>> pipeline = Pipeline.from_descriptors(["resize[800,*]", "quantize[wu,64]"])
        >>> ok = pipeline.apply(image)
    """

    def __init__(self, operations: Iterable[Operation] = ()):
        self.operations: List[Operation] = []
        for operation in operations:
            if operation.valid:
                self.operations.append(operation)
            else:
                logger.warning("Dropping invalid operation %r", operation)

    @classmethod
    def from_descriptors(cls, descriptors: Iterable[str], strict: Optional[bool] = None) -> "Pipeline":
        """
        Build a pipeline from descriptor strings.

        Args:
            descriptors: Descriptors in application order
            strict: Raise instead of skipping bad descriptors
                    (defaults to PipelineConfig.STRICT_DESCRIPTORS)

        Returns:
            Pipeline of the valid operations

        Raises:
            PipelineError: In strict mode, for a malformed descriptor or an
                           invalid operation
        """
        if strict is None:
            strict = DEFAULT_CONFIG.STRICT_DESCRIPTORS

        operations = []
        for text in descriptors:
            try:
                operation = parse_operation(text)
            except DescriptorError as e:
                if strict:
                    raise PipelineError(str(e)) from e
                logger.warning("Skipping descriptor: %s", e)
                continue

            if not operation.valid and strict:
                raise PipelineError(f"Invalid operation '{text}'")
            operations.append(operation)

        return cls(operations)

    def apply(self, image) -> bool:
        """
        Apply every operation in order.

        A failing operation does not stop the ones after it.

        Returns:
            True only if every operation succeeded
        """
        success = True
        for operation in self.operations:
            try:
                result = operation.apply(image)
            except Exception as e:
                logger.error("Operation %s failed: %s", operation.NAME, e, exc_info=True)
                result = False
            if not result:
                logger.warning("Operation %s reported failure", operation.NAME)
            success = success and bool(result)
        return success

    def __len__(self) -> int:
        return len(self.operations)

    def __iter__(self) -> Iterator[Operation]:
        return iter(self.operations)

    def __repr__(self) -> str:
        return f"Pipeline({self.operations!r})"
