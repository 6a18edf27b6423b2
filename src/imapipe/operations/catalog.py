"""
Operation Catalog

Maps descriptor text such as "resize[800,*,bilinear]" to operations.
"""

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Union

from ..errors import DescriptorError
from .adjust import Brightness, Contrast, Levels
from .base import Operation
from .colour import Channel, Quantize
from .geometry import Aspect, Canvas, Crop, Deborder, Flip, Resize
from .rotate import Rotate

logger = logging.getLogger(__name__)

OPERATIONS = MappingProxyType({
    "resize": Resize,
    "canvas": Canvas,
    "aspect": Aspect,
    "deborder": Deborder,
    "crop": Crop,
    "flip": Flip,
    "rotate": Rotate,
    "levels": Levels,
    "contrast": Contrast,
    "brightness": Brightness,
    "quantize": Quantize,
    "channel": Channel,
})

_DESCRIPTOR = re.compile(r"^\s*([A-Za-z]+)\s*(?:\[(.*)\])?\s*$", re.DOTALL)


@dataclass(frozen=True)
class OperationDescriptor:
    """
    Raw operation text split into its kind and argument string.

    Attributes:
        text: Descriptor as written
        kind: Lower-case operation kind (a key of OPERATIONS)
        args: Comma-separated argument string, empty if none given
    """
    text: str
    kind: str
    args: str = ""


def parse_descriptor(text: str) -> OperationDescriptor:
    """
    Split a descriptor into kind and arguments.

    Args:
        text: "kind[args]" or a bare "kind"

    Returns:
        OperationDescriptor

    Raises:
        DescriptorError: If the text is malformed or names an unknown kind
    """
    if text is None or not text.strip():
        raise DescriptorError(str(text), "empty descriptor")

    match = _DESCRIPTOR.match(text)
    if not match:
        raise DescriptorError(text, "expected kind[args] or kind")

    kind = match.group(1).lower()
    args = match.group(2) or ""
    if "[" in args or "]" in args:
        raise DescriptorError(text, "unbalanced brackets")
    if kind not in OPERATIONS:
        raise DescriptorError(text, f"unknown operation '{match.group(1)}'")

    return OperationDescriptor(text=text, kind=kind, args=args)


def parse_operation(descriptor: Union[str, OperationDescriptor]) -> Operation:
    """
    Build the operation for a descriptor.

    Argument problems do not raise; they yield an operation whose valid
    flag is False.

    Raises:
        DescriptorError: If descriptor is text that parse_descriptor rejects
    """
    if not isinstance(descriptor, OperationDescriptor):
        descriptor = parse_descriptor(descriptor)

    operation = OPERATIONS[descriptor.kind](descriptor.args)
    logger.debug("Parsed %r from '%s'", operation, descriptor.text)
    return operation
