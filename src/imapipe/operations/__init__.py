"""Pipeline operations and the descriptor catalog"""

from .adjust import Brightness, Contrast, Levels
from .base import Operation
from .catalog import OPERATIONS, OperationDescriptor, parse_descriptor, parse_operation
from .colour import Channel, ChannelMode, Quantize, QuantizeMethod
from .geometry import Aspect, Canvas, Crop, Deborder, Flip, Resize
from .rotate import ExactRotation, Rotate, RotateMode

__all__ = [
    "Operation",
    "OPERATIONS",
    "OperationDescriptor",
    "parse_descriptor",
    "parse_operation",
    "Resize",
    "Canvas",
    "Aspect",
    "Deborder",
    "Crop",
    "Flip",
    "Rotate",
    "RotateMode",
    "ExactRotation",
    "Levels",
    "Contrast",
    "Brightness",
    "Quantize",
    "QuantizeMethod",
    "Channel",
    "ChannelMode",
]
