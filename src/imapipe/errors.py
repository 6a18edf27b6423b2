"""Exceptions raised by imapipe"""


class ImapipeError(Exception):
    """Base class for imapipe errors"""


class DescriptorError(ImapipeError):
    """Operation descriptor is malformed or names an unknown operation"""

    def __init__(self, descriptor: str, reason: str):
        self.descriptor = descriptor
        self.reason = reason
        super().__init__(f"Invalid descriptor '{descriptor}': {reason}")


class PipelineError(ImapipeError):
    """Strict pipeline construction rejected an operation"""
