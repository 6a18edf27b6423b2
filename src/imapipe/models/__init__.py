"""Result models"""

from .process_result import ProcessResult

__all__ = ["ProcessResult"]
