"""
Core module with exceptions and error translation.

FastAPI dependencies live in cellsay_yolo.core.dependencies and are imported
directly by the demo service.
"""

from cellsay_yolo.core.error_handler import handle_error
from cellsay_yolo.core.exceptions import (
    InferenceError,
    InvalidInputError,
    InvalidResultFormatError,
    ModelLoadingError,
    ModelNotLoadedError,
    UnsupportedTaskError,
    YOLOError,
)


__all__ = [
    'InferenceError',
    'InvalidInputError',
    'InvalidResultFormatError',
    'ModelLoadingError',
    'ModelNotLoadedError',
    'UnsupportedTaskError',
    'YOLOError',
    'handle_error',
]
