"""
Custom exceptions for the YOLO plugin adapter.

Every failure surfaced by the client is one of these types so callers can
branch on the error class instead of parsing messages.
"""


class YOLOError(Exception):
    """Base exception for all plugin errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidInputError(YOLOError):
    """Raised when caller input fails validation before reaching the engine."""


class InferenceError(YOLOError):
    """Raised when an inference call fails."""


class UnsupportedTaskError(InferenceError):
    """Raised when the resolved task is not wired up in this build."""

    def __init__(self, task_name: str):
        self.task_name = task_name
        super().__init__(f'Unsupported YOLO task: {task_name}')


class InvalidResultFormatError(InferenceError):
    """Raised when the engine answers with something other than a mapping."""

    def __init__(self, message: str = 'Invalid result format returned from inference'):
        super().__init__(message)


class ModelLoadingError(YOLOError):
    """Raised when the engine cannot load the requested model."""


class ModelNotLoadedError(YOLOError):
    """Raised when inference is requested before a model is loaded."""
