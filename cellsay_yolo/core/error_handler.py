"""
Translation of boundary faults into the plugin's exception types.
"""

import logging

from cellsay_yolo.clients.channel import ChannelError
from cellsay_yolo.core.exceptions import (
    InferenceError,
    InvalidInputError,
    ModelLoadingError,
    ModelNotLoadedError,
    YOLOError,
)


logger = logging.getLogger(__name__)

# Engine error codes that map onto a specific exception type
MODEL_LOADING_CODES = {'MODEL_NOT_FOUND', 'INVALID_MODEL', 'UNSUPPORTED_TASK'}


def handle_error(error: BaseException, context: str) -> YOLOError:
    """
    Convert any failure raised across the boundary into a YOLOError.

    Args:
        error: Exception raised by the channel or by result handling
        context: Human-readable description of the failed operation

    Returns:
        YOLOError to raise (the input itself when it is already one)
    """
    if isinstance(error, YOLOError):
        return error

    if isinstance(error, ChannelError):
        return _handle_channel_error(error, context)

    logger.debug(f'{context}: unexpected {type(error).__name__}: {error}')
    return InferenceError(f'{context}: {error}')


def _handle_channel_error(error: ChannelError, context: str) -> YOLOError:
    message = error.message or error.code

    if error.code in MODEL_LOADING_CODES:
        return ModelLoadingError(message)
    if error.code == 'MODEL_NOT_LOADED':
        return ModelNotLoadedError(message)
    if error.code == 'INVALID_IMAGE':
        return InvalidInputError(message)
    if error.code == 'INFERENCE_ERROR':
        return InferenceError(message)

    return InferenceError(f'{context}: {message}')
