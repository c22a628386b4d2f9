"""Tests for boundary fault translation."""

import pytest

from cellsay_yolo.clients.channel import ChannelError
from cellsay_yolo.core.error_handler import handle_error
from cellsay_yolo.core.exceptions import (
    InferenceError,
    InvalidInputError,
    ModelLoadingError,
    ModelNotLoadedError,
    UnsupportedTaskError,
)


CONTEXT = 'Error during image prediction'


def test_plugin_errors_pass_through():
    error = UnsupportedTaskError('pose')

    assert handle_error(error, CONTEXT) is error


@pytest.mark.parametrize(
    ('code', 'expected'),
    [
        ('MODEL_NOT_FOUND', ModelLoadingError),
        ('INVALID_MODEL', ModelLoadingError),
        ('UNSUPPORTED_TASK', ModelLoadingError),
        ('MODEL_NOT_LOADED', ModelNotLoadedError),
        ('INVALID_IMAGE', InvalidInputError),
        ('INFERENCE_ERROR', InferenceError),
    ],
)
def test_known_codes(code, expected):
    error = handle_error(ChannelError(code, 'details here'), CONTEXT)

    assert type(error) is expected
    assert error.message == 'details here'


def test_unknown_code_gets_context():
    error = handle_error(ChannelError('WHATEVER', 'went wrong'), CONTEXT)

    assert type(error) is InferenceError
    assert error.message == f'{CONTEXT}: went wrong'


def test_code_without_message_uses_code():
    error = handle_error(ChannelError('MODEL_NOT_LOADED'), CONTEXT)

    assert error.message == 'MODEL_NOT_LOADED'


def test_arbitrary_exception_gets_context():
    error = handle_error(ValueError('bad'), CONTEXT)

    assert type(error) is InferenceError
    assert str(error) == f'{CONTEXT}: bad'
