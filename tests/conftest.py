"""Shared fakes for the test suite."""

import io
from typing import Any

import pytest

from cellsay_yolo.clients.channel import LocalMethodChannel


class RecordingChannel:
    """Channel fake that records every call and answers with a fixed value."""

    def __init__(self, result: Any = None, error: BaseException | None = None):
        self.name = 'recording'
        self.result = result
        self.error = error
        self.calls: list[tuple[str, dict | None]] = []

    async def invoke_method(self, method: str, arguments: dict | None = None) -> Any:
        self.calls.append((method, arguments))
        if self.error is not None:
            raise self.error
        return self.result


SAMPLE_BOX = {
    'class': 'person',
    'confidence': 0.9,
    'x1': 1,
    'y1': 2,
    'x2': 3,
    'y2': 4,
    'x1_norm': 0.1,
    'y1_norm': 0.2,
    'x2_norm': 0.3,
    'y2_norm': 0.4,
}


@pytest.fixture
def sample_box() -> dict:
    return dict(SAMPLE_BOX)


@pytest.fixture
def png_bytes() -> bytes:
    from PIL import Image

    buffer = io.BytesIO()
    Image.new('RGB', (64, 48), color=(200, 30, 30)).save(buffer, format='PNG')
    return buffer.getvalue()


def make_engine_channel(boxes: list, name: str = 'yolo_single_image_channel'):
    """LocalMethodChannel whose handlers imitate the engine protocol."""
    channel = LocalMethodChannel(name)
    calls: dict[str, list[dict]] = {'loadModel': [], 'predictSingleImage': [], 'disposeInstance': []}

    def load_model(args):
        calls['loadModel'].append(args)
        return True

    def predict(args):
        calls['predictSingleImage'].append(args)
        return {'boxes': [dict(b) for b in boxes], 'imageSize': {'width': 640, 'height': 480}}

    def dispose(args):
        calls['disposeInstance'].append(args)
        return True

    channel.register('loadModel', load_model)
    channel.register('predictSingleImage', predict)
    channel.register('disposeInstance', dispose)
    return channel, calls


@pytest.fixture
def recording_channel():
    """Factory: recording_channel(result=..., error=...)."""
    return RecordingChannel


@pytest.fixture
def engine_channel():
    """Factory: engine_channel(boxes) -> (channel, calls)."""
    return make_engine_channel
