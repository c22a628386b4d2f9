"""Tests for the Ultralytics-backed reference engine (model calls faked)."""

import asyncio

import pytest

from cellsay_yolo.clients.channel import ChannelError, LocalMethodChannel
from cellsay_yolo.clients.yolo import YOLO
from cellsay_yolo.core.exceptions import InvalidInputError, ModelLoadingError
from cellsay_yolo.services.engine import UltralyticsEngine


FAKE_BOXES = [{'class': 'person', 'confidence': 0.8, 'x1': 1.0, 'x1_norm': 0.1}]


def _engine(predict_calls=None, loader=None):
    def fake_predict(model, img, conf=None, iou=None, max_det=300):
        if predict_calls is not None:
            predict_calls.append({'model': model, 'shape': img.shape, 'conf': conf, 'iou': iou})
        return ['results']

    return UltralyticsEngine(
        loader=loader or (lambda path: f'model:{path}'),
        predictor=fake_predict,
        formatter=lambda results: list(FAKE_BOXES),
    )


def test_load_and_predict(png_bytes):
    predict_calls = []
    engine = _engine(predict_calls)

    assert engine.load_model({'modelPath': 'yolo11n.pt', 'task': 'detect'}) is True
    result = engine.predict_single_image({'image': png_bytes, 'confidenceThreshold': 0.3})

    assert result == {'boxes': FAKE_BOXES, 'imageSize': {'width': 64, 'height': 48}}
    assert predict_calls[0]['model'] == 'model:yolo11n.pt'
    assert predict_calls[0]['shape'] == (48, 64, 3)
    assert predict_calls[0]['conf'] == 0.3
    assert predict_calls[0]['iou'] is None


def test_predict_unknown_instance():
    engine = _engine()

    with pytest.raises(ChannelError) as exc:
        engine.predict_single_image({'image': b'x', 'instanceId': 'ghost'})

    assert exc.value.code == 'MODEL_NOT_LOADED'


def test_undecodable_image():
    engine = _engine()
    engine.load_model({'modelPath': 'm.pt'})

    with pytest.raises(ChannelError) as exc:
        engine.predict_single_image({'image': b'not an image'})

    assert exc.value.code == 'INVALID_IMAGE'


def test_retired_task_rejected():
    with pytest.raises(ChannelError) as exc:
        _engine().load_model({'modelPath': 'm.pt', 'task': 'pose'})

    assert exc.value.code == 'UNSUPPORTED_TASK'


def test_missing_model_file():
    def loader(path):
        raise FileNotFoundError(path)

    with pytest.raises(ChannelError) as exc:
        _engine(loader=loader).load_model({'modelPath': 'missing.pt'})

    assert exc.value.code == 'MODEL_NOT_FOUND'


def test_dispose_instance():
    engine = _engine()
    engine.load_model({'modelPath': 'm.pt', 'instanceId': 'a'})

    assert engine.instances == ['a']
    assert engine.dispose_instance({'instanceId': 'a'}) is True
    assert engine.dispose_instance({'instanceId': 'a'}) is False


def test_client_against_engine(png_bytes):
    channel = LocalMethodChannel('yolo_single_image_channel')
    _engine().register(channel)
    yolo = YOLO('yolo11n.pt', channel=channel, use_multi_instance=True)

    async def run():
        await yolo.load_model()
        result = await yolo.predict(png_bytes)
        with pytest.raises(InvalidInputError):
            await yolo.predict(b'garbage')
        return result

    result = asyncio.run(run())

    assert result['detections'][0]['className'] == 'person'
    assert result['detections'][0]['normalizedBox']['left'] == 0.1


def test_client_sees_loading_error():
    channel = LocalMethodChannel('yolo_single_image_channel')

    def loader(path):
        raise RuntimeError('corrupt weights')

    _engine(loader=loader).register(channel)

    with pytest.raises(ModelLoadingError, match='corrupt weights'):
        asyncio.run(YOLO('bad.pt', channel=channel).load_model())
