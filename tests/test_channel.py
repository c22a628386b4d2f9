"""Tests for the method-channel transports."""

import asyncio
import json

import httpx
import pytest

from cellsay_yolo.clients.channel import (
    ChannelError,
    HttpMethodChannel,
    LocalMethodChannel,
    MissingPluginError,
    decode_value,
    encode_value,
)
from cellsay_yolo.clients.yolo_inference import DEFAULT_INSTANCE_ID, YOLOInference
from cellsay_yolo.core.exceptions import InferenceError, InvalidResultFormatError
from cellsay_yolo.schemas.task import YOLOTask


# =============================================================================
# LocalMethodChannel
# =============================================================================
def test_sync_and_async_handlers():
    channel = LocalMethodChannel('test')

    async def echo_async(args):
        return {'async': args['value']}

    channel.register('sync', lambda args: {'sync': args['value']})
    channel.register('async', echo_async)

    assert asyncio.run(channel.invoke_method('sync', {'value': 1})) == {'sync': 1}
    assert asyncio.run(channel.invoke_method('async', {'value': 2})) == {'async': 2}
    assert channel.methods == ['async', 'sync']


def test_missing_handler():
    channel = LocalMethodChannel('test')

    with pytest.raises(MissingPluginError) as exc:
        asyncio.run(channel.invoke_method('nope'))

    assert exc.value.code == 'MISSING_PLUGIN'


def test_handler_channel_errors_pass_through():
    channel = LocalMethodChannel('test')

    def fail(args):
        raise ChannelError('MODEL_NOT_LOADED', 'not yet')

    channel.register('predict', fail)

    with pytest.raises(ChannelError) as exc:
        asyncio.run(channel.invoke_method('predict', {}))

    assert exc.value.code == 'MODEL_NOT_LOADED'


def test_handler_exceptions_are_wrapped():
    channel = LocalMethodChannel('test')
    channel.register('predict', lambda args: 1 / 0)

    with pytest.raises(ChannelError) as exc:
        asyncio.run(channel.invoke_method('predict', {}))

    assert exc.value.code == 'error'
    assert isinstance(exc.value.__cause__, ZeroDivisionError)


def test_unregister():
    channel = LocalMethodChannel('test')
    channel.register('m', lambda args: None)
    channel.unregister('m')

    with pytest.raises(MissingPluginError):
        asyncio.run(channel.invoke_method('m'))


# =============================================================================
# Envelope encoding
# =============================================================================
def test_bytes_are_wrapped_for_json():
    encoded = encode_value({'image': b'\x00\x01', 'nested': [b'ab'], 'n': 1})

    json.dumps(encoded)
    assert encoded['image'] == {'$bytes': 'AAE='}
    assert decode_value(encoded) == {'image': b'\x00\x01', 'nested': [b'ab'], 'n': 1}


# =============================================================================
# HttpMethodChannel
# =============================================================================
def _http_channel(handler) -> HttpMethodChannel:
    return HttpMethodChannel(
        'yolo_single_image_channel', 'http://engine:9600/', transport=httpx.MockTransport(handler)
    )


def test_http_call_posts_envelope_and_decodes_result():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen['url'] = str(request.url)
        seen['body'] = json.loads(request.content)
        return httpx.Response(200, json={'result': {'boxes': [], 'raw': {'$bytes': 'AAE='}}})

    result = asyncio.run(_http_channel(handler).invoke_method('predictSingleImage', {'image': b'hi'}))

    assert seen['url'] == 'http://engine:9600/channels/yolo_single_image_channel/predictSingleImage'
    assert seen['body'] == {'arguments': {'image': {'$bytes': 'aGk='}}}
    assert result == {'boxes': [], 'raw': b'\x00\x01'}


def test_http_error_envelope_raises_channel_error():
    def handler(request):
        return httpx.Response(
            200, json={'error': {'code': 'MODEL_NOT_LOADED', 'message': 'load first'}}
        )

    with pytest.raises(ChannelError) as exc:
        asyncio.run(_http_channel(handler).invoke_method('predictSingleImage', {}))

    assert exc.value.code == 'MODEL_NOT_LOADED'
    assert exc.value.message == 'load first'


def test_http_404_is_missing_plugin():
    with pytest.raises(MissingPluginError):
        asyncio.run(_http_channel(lambda r: httpx.Response(404)).invoke_method('x'))


def test_http_non_json_response():
    def handler(request):
        return httpx.Response(502, text='bad gateway')

    with pytest.raises(ChannelError) as exc:
        asyncio.run(_http_channel(handler).invoke_method('x'))

    assert exc.value.code == 'INVALID_RESPONSE'


def test_http_transport_failure_is_unavailable():
    def handler(request):
        raise httpx.ConnectError('connection refused', request=request)

    with pytest.raises(ChannelError) as exc:
        asyncio.run(_http_channel(handler).invoke_method('x'))

    assert exc.value.code == 'UNAVAILABLE'


def test_http_error_status_without_envelope():
    def handler(request):
        return httpx.Response(500, json={'detail': 'Internal Server Error'})

    with pytest.raises(ChannelError) as exc:
        asyncio.run(_http_channel(handler).invoke_method('predictSingleImage', {}))

    assert exc.value.code == 'HTTP_500'
    assert exc.value.details == 'Internal Server Error'


def test_http_server_fault_surfaces_as_inference_error():
    def handler(request):
        return httpx.Response(503, json={'detail': 'Service Unavailable'})

    inference = YOLOInference(_http_channel(handler), DEFAULT_INSTANCE_ID, YOLOTask.DETECT)

    with pytest.raises(InferenceError) as exc:
        asyncio.run(inference.predict(b'img'))

    assert not isinstance(exc.value, InvalidResultFormatError)
    assert exc.value.message.startswith('Error during image prediction')
