"""
Method-channel boundary between the plugin and the inference engine.

A channel carries one named call with a mapping of arguments and answers
with a single result or a single ChannelError. Two transports are provided:

- LocalMethodChannel: in-process handler registry (engine in the same process)
- HttpMethodChannel: JSON envelope over HTTP (engine behind the demo service)
"""

import asyncio
import base64
import inspect
import logging
from collections.abc import Callable
from typing import Any, Protocol

import httpx


logger = logging.getLogger(__name__)

BYTES_MARKER = '$bytes'

MethodHandler = Callable[[dict[str, Any]], Any]


class ChannelError(Exception):
    """Fault reported by the far side of a channel (or by the transport)."""

    def __init__(self, code: str, message: str | None = None, details: Any = None):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(f'{code}: {message}' if message else code)


class MissingPluginError(ChannelError):
    """Raised when no handler is registered for a method."""

    def __init__(self, channel: str, method: str):
        super().__init__(
            'MISSING_PLUGIN', f"No implementation found for method '{method}' on channel '{channel}'"
        )


class MethodChannel(Protocol):
    """Single call/response exchange with the inference engine."""

    name: str

    async def invoke_method(self, method: str, arguments: dict[str, Any] | None = None) -> Any: ...


# =============================================================================
# Envelope encoding (bytes are not JSON-native)
# =============================================================================
def encode_value(value: Any) -> Any:
    """Recursively make a value JSON-safe, wrapping bytes as base64."""
    if isinstance(value, bytes | bytearray | memoryview):
        return {BYTES_MARKER: base64.b64encode(bytes(value)).decode('ascii')}
    if isinstance(value, dict):
        return {str(k): encode_value(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [encode_value(v) for v in value]
    return value


def decode_value(value: Any) -> Any:
    """Inverse of encode_value."""
    if isinstance(value, dict):
        if set(value) == {BYTES_MARKER}:
            return base64.b64decode(value[BYTES_MARKER])
        return {k: decode_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [decode_value(v) for v in value]
    return value


# =============================================================================
# In-process channel
# =============================================================================
class LocalMethodChannel:
    """
    Channel whose far side is a set of handlers in the same process.

    Sync handlers run in a worker thread so a slow engine does not block the
    event loop; async handlers are awaited directly.
    """

    def __init__(self, name: str):
        self.name = name
        self._handlers: dict[str, MethodHandler] = {}

    def register(self, method: str, handler: MethodHandler) -> None:
        self._handlers[method] = handler

    def unregister(self, method: str) -> None:
        self._handlers.pop(method, None)

    @property
    def methods(self) -> list[str]:
        return sorted(self._handlers)

    async def invoke_method(self, method: str, arguments: dict[str, Any] | None = None) -> Any:
        handler = self._handlers.get(method)
        if handler is None:
            raise MissingPluginError(self.name, method)

        args = dict(arguments or {})
        try:
            if inspect.iscoroutinefunction(handler):
                return await handler(args)
            return await asyncio.to_thread(handler, args)
        except ChannelError:
            raise
        except Exception as e:
            logger.error(f'Handler for {self.name}/{method} failed: {e}')
            raise ChannelError('error', str(e)) from e


# =============================================================================
# HTTP channel
# =============================================================================
class HttpMethodChannel:
    """
    Channel that forwards calls to a remote engine over HTTP.

    Request:  POST {base_url}/channels/{name}/{method}  body {"arguments": {...}}
    Response: {"result": ...} or {"error": {"code", "message", "details"}}
    """

    def __init__(
        self,
        name: str,
        base_url: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.name = name
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._transport = transport

    def _endpoint(self, method: str) -> str:
        return f'{self.base_url}/channels/{self.name}/{method}'

    async def invoke_method(self, method: str, arguments: dict[str, Any] | None = None) -> Any:
        endpoint = self._endpoint(method)
        payload = {'arguments': encode_value(arguments or {})}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(endpoint, json=payload)
        except httpx.TimeoutException as e:
            raise ChannelError('UNAVAILABLE', f'Timeout calling {endpoint}') from e
        except httpx.HTTPError as e:
            raise ChannelError('UNAVAILABLE', f'Cannot reach {endpoint}: {e}') from e

        if response.status_code == 404:
            raise MissingPluginError(self.name, method)

        try:
            body = response.json()
        except ValueError as e:
            raise ChannelError(
                'INVALID_RESPONSE', f'Non-JSON response ({response.status_code}) from {endpoint}'
            ) from e

        if not isinstance(body, dict):
            raise ChannelError('INVALID_RESPONSE', f'Unexpected response body from {endpoint}')

        error = body.get('error')
        if error is not None:
            if not isinstance(error, dict):
                raise ChannelError('error', str(error))
            raise ChannelError(
                str(error.get('code') or 'error'), error.get('message'), error.get('details')
            )

        if not response.is_success:
            raise ChannelError(
                f'HTTP_{response.status_code}',
                f'{endpoint} answered {response.status_code}',
                body.get('detail', body),
            )

        return decode_value(body.get('result'))
