"""
Channel Router

Exposes the in-process method channel over HTTP so HttpMethodChannel
clients in other processes can reach the engine.
"""

import logging

from fastapi import APIRouter, Body, HTTPException

from cellsay_yolo.clients.channel import (
    ChannelError,
    LocalMethodChannel,
    decode_value,
    encode_value,
)
from cellsay_yolo.core.dependencies import AppStateDep


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix='/channels',
    tags=['Method Channel'],
)


@router.post('/{channel_name}/{method}')
async def invoke(channel_name: str, method: str, state: AppStateDep, payload: dict = Body(...)):
    """
    Invoke a method on the local channel.

    Faults are returned in the envelope, not as HTTP errors:
    {"error": {"code", "message", "details"}}.
    """
    channel = state.channel
    if not isinstance(channel, LocalMethodChannel) or channel.name != channel_name:
        raise HTTPException(status_code=404, detail=f"Channel '{channel_name}' not served here")

    arguments = decode_value(payload.get('arguments') or {})
    if not isinstance(arguments, dict):
        raise HTTPException(status_code=400, detail='arguments must be an object')

    try:
        result = await channel.invoke_method(method, arguments)
    except ChannelError as e:
        logger.info(f'{channel_name}/{method} -> {e.code}')
        return {'error': {'code': e.code, 'message': e.message, 'details': e.details}}

    return {'result': encode_value(result)}
