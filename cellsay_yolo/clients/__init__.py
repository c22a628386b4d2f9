"""
Client modules for the inference engine boundary.

- channel: MethodChannel protocol, LocalMethodChannel, HttpMethodChannel
- yolo_inference: YOLOInference (single-image marshalling)
- yolo: YOLO facade (instance id and model lifecycle)
"""

from cellsay_yolo.clients.channel import (
    ChannelError,
    HttpMethodChannel,
    LocalMethodChannel,
    MethodChannel,
    MissingPluginError,
)
from cellsay_yolo.clients.yolo import YOLO
from cellsay_yolo.clients.yolo_inference import YOLOInference


__all__ = [
    'YOLO',
    'ChannelError',
    'HttpMethodChannel',
    'LocalMethodChannel',
    'MethodChannel',
    'MissingPluginError',
    'YOLOInference',
]
