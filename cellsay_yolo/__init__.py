"""
Cellsay YOLO: object detection over a method channel.

Public API:
- YOLO / YOLOInference: model lifecycle and single-image prediction
- YOLOTask, YOLOStreamingConfig: task and streaming options
- LocalMethodChannel / HttpMethodChannel: boundary transports
- YOLOError and subclasses: error taxonomy
"""

from cellsay_yolo.clients import (
    ChannelError,
    HttpMethodChannel,
    LocalMethodChannel,
    MethodChannel,
    MissingPluginError,
    YOLO,
    YOLOInference,
)
from cellsay_yolo.core.exceptions import (
    InferenceError,
    InvalidInputError,
    InvalidResultFormatError,
    ModelLoadingError,
    ModelNotLoadedError,
    UnsupportedTaskError,
    YOLOError,
)
from cellsay_yolo.schemas import BoundingBox, YOLOResult, YOLOStreamingConfig, YOLOTask


__version__ = '1.0.0'

__all__ = [
    'YOLO',
    'BoundingBox',
    'ChannelError',
    'HttpMethodChannel',
    'InferenceError',
    'InvalidInputError',
    'InvalidResultFormatError',
    'LocalMethodChannel',
    'MethodChannel',
    'MissingPluginError',
    'ModelLoadingError',
    'ModelNotLoadedError',
    'UnsupportedTaskError',
    'YOLOError',
    'YOLOInference',
    'YOLOResult',
    'YOLOStreamingConfig',
    'YOLOTask',
]
