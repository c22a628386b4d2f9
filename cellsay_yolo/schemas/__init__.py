"""
Pydantic schemas and enumerations.

Task catalogue, streaming configuration and detection records.
"""

from cellsay_yolo.schemas.detection import (
    BoundingBox,
    ImageSize,
    PredictResponse,
    YOLOResult,
    parse_detections,
)
from cellsay_yolo.schemas.streaming import YOLOStreamingConfig
from cellsay_yolo.schemas.task import ModelType, SliderType, YOLOTask


__all__ = [
    'BoundingBox',
    'ImageSize',
    'ModelType',
    'PredictResponse',
    'SliderType',
    'YOLOResult',
    'YOLOStreamingConfig',
    'YOLOTask',
    'parse_detections',
]
