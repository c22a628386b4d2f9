"""
Detection-related Pydantic models.

Typed view over the detection records produced by YOLOInference.predict().
Field aliases match the camelCase keys of the result mapping.
"""

from typing import Any

from pydantic import BaseModel, Field

from cellsay_yolo.utils.map_converter import (
    convert_to_typed_map,
    safe_get_double,
    safe_get_int,
    safe_get_map,
    safe_get_string,
)


class BoundingBox(BaseModel):
    """Box edges; absolute pixels or normalized [0, 1] depending on the field."""

    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @classmethod
    def from_map(cls, data: dict[str, Any]) -> 'BoundingBox':
        return cls(
            left=safe_get_double(data, 'left'),
            top=safe_get_double(data, 'top'),
            right=safe_get_double(data, 'right'),
            bottom=safe_get_double(data, 'bottom'),
        )


class YOLOResult(BaseModel):
    """One recognized object instance."""

    class_index: int = Field(default=0, alias='classIndex')
    class_name: str = Field(default='', alias='className')
    confidence: float = Field(default=0.0, description='Detection confidence score')
    bounding_box: BoundingBox = Field(
        default_factory=BoundingBox, alias='boundingBox', description='Absolute pixels'
    )
    normalized_box: BoundingBox = Field(
        default_factory=BoundingBox, alias='normalizedBox', description='Normalized 0-1'
    )

    class Config:
        populate_by_name = True

    @classmethod
    def from_map(cls, data: dict[str, Any]) -> 'YOLOResult':
        """Build from a detection record, tolerating missing or mistyped fields."""
        data = convert_to_typed_map(data)
        return cls(
            class_index=safe_get_int(data, 'classIndex'),
            class_name=safe_get_string(data, 'className'),
            confidence=safe_get_double(data, 'confidence'),
            bounding_box=BoundingBox.from_map(safe_get_map(data, 'boundingBox')),
            normalized_box=BoundingBox.from_map(safe_get_map(data, 'normalizedBox')),
        )

    def to_map(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def parse_detections(result: dict[str, Any]) -> list[YOLOResult]:
    """Typed detections from a predict() result (empty when absent)."""
    detections = result.get('detections')
    if not isinstance(detections, list):
        return []
    return [YOLOResult.from_map(d) for d in detections if isinstance(d, dict)]


class ImageSize(BaseModel):
    """Original image dimensions reported by the engine."""

    width: int = Field(default=0, description='Original image width in pixels')
    height: int = Field(default=0, description='Original image height in pixels')


class PredictResponse(BaseModel):
    """Response schema for the demo predict endpoint."""

    detections: list[YOLOResult] = Field(default_factory=list)
    num_detections: int = Field(default=0, alias='numDetections')
    image_size: ImageSize | None = Field(default=None, alias='imageSize')
    processing_time_ms: float | None = Field(default=None, alias='processingTimeMs')
    status: str = Field(default='success', description="'success' or 'error'")

    class Config:
        populate_by_name = True
