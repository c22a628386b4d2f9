"""
Streaming configuration for continuous (multi-frame) inference consumers.

Describes which result fields a consumer wants and how often results should
be produced. Single-image prediction does not use the cadence fields; they
are carried so a streaming consumer can read them.

The classification, mask, pose and OBB toggles are kept for compatibility
with callers built against the multi-task API. They are accepted and
stored, but the detection-only runtime ignores them.
"""

from datetime import timedelta
from typing import Any

from pydantic import BaseModel, Field


# Toggles that are stored but never change behaviour
INERT_FIELDS = ('include_classifications', 'include_masks', 'include_poses', 'include_obb')

# Result payload keys produced only by the retired tasks
INERT_RESULT_KEYS = ('classification', 'masks', 'keypoints', 'obb')


class YOLOStreamingConfig(BaseModel):
    """
    Immutable streaming options.

    Defaults favour speed: detections plus FPS and processing time, nothing
    heavy. If both inference_frequency and skip_frames are set,
    inference_frequency takes precedence and skip_frames is ignored.
    """

    include_detections: bool = Field(
        default=True, description='Bounding boxes, confidence and class per object'
    )
    include_classifications: bool = Field(
        default=False, description='Ignored in detection-only mode'
    )
    include_processing_time_ms: bool = Field(
        default=True, description='Per-frame processing time in milliseconds'
    )
    include_fps: bool = Field(default=True, description='Frames per second metric')
    include_masks: bool = Field(default=False, description='Ignored in detection-only mode')
    include_poses: bool = Field(default=False, description='Ignored in detection-only mode')
    include_obb: bool = Field(default=False, description='Ignored in detection-only mode')
    include_original_image: bool = Field(
        default=False, description='Raw frame bytes; large, use for debugging only'
    )

    max_fps: int | None = Field(
        default=None, description='Upper bound on result delivery rate (None = no limit)'
    )
    throttle_interval: timedelta | None = Field(
        default=None, description='Minimum gap between consecutive results'
    )
    inference_frequency: int | None = Field(
        default=None, description='Target inferences per second (None = every frame)'
    )
    skip_frames: int | None = Field(
        default=None, description='Camera frames skipped between inferences'
    )

    class Config:
        frozen = True

    # ==========================================================================
    # Presets
    # ==========================================================================
    @classmethod
    def minimal(cls) -> 'YOLOStreamingConfig':
        """Essential detection data and performance metrics only."""
        return cls(
            include_detections=True,
            include_classifications=False,
            include_processing_time_ms=True,
            include_fps=True,
            include_masks=False,
            include_poses=False,
            include_obb=False,
            include_original_image=False,
        )

    @classmethod
    def custom(
        cls,
        include_detections: bool | None = None,
        include_classifications: bool | None = None,
        include_processing_time_ms: bool | None = None,
        include_fps: bool | None = None,
        include_masks: bool | None = None,
        include_poses: bool | None = None,
        include_obb: bool | None = None,
        include_original_image: bool | None = None,
        max_fps: int | None = None,
        throttle_interval: timedelta | None = None,
        inference_frequency: int | None = None,
        skip_frames: int | None = None,
    ) -> 'YOLOStreamingConfig':
        """
        Build a config from whichever options the caller cares about.

        Unset toggles default to False, except detections and the two
        performance metrics which default to True.
        """
        return cls(
            include_detections=True if include_detections is None else include_detections,
            include_classifications=bool(include_classifications),
            include_processing_time_ms=(
                True if include_processing_time_ms is None else include_processing_time_ms
            ),
            include_fps=True if include_fps is None else include_fps,
            include_masks=bool(include_masks),
            include_poses=bool(include_poses),
            include_obb=bool(include_obb),
            include_original_image=bool(include_original_image),
            max_fps=max_fps,
            throttle_interval=throttle_interval,
            inference_frequency=inference_frequency,
            skip_frames=skip_frames,
        )

    # ==========================================================================
    # Resolution rules
    # ==========================================================================
    @property
    def effective_skip_frames(self) -> int | None:
        """skip_frames as the consumer must honour it (None when frequency is set)."""
        if self.inference_frequency is not None:
            return None
        return self.skip_frames

    def active_result_fields(self) -> set[str]:
        """Result keys this config asks for, excluding inert toggles."""
        fields = set()
        if self.include_detections:
            fields.update(('detections', 'boxes'))
        if self.include_fps:
            fields.add('fps')
        if self.include_processing_time_ms:
            fields.add('processingTimeMs')
        if self.include_original_image:
            fields.add('originalImage')
        return fields

    def filter_result(self, result: dict[str, Any]) -> dict[str, Any]:
        """
        Drop result fields the consumer did not ask for.

        Keys this config does not govern pass through untouched; payloads of
        the retired tasks are always removed.
        """
        governed = {'detections', 'boxes', 'fps', 'processingTimeMs', 'originalImage'}
        active = self.active_result_fields()
        return {
            key: value
            for key, value in result.items()
            if key not in INERT_RESULT_KEYS and (key not in governed or key in active)
        }

    def to_map(self) -> dict[str, Any]:
        """Wire representation sent to a native streaming layer."""
        return {
            'includeDetections': self.include_detections,
            'includeClassifications': self.include_classifications,
            'includeProcessingTimeMs': self.include_processing_time_ms,
            'includeFps': self.include_fps,
            'includeMasks': self.include_masks,
            'includePoses': self.include_poses,
            'includeOBB': self.include_obb,
            'includeOriginalImage': self.include_original_image,
            'maxFPS': self.max_fps,
            'throttleIntervalMs': (
                int(self.throttle_interval.total_seconds() * 1000)
                if self.throttle_interval is not None
                else None
            ),
            'inferenceFrequency': self.inference_frequency,
            'skipFrames': self.skip_frames,
        }
