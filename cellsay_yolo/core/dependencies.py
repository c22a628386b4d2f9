"""
FastAPI dependency injection for the demo service.

Uses FastAPI's Depends() pattern for proper lifecycle management.
Resources are created once in the lifespan and reused across requests.
"""

import logging
import math
from typing import Annotated

from fastapi import Depends, Request
from pydantic import BaseModel, Field

from cellsay_yolo.clients.channel import HttpMethodChannel, LocalMethodChannel, MethodChannel
from cellsay_yolo.clients.yolo import YOLO
from cellsay_yolo.config.settings import Settings
from cellsay_yolo.core.exceptions import InvalidInputError, ModelNotLoadedError
from cellsay_yolo.schemas.streaming import YOLOStreamingConfig
from cellsay_yolo.schemas.task import SliderType


logger = logging.getLogger(__name__)


class ThresholdState(BaseModel):
    """Current slider values applied to predictions."""

    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    iou: float = Field(default=0.45, ge=0.0, le=1.0)
    num_items: int = Field(default=30, ge=1, le=100, alias='numItems')

    class Config:
        populate_by_name = True


# =============================================================================
# Application State (managed by lifespan context)
# =============================================================================
class AppState:
    """
    Application state container for shared resources.

    One instance per FastAPI app, stored on app.state.cellsay.
    """

    def __init__(self, settings: Settings, channel: MethodChannel | None = None):
        self.settings = settings
        self.channel = channel
        self.engine = None
        self.yolo: YOLO | None = None
        self.streaming_config = YOLOStreamingConfig.minimal()
        self.active_slider = SliderType.NONE
        self.thresholds = ThresholdState(
            confidence=settings.default_confidence_threshold,
            iou=settings.default_iou_threshold,
            num_items=settings.default_num_items_threshold,
        )

    def require_model(self) -> YOLO:
        if self.yolo is None or not self.yolo.is_loaded:
            raise ModelNotLoadedError('Model has not been loaded yet')
        return self.yolo

    def update_threshold(self, slider: SliderType, value: float) -> ThresholdState:
        """Apply a slider change; out-of-range values are rejected."""
        if slider is SliderType.NONE:
            raise InvalidInputError('No slider selected')

        if slider in (SliderType.CONFIDENCE, SliderType.IOU):
            if not 0.0 <= value <= 1.0:
                raise InvalidInputError(f'{slider.value} threshold must be between 0.0 and 1.0')
            field = 'confidence' if slider is SliderType.CONFIDENCE else 'iou'
            self.thresholds = self.thresholds.model_copy(update={field: float(value)})
        else:
            if not math.isfinite(value) or value != int(value) or not 1 <= value <= 100:
                raise InvalidInputError('Maximum items must be a whole number between 1 and 100')
            self.thresholds = self.thresholds.model_copy(update={'num_items': int(value)})

        self.active_slider = slider
        logger.info(f'Threshold {slider.value} set to {value}')
        return self.thresholds


# =============================================================================
# Channel Factory
# =============================================================================
class ChannelFactory:
    """Builds the channel configured by CHANNEL_BACKEND."""

    @staticmethod
    def create(state: AppState) -> MethodChannel:
        settings = state.settings

        if settings.channel_backend == 'http':
            logger.info(f'Using HTTP channel ({settings.engine_url})')
            return HttpMethodChannel(
                settings.channel_name, settings.engine_url, timeout=settings.engine_timeout
            )

        # Imported lazily: pulls in torch and ultralytics
        from cellsay_yolo.services.engine import UltralyticsEngine

        channel = LocalMethodChannel(settings.channel_name)
        state.engine = UltralyticsEngine()
        state.engine.register(channel)
        return channel


# =============================================================================
# FastAPI Dependencies (use with Depends())
# =============================================================================
def get_app_state(request: Request) -> AppState:
    """Dependency for the per-app state."""
    return request.app.state.cellsay


def get_app_settings(state: Annotated[AppState, Depends(get_app_state)]) -> Settings:
    """Dependency for the settings the app was created with."""
    return state.settings


# Type aliases for cleaner endpoint signatures
AppStateDep = Annotated[AppState, Depends(get_app_state)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
