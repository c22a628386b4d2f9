"""
Controls Router

Threshold sliders, streaming configuration and the model catalogue.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from cellsay_yolo.core.dependencies import AppStateDep, ThresholdState
from cellsay_yolo.schemas.task import ModelType, SliderType


router = APIRouter(
    tags=['Controls'],
)


class SliderUpdate(BaseModel):
    value: float


@router.get('/thresholds', response_model=ThresholdState)
def get_thresholds(state: AppStateDep):
    """Current confidence, IoU and max-items values."""
    return state.thresholds


@router.put('/thresholds/{slider}', response_model=ThresholdState)
def update_threshold(slider: SliderType, update: SliderUpdate, state: AppStateDep):
    """Move one slider; out-of-range values are rejected with 400."""
    return state.update_threshold(slider, update.value)


@router.get('/config/streaming')
def streaming_config(state: AppStateDep):
    """Streaming options applied to results (wire format)."""
    return state.streaming_config.to_map()


@router.get('/models')
def list_models(state: AppStateDep):
    """Models offered by the demo and the one currently loaded."""
    loaded = state.yolo.model_path if state.yolo is not None and state.yolo.is_loaded else None
    return {
        'models': [
            {'type': model.name.lower(), 'modelName': model.model_name, 'task': model.task.value}
            for model in ModelType
        ],
        'loaded': loaded,
    }
