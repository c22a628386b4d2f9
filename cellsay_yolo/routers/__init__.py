"""
FastAPI routers for the demo service.

- health: service info and health checks
- predict: single-image detection
- controls: thresholds, streaming config, model catalogue
- channels: method channel over HTTP
"""

from cellsay_yolo.routers.channels import router as channels_router
from cellsay_yolo.routers.controls import router as controls_router
from cellsay_yolo.routers.health import router as health_router
from cellsay_yolo.routers.predict import router as predict_router


__all__ = [
    'channels_router',
    'controls_router',
    'health_router',
    'predict_router',
]
