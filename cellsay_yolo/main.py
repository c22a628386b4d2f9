"""
Cellsay YOLO demo service.

Drives the plugin client end to end over HTTP:
- POST /predict             upload an image, get detections
- GET|PUT /thresholds       confidence / IoU / max-items sliders
- GET /config/streaming     streaming options applied to results
- POST /channels/{name}/{m} method channel for remote clients

Run:
    uvicorn cellsay_yolo.main:app --port 9600
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse

from cellsay_yolo.clients.channel import MethodChannel
from cellsay_yolo.clients.yolo import YOLO
from cellsay_yolo.config import Settings, get_settings
from cellsay_yolo.core.dependencies import AppState, ChannelFactory
from cellsay_yolo.core.exceptions import (
    InvalidInputError,
    ModelLoadingError,
    ModelNotLoadedError,
    YOLOError,
)
from cellsay_yolo.routers import channels_router, controls_router, health_router, predict_router


logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: list[tuple[type[YOLOError], int]] = [
    (InvalidInputError, 400),
    (ModelNotLoadedError, 503),
    (ModelLoadingError, 503),
]


def _status_for(error: YOLOError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return 500


# =============================================================================
# Lifespan Manager
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: build the channel (unless injected) and load the model.
    Shutdown: release the engine instance.
    """
    state: AppState = app.state.cellsay
    settings = state.settings

    logger.info('=== STARTUP ===')
    if state.channel is None:
        state.channel = ChannelFactory.create(state)

    if settings.load_model_on_startup:
        state.yolo = YOLO(
            settings.weights_path,
            channel=state.channel,
            use_multi_instance=settings.use_multi_instance,
        )
        try:
            await state.yolo.load_model()
        except YOLOError as e:
            logger.error(f'Failed to load {settings.weights_path}: {e.message}')
            raise
    logger.info('=== SERVICE READY ===')

    yield

    logger.info('=== SHUTDOWN ===')
    if state.yolo is not None:
        try:
            await state.yolo.dispose()
        except YOLOError as e:
            logger.warning(f'Error disposing model instance: {e.message}')
    logger.info('=== SHUTDOWN COMPLETE ===')


# =============================================================================
# FastAPI Application
# =============================================================================
def create_app(settings: Settings | None = None, channel: MethodChannel | None = None) -> FastAPI:
    """
    Build the demo application.

    Args:
        settings: Settings to use (environment-derived when None)
        channel: Pre-built channel; when None the lifespan builds one from settings
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
    )
    app.state.cellsay = AppState(settings, channel=channel)

    @app.middleware('http')
    async def performance_middleware(request: Request, call_next):
        """Add X-Process-Time and log slow requests."""
        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000

        response.headers['X-Process-Time'] = f'{duration_ms:.2f}ms'
        if duration_ms > settings.slow_request_threshold_ms:
            logger.warning(
                f'Slow request: {request.method} {request.url.path} - '
                f'{duration_ms:.2f}ms (threshold: {settings.slow_request_threshold_ms}ms)'
            )
        return response

    @app.exception_handler(YOLOError)
    async def yolo_error_handler(request: Request, exc: YOLOError):
        status_code = _status_for(exc)
        if status_code >= 500:
            logger.error(f'{request.method} {request.url.path}: {exc.message}')
        return ORJSONResponse(
            status_code=status_code,
            content={'error': type(exc).__name__, 'detail': exc.message},
        )

    app.include_router(health_router)
    app.include_router(predict_router)
    app.include_router(controls_router)
    app.include_router(channels_router)

    return app


logging.basicConfig(level=get_settings().log_level.upper())

app = create_app()
