"""
Detection Router

Single-image detection through the plugin client. Thresholds not given on
the request fall back to the current slider values.
"""

import logging
import time

from fastapi import APIRouter, File, Query, UploadFile

from cellsay_yolo.core.dependencies import AppStateDep, SettingsDep
from cellsay_yolo.core.exceptions import InvalidInputError
from cellsay_yolo.schemas.detection import ImageSize, PredictResponse, parse_detections


logger = logging.getLogger(__name__)

router = APIRouter(
    tags=['Detection'],
)


@router.post('/predict', response_model=PredictResponse)
async def predict(
    state: AppStateDep,
    settings: SettingsDep,
    image: UploadFile = File(...),
    confidence: float | None = Query(None, description='Confidence threshold (0-1)'),
    iou: float | None = Query(None, description='IoU threshold (0-1)'),
):
    """
    Detect objects in an uploaded image.

    Response includes:
    - detections: class name, confidence, pixel and normalized boxes
    - numDetections: count after the max-items cap
    - imageSize: original image dimensions
    - processingTimeMs: round-trip time through the channel
    """
    filename = image.filename or 'uploaded_image'
    image_data = await image.read()

    if len(image_data) > settings.max_file_size_bytes:
        raise InvalidInputError(
            f"Image '{filename}' exceeds the {settings.max_file_size_mb}MB upload limit"
        )

    yolo = state.require_model()
    thresholds = state.thresholds

    start = time.perf_counter()
    result = await yolo.predict(
        image_data,
        confidence_threshold=thresholds.confidence if confidence is None else confidence,
        iou_threshold=thresholds.iou if iou is None else iou,
    )
    result['processingTimeMs'] = round((time.perf_counter() - start) * 1000, 2)

    result = state.streaming_config.filter_result(result)
    detections = parse_detections(result)[: thresholds.num_items]
    logger.debug(f'{filename}: {len(detections)} detections')

    image_size = result.get('imageSize')
    return PredictResponse(
        detections=detections,
        num_detections=len(detections),
        image_size=ImageSize(**image_size) if isinstance(image_size, dict) else None,
        processing_time_ms=result.get('processingTimeMs'),
    )
