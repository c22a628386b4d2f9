"""
Single-image inference over the method channel.

Validates caller input, issues exactly one 'predictSingleImage' call and
reshapes the loosely-typed answer into detection records:

    {
        'classIndex': 0,
        'className': 'person',
        'confidence': 0.9,
        'boundingBox': {'left', 'top', 'right', 'bottom'},      # pixels
        'normalizedBox': {'left', 'top', 'right', 'bottom'},    # 0-1
    }

No retries, no timeout: the call either returns once or fails once.
"""

import logging
from collections.abc import Mapping
from typing import Any

from cellsay_yolo.clients.channel import MethodChannel
from cellsay_yolo.core.error_handler import handle_error
from cellsay_yolo.core.exceptions import (
    InvalidInputError,
    InvalidResultFormatError,
    UnsupportedTaskError,
)
from cellsay_yolo.schemas.task import YOLOTask
from cellsay_yolo.utils.map_converter import (
    convert_boxes_list,
    convert_to_typed_map,
    safe_get_double,
    safe_get_string,
)


logger = logging.getLogger(__name__)

DEFAULT_INSTANCE_ID = 'default'
PREDICT_METHOD = 'predictSingleImage'


class YOLOInference:
    """Inference marshalling for one model instance (object detection only)."""

    def __init__(self, channel: MethodChannel, instance_id: str, task: YOLOTask):
        self._channel = channel
        self._instance_id = instance_id
        self._task = task

    @property
    def instance_id(self) -> str:
        return self._instance_id

    @property
    def task(self) -> YOLOTask:
        return self._task

    async def predict(
        self,
        image_bytes: bytes,
        confidence_threshold: float | None = None,
        iou_threshold: float | None = None,
    ) -> dict[str, Any]:
        """
        Run detection on one encoded image.

        Args:
            image_bytes: Encoded image (JPEG/PNG/...)
            confidence_threshold: Minimum score in [0, 1]; engine default when None
            iou_threshold: NMS IoU threshold in [0, 1]; engine default when None

        Returns:
            Engine result with 'boxes' normalized and 'detections' added

        Raises:
            InvalidInputError: empty image or threshold out of range (no call made)
            InvalidResultFormatError: engine answered with a non-mapping
            UnsupportedTaskError: instance is bound to a task other than detect
            InferenceError: any other failure, with context
        """
        if not image_bytes:
            raise InvalidInputError('Image data is empty')

        if confidence_threshold is not None and not 0.0 <= confidence_threshold <= 1.0:
            raise InvalidInputError('Confidence threshold must be between 0.0 and 1.0')
        if iou_threshold is not None and not 0.0 <= iou_threshold <= 1.0:
            raise InvalidInputError('IoU threshold must be between 0.0 and 1.0')

        arguments: dict[str, Any] = {'image': image_bytes}
        if confidence_threshold is not None:
            arguments['confidenceThreshold'] = confidence_threshold
        if iou_threshold is not None:
            arguments['iouThreshold'] = iou_threshold
        if self._instance_id != DEFAULT_INSTANCE_ID:
            arguments['instanceId'] = self._instance_id

        try:
            result = await self._channel.invoke_method(PREDICT_METHOD, arguments)
        except Exception as e:
            logger.warning(f'{PREDICT_METHOD} failed on instance {self._instance_id}: {e}')
            raise handle_error(e, 'Error during image prediction') from e

        if not isinstance(result, Mapping):
            raise InvalidResultFormatError()

        return self._process_inference_result(result)

    # =========================================================================
    # Result reshaping
    # =========================================================================
    def _process_inference_result(self, result: Mapping) -> dict[str, Any]:
        result_map = convert_to_typed_map(result)

        if self._task is not YOLOTask.DETECT:
            raise UnsupportedTaskError(getattr(self._task, 'value', str(self._task)))

        boxes: list[dict[str, Any]] = []
        if isinstance(result_map.get('boxes'), list):
            boxes = convert_boxes_list(result_map['boxes'])
            result_map['boxes'] = boxes

        result_map['detections'] = [self._create_detection_map(box) for box in boxes]
        return result_map

    @staticmethod
    def _create_detection_map(box: dict[str, Any]) -> dict[str, Any]:
        return {
            'classIndex': 0,
            'className': safe_get_string(box, 'class'),
            'confidence': safe_get_double(box, 'confidence'),
            'boundingBox': {
                'left': safe_get_double(box, 'x1'),
                'top': safe_get_double(box, 'y1'),
                'right': safe_get_double(box, 'x2'),
                'bottom': safe_get_double(box, 'y2'),
            },
            'normalizedBox': {
                'left': safe_get_double(box, 'x1_norm'),
                'top': safe_get_double(box, 'y1_norm'),
                'right': safe_get_double(box, 'x2_norm'),
                'bottom': safe_get_double(box, 'y2_norm'),
            },
        }
