"""
Reference inference engine backed by Ultralytics YOLO.

Answers the method-channel protocol the client speaks, so the demo can run
without a device:

- loadModel          {modelPath, task, instanceId?}
- predictSingleImage {image, confidenceThreshold?, iouThreshold?, instanceId?}
- disposeInstance    {instanceId?}

Failures are reported as ChannelError codes the client's error handler
understands (MODEL_NOT_FOUND, INVALID_MODEL, UNSUPPORTED_TASK,
MODEL_NOT_LOADED, INVALID_IMAGE, INFERENCE_ERROR).
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

from cellsay_yolo.clients.channel import ChannelError, LocalMethodChannel
from cellsay_yolo.clients.yolo_inference import DEFAULT_INSTANCE_ID, PREDICT_METHOD
from cellsay_yolo.core.exceptions import YOLOError
from cellsay_yolo.schemas.task import YOLOTask
from cellsay_yolo.utils.image_processing import decode_image, validate_image
from cellsay_yolo.utils.pytorch_utils import format_boxes, load_yolo_model, thread_safe_predict


logger = logging.getLogger(__name__)


class UltralyticsEngine:
    """Per-instance model registry serving channel calls."""

    def __init__(
        self,
        max_det: int = 300,
        loader: Callable[[str], Any] = load_yolo_model,
        predictor: Callable[..., Any] = thread_safe_predict,
        formatter: Callable[[Any], list[dict[str, Any]]] = format_boxes,
    ):
        self.max_det = max_det
        self._loader = loader
        self._predictor = predictor
        self._formatter = formatter
        self._models: dict[str, Any] = {}
        self._lock = threading.Lock()

    @property
    def instances(self) -> list[str]:
        with self._lock:
            return sorted(self._models)

    def register(self, channel: LocalMethodChannel) -> None:
        """Bind the engine's handlers to a channel."""
        channel.register('loadModel', self.load_model)
        channel.register(PREDICT_METHOD, self.predict_single_image)
        channel.register('disposeInstance', self.dispose_instance)
        logger.info(f'Engine registered on channel {channel.name}')

    # =========================================================================
    # Handlers
    # =========================================================================
    def load_model(self, arguments: dict[str, Any]) -> bool:
        instance_id = _instance_id(arguments)
        model_path = arguments.get('modelPath')
        if not isinstance(model_path, str) or not model_path:
            raise ChannelError('INVALID_MODEL', 'Model path is required')

        try:
            YOLOTask.from_name(str(arguments.get('task', YOLOTask.DETECT.value)))
        except YOLOError as e:
            raise ChannelError('UNSUPPORTED_TASK', e.message) from e

        try:
            model = self._loader(model_path)
        except FileNotFoundError as e:
            raise ChannelError('MODEL_NOT_FOUND', f'Model file not found: {model_path}') from e
        except Exception as e:
            raise ChannelError('INVALID_MODEL', f'Failed to load {model_path}: {e}') from e

        with self._lock:
            self._models[instance_id] = model
        logger.info(f'Loaded {model_path} as instance {instance_id}')
        return True

    def predict_single_image(self, arguments: dict[str, Any]) -> dict[str, Any]:
        instance_id = _instance_id(arguments)
        with self._lock:
            model = self._models.get(instance_id)
        if model is None:
            raise ChannelError('MODEL_NOT_LOADED', f"No model loaded for instance '{instance_id}'")

        image_bytes = arguments.get('image')
        if not isinstance(image_bytes, bytes | bytearray) or not image_bytes:
            raise ChannelError('INVALID_IMAGE', 'Image data is missing or empty')

        try:
            img = decode_image(bytes(image_bytes))
            validate_image(img)
        except ValueError as e:
            raise ChannelError('INVALID_IMAGE', str(e)) from e

        try:
            results = self._predictor(
                model,
                img,
                conf=arguments.get('confidenceThreshold'),
                iou=arguments.get('iouThreshold'),
                max_det=self.max_det,
            )
            boxes = self._formatter(results)
        except Exception as e:
            logger.error(f'Inference failed on instance {instance_id}: {e}')
            raise ChannelError('INFERENCE_ERROR', f'Inference failed: {e}') from e

        height, width = img.shape[:2]
        return {'boxes': boxes, 'imageSize': {'width': width, 'height': height}}

    def dispose_instance(self, arguments: dict[str, Any]) -> bool:
        instance_id = _instance_id(arguments)
        with self._lock:
            removed = self._models.pop(instance_id, None) is not None
        if removed:
            logger.info(f'Disposed instance {instance_id}')
        return removed


def _instance_id(arguments: dict[str, Any]) -> str:
    value = arguments.get('instanceId')
    return value if isinstance(value, str) and value else DEFAULT_INSTANCE_ID
