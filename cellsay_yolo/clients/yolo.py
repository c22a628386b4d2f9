"""
Plugin facade: one model instance on the engine side.

Owns the instance id and the model lifecycle, and hands prediction to
YOLOInference.

Usage:
    yolo = YOLO('yolo11n.pt', channel=channel)
    await yolo.load_model()
    result = await yolo.predict(image_bytes, confidence_threshold=0.5)
    await yolo.dispose()
"""

import logging
import uuid
from typing import Any

from cellsay_yolo.clients.channel import MethodChannel
from cellsay_yolo.clients.yolo_inference import DEFAULT_INSTANCE_ID, YOLOInference
from cellsay_yolo.core.error_handler import handle_error
from cellsay_yolo.core.exceptions import ModelNotLoadedError
from cellsay_yolo.schemas.task import YOLOTask


logger = logging.getLogger(__name__)


class YOLO:
    """Object detection model bound to one engine instance."""

    def __init__(
        self,
        model_path: str,
        channel: MethodChannel,
        task: YOLOTask = YOLOTask.DETECT,
        use_multi_instance: bool = False,
    ):
        """
        Args:
            model_path: Model file or asset name understood by the engine
            channel: Boundary to the engine
            task: Task the model serves
            use_multi_instance: Give this model its own engine instance id
                instead of sharing the default one
        """
        self.model_path = model_path
        self.task = task
        self._channel = channel
        self.instance_id = f'yolo_{uuid.uuid4().hex}' if use_multi_instance else DEFAULT_INSTANCE_ID
        self._inference = YOLOInference(channel=channel, instance_id=self.instance_id, task=task)
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def _instance_arguments(self) -> dict[str, Any]:
        if self.instance_id != DEFAULT_INSTANCE_ID:
            return {'instanceId': self.instance_id}
        return {}

    async def load_model(self) -> None:
        """Ask the engine to load the model for this instance."""
        arguments = {'modelPath': self.model_path, 'task': self.task.value}
        arguments.update(self._instance_arguments())

        try:
            await self._channel.invoke_method('loadModel', arguments)
        except Exception as e:
            raise handle_error(e, 'Failed to load model') from e

        self._loaded = True
        logger.info(f'Model {self.model_path} loaded (instance {self.instance_id})')

    async def predict(
        self,
        image_bytes: bytes,
        confidence_threshold: float | None = None,
        iou_threshold: float | None = None,
    ) -> dict[str, Any]:
        """See YOLOInference.predict()."""
        if not self._loaded:
            raise ModelNotLoadedError('Model has not been loaded. Call load_model() first.')
        return await self._inference.predict(
            image_bytes,
            confidence_threshold=confidence_threshold,
            iou_threshold=iou_threshold,
        )

    async def dispose(self) -> None:
        """Release the engine-side instance."""
        if not self._loaded:
            return
        try:
            await self._channel.invoke_method('disposeInstance', self._instance_arguments())
        except Exception as e:
            raise handle_error(e, 'Failed to dispose model instance') from e
        finally:
            self._loaded = False
        logger.info(f'Instance {self.instance_id} disposed')
