"""
PyTorch-specific utilities for the reference engine.

Thread-safe prediction and conversion of Ultralytics results into the box
records the channel protocol expects.
"""

import logging
from typing import Any

import numpy as np
import torch
from ultralytics import YOLO
from ultralytics.utils import ThreadingLocked


logger = logging.getLogger(__name__)


# ============================================================================
# Thread-Safe Inference
# ============================================================================
# PyTorch models are NOT thread-safe; channel handlers run in worker threads,
# so every call into a shared model goes through @ThreadingLocked().
# https://docs.ultralytics.com/guides/yolo-thread-safe-inference/
# ============================================================================


@ThreadingLocked()
def thread_safe_predict(
    model: YOLO,
    img: np.ndarray,
    conf: float | None = None,
    iou: float | None = None,
    max_det: int = 300,
):
    """
    Single image inference, serialized across threads.

    Args:
        model: Shared YOLO model
        img: Image array (HWC, BGR)
        conf: Confidence threshold (Ultralytics default when None)
        iou: NMS IoU threshold (Ultralytics default when None)
        max_det: Maximum detections returned

    Returns:
        Ultralytics Results list
    """
    kwargs: dict[str, Any] = {'verbose': False, 'max_det': max_det}
    if conf is not None:
        kwargs['conf'] = conf
    if iou is not None:
        kwargs['iou'] = iou
    # FP16 on GPU
    kwargs['half'] = torch.cuda.is_available()
    return model(img, **kwargs)


def load_yolo_model(model_path: str, warmup: bool = True) -> YOLO:
    """
    Load a YOLO model and optionally run one dummy inference.

    The first inference compiles kernels; doing it here keeps the first
    user request fast.
    """
    logger.info(f'Loading YOLO model ({model_path})...')
    model = YOLO(model_path)

    if warmup:
        dummy = np.zeros((640, 640, 3), dtype=np.uint8)
        thread_safe_predict(model, dummy)
        logger.info('Warmup complete')

    return model


def format_boxes(results) -> list[dict[str, Any]]:
    """
    Convert Ultralytics results into channel box records.

    Each record carries both absolute pixel (x1..y2) and normalized
    (x1_norm..y2_norm) corners, the class name and the score.

    Example:
        >>> format_boxes(model(img))
        [{'class': 'person', 'confidence': 0.91, 'x1': 12.0, ..., 'y2_norm': 0.84}]
    """
    result = results[0]
    names = result.names
    boxes = result.boxes.xyxy.cpu().numpy()
    boxes_norm = result.boxes.xyxyn.cpu().numpy()
    scores = result.boxes.conf.cpu().numpy()
    classes = result.boxes.cls.cpu().numpy()

    return [
        {
            'class': names.get(int(cls), str(int(cls))),
            'confidence': float(score),
            'x1': float(box[0]),
            'y1': float(box[1]),
            'x2': float(box[2]),
            'y2': float(box[3]),
            'x1_norm': float(box_n[0]),
            'y1_norm': float(box_n[1]),
            'x2_norm': float(box_n[2]),
            'y2_norm': float(box_n[3]),
        }
        for box, box_n, score, cls in zip(boxes, boxes_norm, scores, classes, strict=False)
    ]
