"""
Task and model catalogue.

Only object detection is live in this build. The retired task names are
still recognised so that callers get a clear "unsupported" error instead of
a generic lookup failure.
"""

from enum import Enum

from cellsay_yolo.core.exceptions import InvalidInputError, UnsupportedTaskError


# Task names the engine used to accept; rejected at runtime
RETIRED_TASKS = ('segment', 'classify', 'pose', 'obb')


class YOLOTask(str, Enum):
    """Capability requested from the engine."""

    DETECT = 'detect'

    @classmethod
    def from_name(cls, name: str) -> 'YOLOTask':
        """
        Resolve a task by name.

        Raises:
            UnsupportedTaskError: name is a retired task
            InvalidInputError: name is not a task at all
        """
        normalized = name.strip().lower()
        for task in cls:
            if task.value == normalized:
                return task
        if normalized in RETIRED_TASKS:
            raise UnsupportedTaskError(normalized)
        raise InvalidInputError(f"Unknown YOLO task '{name}'")


class ModelType(Enum):
    """Models offered by the demo, each bound to the task it serves."""

    DETECT = ('yolo11n', YOLOTask.DETECT)

    def __init__(self, model_name: str, task: YOLOTask):
        self.model_name = model_name
        self.task = task


class SliderType(str, Enum):
    """Threshold the demo user is currently adjusting."""

    NONE = 'none'
    NUM_ITEMS = 'numItems'
    CONFIDENCE = 'confidence'
    IOU = 'iou'
