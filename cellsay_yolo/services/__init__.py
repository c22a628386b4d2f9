"""
Services behind the method channel.

- engine: UltralyticsEngine, the reference engine used by the demo

Import directly from cellsay_yolo.services.engine (pulls in torch/ultralytics).
"""
