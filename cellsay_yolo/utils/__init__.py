"""
Shared utilities.

- map_converter: safe typed extraction from engine results
- image_processing: image decoding and validation (engine side)
- pytorch_utils: Ultralytics model loading and inference (engine side)

Only map_converter is re-exported here; the engine-side modules pull in
OpenCV, torch and ultralytics and are imported directly where needed.
"""

from .map_converter import (
    convert_boxes_list,
    convert_to_typed_map,
    safe_get_bool,
    safe_get_double,
    safe_get_int,
    safe_get_map,
    safe_get_string,
)


__all__ = [
    'convert_boxes_list',
    'convert_to_typed_map',
    'safe_get_bool',
    'safe_get_double',
    'safe_get_int',
    'safe_get_map',
    'safe_get_string',
]
