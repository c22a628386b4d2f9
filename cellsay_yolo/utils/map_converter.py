"""
Typed extraction from loosely-typed engine results.

The engine answers with whatever its platform serialiser produces: keys may
be non-strings, numbers may arrive as ints or strings, entries may be
missing. Every field is read through one of the safe getters below so a bad
field degrades to a default instead of raising.
"""

from collections.abc import Mapping
from typing import Any


def convert_to_typed_map(value: Mapping) -> dict[str, Any]:
    """Copy a mapping with every key coerced to str."""
    return {str(k): v for k, v in value.items()}


def convert_boxes_list(boxes: list) -> list[dict[str, Any]]:
    """Convert a raw boxes list, dropping entries that are not mappings."""
    return [convert_to_typed_map(box) for box in boxes if isinstance(box, Mapping)]


def safe_get_string(data: Mapping[str, Any], key: str, default: str = '') -> str:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, str):
        return value
    return str(value)


def safe_get_double(data: Mapping[str, Any], key: str, default: float = 0.0) -> float:
    """Read a float; ints and numeric strings are accepted, bools are not."""
    value = data.get(key)
    if isinstance(value, bool):
        return default
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return default
    return default


def safe_get_int(data: Mapping[str, Any], key: str, default: int = 0) -> int:
    value = data.get(key)
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return default
    return default


def safe_get_bool(data: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = data.get(key)
    if isinstance(value, bool):
        return value
    return default


def safe_get_map(data: Mapping[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    if isinstance(value, Mapping):
        return convert_to_typed_map(value)
    return {}
