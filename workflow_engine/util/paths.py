"""Dot-path access and loose numeric coercion shared by the processors."""

from __future__ import annotations

import math
from typing import Any, Optional


def get_path(data: Any, path: Optional[str]) -> Any:
    """
    Walk ``data`` along a dot separated path.

    Mapping keys and list indices are both supported (``items.0.name``).
    A missing segment yields None instead of raising.
    """
    if not path:
        return data
    current = data
    for key in path.split('.'):
        if current is None:
            return None
        if isinstance(current, dict):
            current = current.get(key)
        elif isinstance(current, (list, tuple)):
            try:
                current = current[int(key)]
            except (ValueError, IndexError):
                return None
        else:
            current = getattr(current, key, None)
    return current


def to_number(value: Any, default: float = 0) -> Any:
    """
    Coerce a value to int/float, returning ``default`` when it is not numeric.

    Integers stay integers so that sums of ints remain ints.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return default
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return default
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return default
        return default if math.isnan(number) else number
    return default


def as_float(value: Any) -> float:
    """Numeric view used by comparisons; non numeric values become NaN."""
    number = to_number(value, default=math.nan)
    return float(number)
