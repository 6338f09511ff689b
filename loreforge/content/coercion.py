"""Primitive-safe readers shared by every pipeline stage.

Generated payloads put the same value under different shapes (a number, a
numeric string, a one-element list, an object). These helpers read a value
and degrade to an empty default of the requested type instead of raising, so
normalizers can stay declarative.

Conventions:
    - ``None`` means "absent"; ``first_present`` is the null-coalescing read.
    - Booleans are never numbers.
    - Strings are always trimmed.
"""

import math
import re
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

T = TypeVar("T")
Number = Union[int, float]

_NUMERIC_RX = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def first_present(*values: Any) -> Any:
    """Return the first value that is not None (or None)."""
    for value in values:
        if value is not None:
            return value
    return None


def first_filled(*values: Any) -> Any:
    """Like first_present, but also skips blank strings and empty lists."""
    for value in values:
        if not is_blank(value):
            return value
    return None


def ensure_string(value: Any, fallback: str = "") -> str:
    if isinstance(value, str):
        return value.strip()
    if value is None:
        return fallback
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return fallback
        return str(int(value)) if value.is_integer() else str(value)
    return fallback


def ensure_number(value: Any) -> Optional[Number]:
    """Finite number from a number or numeric string, integral values as int."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not _NUMERIC_RX.match(text):
            return None
        value = float(text)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value) if value.is_integer() else value
    return None


def ensure_int(value: Any) -> Optional[int]:
    number = ensure_number(value)
    if number is None:
        return None
    return int(number)


def ensure_array(value: Any, mapper: Optional[Callable[[Any], Optional[T]]] = None) -> List[Any]:
    """Wrap scalars in a list; mapper results of None are dropped."""
    if isinstance(value, (list, tuple)):
        base = list(value)
    elif value is None:
        base = []
    else:
        base = [value]
    if mapper is None:
        return base
    out: List[Any] = []
    for item in base:
        mapped = mapper(item)
        if mapped is not None:
            out.append(mapped)
    return out


def ensure_string_array(value: Any) -> List[str]:
    return ensure_array(value, lambda v: ensure_string(v) or None)


def ensure_object(value: Any) -> Dict[str, Any]:
    if isinstance(value, dict):
        return value
    return {}


def ensure_flag(value: Any) -> bool:
    """True only for explicit truthy markers (True, "true", "yes")."""
    if value is True:
        return True
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes"}
    return False


def is_blank(value: Any) -> bool:
    """Absent for storage purposes: None, whitespace-only string, empty list."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def merge_draft(source: Any) -> Dict[str, Any]:
    """Overlay a ``draft`` sub-object onto its parent payload."""
    base = ensure_object(source)
    draft = ensure_object(base.get("draft"))
    if not draft:
        return base
    merged = dict(base)
    merged.update(draft)
    return merged


def sub_object(source: Dict[str, Any], *keys: str) -> Dict[str, Any]:
    """First non-empty dict found under one of ``keys``, else the source itself."""
    for key in keys:
        candidate = source.get(key)
        if isinstance(candidate, dict) and candidate:
            return candidate
    return source
