from __future__ import annotations

import math
from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_length(value: str, field_name: str, *, min_len: int, max_len: int) -> str:
    value = require_non_empty(value, field_name)
    if len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    if len(value) > max_len:
        raise ValidationError(f"{field_name} must not exceed {max_len} characters")
    return value


def require_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must not exceed {max_len} characters")
    return value


def require_non_negative(value, field_name: str):
    if value is None or not value >= 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return value


def require_in_range(value, field_name: str, low, high):
    # NaN compares False both ways, so it lands here too
    if value is None or not low <= value <= high:
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return value


def require_choice(value, enum_cls: Type[E], field_name: str) -> E:
    """Coerce a raw string (or enum member) into ``enum_cls``."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def require_int(value, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a whole number")
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")
    if not as_float.is_integer():
        raise ValidationError(f"{field_name} must be a whole number")
    return int(as_float)


def require_number(value, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a finite number")
    return number


def require_object(value, field_name: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError(f"{field_name} must be a JSON object")
    return value
