from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    v = str(value).strip()
    return v or None


def optional_int(value: Any, field_name: str) -> Optional[int]:
    v = optional_str(value)
    if v is None:
        return None
    try:
        return int(v)
    except ValueError:
        raise ValidationError(f"{field_name} must be an integer")


def optional_coordinate(value: Any, field_name: str, *, limit: float) -> Optional[float]:
    v = optional_str(value)
    if v is None:
        return None
    try:
        number = float(v)
    except ValueError:
        raise ValidationError(f"{field_name} must be a number")
    if not -limit <= number <= limit:
        raise ValidationError(f"{field_name} out of range")
    return number
