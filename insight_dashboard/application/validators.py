from __future__ import annotations

from typing import Any, Optional

from ..domain.errors import ValidationError


def require_text(value: Any, label: str) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValidationError(f"{label} is required")
    return text


def parse_int(value: Any, label: str) -> int:
    """Parse an integer from form/CLI input; bools and floats with fractions are rejected."""
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a whole number")
    if isinstance(value, int):
        return value
    text = str(value).strip() if value is not None else ""
    try:
        return int(text)
    except ValueError:
        raise ValidationError(f"{label} must be a whole number, got '{text}'") from None


def parse_positive_int(value: Any, label: str) -> int:
    number = parse_int(value, label)
    if number < 1:
        raise ValidationError(f"{label} must be at least 1")
    return number


def parse_float(value: Any, label: str) -> float:
    try:
        return float(str(value).strip())
    except ValueError:
        raise ValidationError(f"{label} must be a number, got '{value}'") from None


def optional_int(value: Any, label: str) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return None
    return parse_int(value, label)
