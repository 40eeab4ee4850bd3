from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_present(value: Optional[str], message: str) -> str:
    """Reject None and "" but keep the value as given (passwords are not stripped)."""
    if value is None or value == "":
        raise ValidationError(message)
    return value
