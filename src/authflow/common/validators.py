from __future__ import annotations

import re
from typing import Any

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_text(value: Any, field_name: str) -> str:
    """``value`` unchanged if it is a string; JSON numbers, lists etc. are rejected."""
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return value


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None:
        raise ValidationError(f"{field_name} is required")
    value = require_text(value, field_name).strip()
    if not value:
        raise ValidationError(f"{field_name} is required")
    return value


def require_min_length(value: Any, field_name: str, min_len: int) -> str:
    if value is None or len(require_text(value, field_name)) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: Any, field_name: str = "Email") -> str:
    email = require_non_empty(value, field_name).lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError(f"{field_name} is not a valid address")
    return email


def normalize_email(value: Any) -> str:
    """Lookup form of an email; never raises."""
    if not isinstance(value, str):
        return ""
    return value.strip().lower()
