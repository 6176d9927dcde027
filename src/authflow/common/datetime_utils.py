from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional

from ..core.exceptions import ValidationError


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Local midnight of ``day`` and the following midnight (an inclusive range)."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def parse_iso_datetime(value: Optional[str], field_name: str) -> Optional[datetime]:
    """Parse ``YYYY-MM-DD`` or a full ISO timestamp; empty input means no bound."""
    v = (value or "").strip()
    if not v:
        return None
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(v)
    except ValueError:
        raise ValidationError(f"Invalid {field_name} format")
    # Stored timestamps are naive local time.
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
