"""
Field coercion helpers for building records from loosely-typed dictionaries.
"""

from datetime import date, datetime
from typing import Any, Optional


def parse_date(value: Any) -> Optional[date]:
    """
    Parse a date from a date, datetime or ISO string.

    Accepts "YYYY-MM-DD" and full ISO timestamps. Returns None for empty
    values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            return datetime.strptime(text[:10], "%Y-%m-%d").date()
    raise ValueError(f"Cannot parse date from {value!r}")


def parse_bool(value: Any, default: bool = False) -> bool:
    """Parse a boolean flag, accepting common string spellings."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1", "y")
    return bool(value)


def parse_amount(value: Any, default: float = 0.0) -> float:
    """Parse a numeric amount; raises ValueError for non-numeric input."""
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid amount: {value!r}") from None
