"""Common types and helpers shared across models."""

from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any, TypeAlias

DateKey: TypeAlias = str  # YYYY-MM-DD

HOURS_PER_DAY = 24


class InputStatus(StrEnum):
    VALID = "valid"
    DEFAULTED = "defaulted"


def is_date_key(value: Any) -> bool:
    """True only for an extended-format calendar date, YYYY-MM-DD.

    date.fromisoformat alone also takes basic (20240223) and week
    (2024-W08-5) forms, which break month/day slicing of the key.
    """
    if not isinstance(value, str):
        return False
    try:
        return date.fromisoformat(value).isoformat() == value
    except ValueError:
        return False


def utc_now() -> datetime:
    return datetime.now(UTC)
