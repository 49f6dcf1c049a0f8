"""
Boundary parsing for weight entries.

Everything that arrives from a request is loosely typed (form values,
JSON numbers, strings). These helpers turn it into `str`, `float`,
`date` and `int`, raising EntryValidationError for the first problem
found. No store access happens here.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from app.core.errors import (
    ENTRY_ID_MESSAGE,
    FIELDS_MESSAGE,
    WEIGHT_MESSAGE,
    EntryValidationError,
)

DATE_MESSAGE = "Date must be a valid calendar date (YYYY-MM-DD)."

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class ValidEntry:
    subject: str
    weight: float
    day: date


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_subject(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise EntryValidationError(FIELDS_MESSAGE, field="subject")
    return value.strip()


def parse_weight(value: Any) -> float:
    if _is_blank(value):
        raise EntryValidationError(FIELDS_MESSAGE, field="weight")
    # bool is an int subclass; True is not a weight.
    if isinstance(value, bool):
        raise EntryValidationError(WEIGHT_MESSAGE, field="weight")
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise EntryValidationError(WEIGHT_MESSAGE, field="weight") from None
    else:
        raise EntryValidationError(WEIGHT_MESSAGE, field="weight")
    if not math.isfinite(number) or number <= 0:
        raise EntryValidationError(WEIGHT_MESSAGE, field="weight")
    return number


def parse_day(value: Any, field: str = "date") -> date:
    """Parse an ISO-8601 calendar date (YYYY-MM-DD) or pass a date through."""
    if _is_blank(value):
        raise EntryValidationError(FIELDS_MESSAGE, field=field)
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE.match(value.strip()):
        raise EntryValidationError(DATE_MESSAGE, field=field)
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        # e.g. 2024-02-30
        raise EntryValidationError(DATE_MESSAGE, field=field) from None


def parse_optional_day(value: Any, field: str) -> Optional[date]:
    if _is_blank(value):
        return None
    return parse_day(value, field=field)


def parse_entry_id(value: Any) -> int:
    if isinstance(value, bool):
        raise EntryValidationError(ENTRY_ID_MESSAGE, field="id")
    if isinstance(value, int):
        entry_id = value
    elif isinstance(value, str) and value.strip().isdecimal():
        entry_id = int(value.strip())
    else:
        raise EntryValidationError(ENTRY_ID_MESSAGE, field="id")
    if entry_id <= 0:
        raise EntryValidationError(ENTRY_ID_MESSAGE, field="id")
    return entry_id


def validate_entry(subject: Any, weight: Any, day: Any) -> ValidEntry:
    """Validate a candidate entry; the first violated constraint wins."""
    return ValidEntry(
        subject=parse_subject(subject),
        weight=parse_weight(weight),
        day=parse_day(day),
    )
