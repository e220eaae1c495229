# src/portfolio_ledger_engine/dateutils.py
import re
from datetime import date, datetime, timezone
from typing import Any

from .constants import DATE_FORMAT_ISO
from .exceptions import InvalidArgumentError

_ISO_DATE_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Short formats emitted by broker exports: de-DE style and en-GB style.
_FORMATTED_DATE_PATTERNS = (
    (re.compile(r"^\d{2}\.\d{2}\.\d{4}$"), "%d.%m.%Y"),
    (re.compile(r"^\d{2}/\d{2}/\d{4}$"), "%d/%m/%Y"),
)

DateLike = date | datetime | str


def normalize_date(value: Any) -> datetime:
    """
    Normalizes a date-like value to midnight UTC of its calendar day.

    Naive datetimes are treated as UTC; aware datetimes are converted to UTC
    before the time-of-day component is dropped.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        else:
            value = value.astimezone(timezone.utc)
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str):
        return _parse_date_string(value)
    raise InvalidArgumentError(f"Invalid date value provided: {value!r}")


def _parse_date_string(value: str) -> datetime:
    text = value.strip()
    if _ISO_DATE_REGEX.match(text):
        fmt = DATE_FORMAT_ISO
    else:
        fmt = next((f for pattern, f in _FORMATTED_DATE_PATTERNS if pattern.match(text)), None)
    if fmt is None:
        raise InvalidArgumentError(f"Invalid date string provided: {value}")
    try:
        # strptime also rejects semantically impossible dates such as 2025-06-31
        parsed = datetime.strptime(text, fmt)
    except ValueError:
        raise InvalidArgumentError(f"Invalid date string provided: {value}")
    return parsed.replace(tzinfo=timezone.utc)


def is_valid_iso_date_string(value: str) -> bool:
    if not _ISO_DATE_REGEX.match(value):
        return False
    try:
        datetime.strptime(value, DATE_FORMAT_ISO)
    except ValueError:
        return False
    return True


def compare_normalized_dates(a: DateLike, b: DateLike) -> int:
    norm_a = normalize_date(a)
    norm_b = normalize_date(b)
    if norm_a < norm_b:
        return -1
    if norm_a > norm_b:
        return 1
    return 0


def format_normalized_date(value: DateLike) -> str:
    return normalize_date(value).strftime(DATE_FORMAT_ISO)
