from typing import Any, Optional, Union
import pandas as pd
import re
from datetime import datetime, date

# Parsing helpers for dates, numbers, booleans.
# None of them raise: unparsable input falls back to a default so a table can
# always be populated.

DATE_FORMATS = [
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%m/%d/%Y",
    "%d-%m-%Y",
]
DATETIME_FORMATS = [
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
]
DISPLAY_DATE_FORMAT = "%Y-%m-%d"

TRUTHY = ("true", "yes")

# Leading number, the way a base-10 parse reads "150 pts" as 150
_INT_PREFIX = re.compile(r"^[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
# Thousands separators and currency symbols are noise in exported sheets
_NUMERIC_NOISE = re.compile(r"[,$€£\s]")

def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False

def _numeric_text(value: Any) -> Optional[str]:
    if is_blank(value) or isinstance(value, bool):
        return None
    return _NUMERIC_NOISE.sub("", str(value))

def parse_int_or_default(value: Any, default: int = 0) -> int:
    """
    Base-10 integer parse. Returns `default` for empty, non-numeric or
    negative input, so the result is always a usable count.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value if value >= 0 else default
    if isinstance(value, float) and not pd.isna(value):
        if value < 0:
            return default
        try:
            return int(value)
        except (ValueError, OverflowError):
            return default

    text = _numeric_text(value)
    if text is None:
        return default

    match = _INT_PREFIX.match(text)
    if not match:
        return default
    try:
        number = int(match.group(0))
    except ValueError:
        # More digits than int() will convert
        return default
    return number if number >= 0 else default

def parse_float_or_default(value: Any, default: float = 0.0) -> float:
    """
    Floating-point counterpart of parse_int_or_default. NaN and infinities
    never come out of it.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            number = float(value)
        except OverflowError:
            return default
        if pd.isna(number) or number in (float("inf"), float("-inf")) or number < 0:
            return default
        return number

    text = _numeric_text(value)
    if text is None:
        return default

    match = _FLOAT_PREFIX.match(text)
    if not match:
        return default
    number = float(match.group(0))
    if number < 0 or number == float("inf"):
        return default
    return number

def parse_bool(value: Any) -> bool:
    """
    True only for boolean True or the strings "true"/"yes" (any case).
    Everything else, including a missing value, is False.
    """
    if isinstance(value, bool):
        return value
    if is_blank(value):
        return False
    return str(value).strip().lower() in TRUTHY

def parse_date(value: Any) -> Optional[date]:
    """
    Public helper to parse dates from various string formats.
    Returns None if parsing fails or value is empty.
    """
    if is_blank(value):
        return None

    # Check if already a date object
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    value_str = str(value).strip()

    for fmt in DATE_FORMATS + DATETIME_FORMATS:
        try:
            return datetime.strptime(value_str, fmt).date()
        except ValueError:
            continue

    # ISO timestamps with offsets, e.g. "2024-03-05T10:00:00.000Z"
    try:
        return datetime.fromisoformat(value_str.replace("Z", "+00:00")).date()
    except ValueError:
        return None

def display_date(value: Any) -> Union[str, Any]:
    """
    Formats a date-like value as yyyy-mm-dd.
    Values that are not dates are returned unchanged.
    """
    parsed = parse_date(value)
    if parsed is None:
        return "" if value is None else value
    return parsed.strftime(DISPLAY_DATE_FORMAT)
