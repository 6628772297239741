import pytest
from datetime import date

from insiders.services.validator import (
    display_date,
    is_blank,
    parse_bool,
    parse_date,
    parse_float_or_default,
    parse_int_or_default,
)

# --- Integer Parsing ---

@pytest.mark.parametrize("value, expected", [
    ("150", 150),
    (150, 150),
    (" 42 ", 42),
    ("150 pts", 150),   # leading digits are read like a base-10 parse
    ("1,200", 1200),    # thousands separator from spreadsheets
    (12.9, 12),
])
def test_parse_int_or_default_valid(value, expected):
    assert parse_int_or_default(value) == expected

@pytest.mark.parametrize(
    "value", ["N/A", "", "abc", None, "-5", -3, True, float("nan"), float("inf"), "9" * 5000]
)
def test_parse_int_or_default_falls_back(value):
    """
    Goal: Unparsable or negative input never leaks into a record; it becomes the default.
    """
    assert parse_int_or_default(value) == 0
    assert parse_int_or_default(value, 7) == 7

# --- Float Parsing ---

@pytest.mark.parametrize("value, expected", [
    ("12.50", 12.5),
    ("$1,234.5", 1234.5),
    (3, 3.0),
    (".5", 0.5),
])
def test_parse_float_or_default_valid(value, expected):
    assert parse_float_or_default(value) == expected

@pytest.mark.parametrize(
    "value", ["N/A", "", "abc", None, "-1.5", float("nan"), float("inf"), "1e400", 10 ** 400]
)
def test_parse_float_or_default_falls_back(value):
    result = parse_float_or_default(value)
    assert result == 0.0
    assert isinstance(result, float)

# --- Boolean Parsing ---

@pytest.mark.parametrize("value", ["true", "TRUE", "yes", "Yes ", True])
def test_parse_bool_truthy(value):
    assert parse_bool(value) is True

@pytest.mark.parametrize("value", ["false", "no", "", None, False, "1", "maybe"])
def test_parse_bool_falsy(value):
    """
    Goal: Only "true"/"yes" count. Everything else, including missing values, is False.
    """
    assert parse_bool(value) is False

# --- Dates ---

def test_parse_date_formats():
    assert parse_date("2024-03-05") == date(2024, 3, 5)
    assert parse_date("2024-03-05T10:00:00") == date(2024, 3, 5)
    assert parse_date("2024-03-05T10:00:00.000Z") == date(2024, 3, 5)
    assert parse_date("2024-03-05T10:00:00+02:00") == date(2024, 3, 5)
    assert parse_date(date(2024, 3, 5)) == date(2024, 3, 5)

def test_parse_date_invalid():
    assert parse_date("") is None
    assert parse_date(None) is None
    assert parse_date("not a date") is None

def test_display_date():
    """
    Goal: Dates are displayed as yyyy-mm-dd; anything else is left alone.
    """
    assert display_date("2024-03-05T10:00:00.000Z") == "2024-03-05"
    assert display_date("2024-03-05") == "2024-03-05"
    assert display_date("soon") == "soon"
    assert display_date("") == ""
    assert display_date(None) == ""

def test_is_blank():
    assert is_blank(None)
    assert is_blank("   ")
    assert is_blank(float("nan"))
    assert not is_blank(0)
    assert not is_blank("x")
    assert not is_blank({"a": 1})
