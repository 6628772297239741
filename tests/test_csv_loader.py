import io
import pytest
import pandas as pd
from unittest.mock import patch

from insiders.services.csv_loader import (
    decode_file,
    load_fallback_rows,
    parse_csv_line,
    parse_csv_text,
    read_spreadsheet_rows,
)

# --- Tests for parse_csv_line ---

def test_parse_csv_line_simple():
    assert parse_csv_line("a,b,c") == ["a", "b", "c"]

def test_parse_csv_line_quoted_comma():
    """
    Goal: A comma inside quotes belongs to the value, so this is 2 fields, not 3.
    """
    assert parse_csv_line('"Smith, John",42') == ["Smith, John", "42"]

def test_parse_csv_line_escaped_quotes():
    """
    Goal: A doubled quote inside a quoted field is one literal quote.
    """
    fields = parse_csv_line('"She said ""hi""",1')
    assert fields == ['She said "hi"', "1"]

def test_parse_csv_line_empty_fields():
    # Trailing separator still yields the last (empty) field
    assert parse_csv_line("a,,") == ["a", "", ""]
    assert parse_csv_line("") == [""]

def test_parse_csv_line_unterminated_quote():
    """
    Goal: Malformed quoting never raises; the rest of the line is one field.
    """
    assert parse_csv_line('"open,still open') == ["open,still open"]

# --- Tests for parse_csv_text ---

def test_parse_csv_text_basic():
    text = "ID,Name,Phone,Points\n1,Jane Doe,555-1234,150\n"

    rows = parse_csv_text(text)

    # Keys are the lower-cased header
    assert rows == [{"id": "1", "name": "Jane Doe", "phone": "555-1234", "points": "150"}]

def test_parse_csv_text_crlf_and_blank_lines():
    text = "Name , Email\r\n\r\nAlice,a@x.com\r\n   \r\nBob,b@x.com\r\n"

    rows = parse_csv_text(text)

    assert [r["name"] for r in rows] == ["Alice", "Bob"]
    assert rows[0]["email"] == "a@x.com"

def test_parse_csv_text_header_only():
    """
    Goal: A header without data rows is an empty result, not an error.
    """
    assert parse_csv_text("ID,Name\n") == []
    assert parse_csv_text("") == []

def test_parse_csv_text_drops_empty_rows_keeps_order():
    text = "a,b\n1,2\n,\n , \n3,\n"

    rows = parse_csv_text(text)

    # ",", " , " have no data; "3," is kept
    assert rows == [{"a": "1", "b": "2"}, {"a": "3", "b": ""}]

def test_parse_csv_text_short_rows_padded():
    """
    Goal: Rows shorter than the header are kept, missing trailing fields become "".
    """
    rows = parse_csv_text("name,phone,points\nJane\n")

    assert rows == [{"name": "Jane", "phone": "", "points": ""}]

def test_parse_csv_text_long_rows_truncated():
    rows = parse_csv_text("name\nJane,extra\n")
    assert rows == [{"name": "Jane"}]

def test_parse_csv_text_quoted_values():
    text = 'name,note\n"Smith, John","She said ""hi"""\n'

    rows = parse_csv_text(text)

    assert rows == [{"name": "Smith, John", "note": 'She said "hi"'}]

# --- Tests for decode_file ---

def test_decode_file_strips_bom_and_replaces_bad_bytes():
    content = "\ufeffname\nJosé\n".encode("utf-8") + b"\xff"
    text = decode_file(content)

    assert text.startswith("name")
    assert "Jos\u00e9" in text
    assert "\ufffd" in text

# --- Tests for spreadsheets ---

def _workbook(df: pd.DataFrame) -> bytes:
    buffer = io.BytesIO()
    df.to_excel(buffer, index=False, engine="openpyxl")
    return buffer.getvalue()

def test_read_spreadsheet_rows():
    content = _workbook(pd.DataFrame({"Name": ["Jane Doe", ""], "Points": ["150", ""]}))

    rows = read_spreadsheet_rows(content)

    # The blank second row is dropped
    assert len(rows) == 1
    assert rows[0]["name"] == "Jane Doe"
    assert rows[0]["points"] == "150"

def test_read_spreadsheet_rows_unreadable():
    assert read_spreadsheet_rows(b"not a workbook") == []

# --- Tests for load_fallback_rows ---

def test_load_fallback_rows_dispatches_on_extension():
    with patch("insiders.services.csv_loader.read_spreadsheet_rows", return_value=[{"a": "1"}]) as mock_xlsx:
        assert load_fallback_rows("customers.XLSX", b"...") == [{"a": "1"}]
        mock_xlsx.assert_called_once_with(b"...")

    rows = load_fallback_rows("customers.csv", b"a,b\n1,2\n")
    assert rows == [{"a": "1", "b": "2"}]
