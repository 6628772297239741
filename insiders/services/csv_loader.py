import io
import logging
import os
from typing import Dict, List
import pandas as pd

logger = logging.getLogger(__name__)

SPREADSHEET_EXTENSIONS = (".xlsx", ".xls")

Row = Dict[str, str]

def decode_file(content: bytes, encoding: str = "utf-8") -> str:
    """
    Decodes an uploaded file. A leading BOM is dropped and undecodable
    bytes are replaced instead of failing the import.
    """
    text = content.decode(encoding, errors="replace")
    return text.lstrip("\ufeff")

def parse_csv_line(line: str) -> List[str]:
    """
    Splits one CSV line into fields.
    Commas inside double quotes are kept, and a doubled quote inside a quoted
    field stands for one literal quote.
    Example: a line holding the quoted field "Smith, John" followed by 42
    gives ['Smith, John', '42'].
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0

    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current))
    return fields

def parse_csv_text(text: str) -> List[Row]:
    """
    Parses raw CSV text into row dictionaries keyed by the lower-cased header.
    Uneven rows are padded with "" and blank rows are skipped. Never raises.
    """
    lines = [line.strip() for line in text.replace("\r\n", "\n").split("\n")]
    lines = [line for line in lines if line]

    # A header alone has no data
    if len(lines) < 2:
        return []

    headers = [h.strip().lower() for h in parse_csv_line(lines[0])]

    rows_out: List[Row] = []
    for line in lines[1:]:
        values = [v.strip() for v in parse_csv_line(line)]

        if not any(values):
            continue

        # Shorter rows get empty strings for the missing trailing fields
        padded = values + [""] * (len(headers) - len(values))
        rows_out.append({h: val for h, val in zip(headers, padded)})

    return rows_out

def read_spreadsheet_rows(content: bytes) -> List[Row]:
    """
    Reads the first sheet of an Excel workbook into the same row shape
    parse_csv_text produces. An unreadable workbook yields no rows.
    """
    try:
        df = pd.read_excel(io.BytesIO(content), dtype=str, keep_default_na=False)
    except Exception as e:
        logger.warning("Could not read spreadsheet: %s", e)
        return []

    df.columns = [str(c).strip().lower() for c in df.columns]

    rows_out: List[Row] = []
    for record in df.to_dict(orient="records"):
        clean_row = {k: ("" if v is None else str(v).strip()) for k, v in record.items()}
        if any(clean_row.values()):
            rows_out.append(clean_row)

    return rows_out

def load_fallback_rows(filename: str, content: bytes) -> List[Row]:
    """
    Client-side parse of the original upload, used when the backend response
    carries no rows.
    """
    _, ext = os.path.splitext(filename or "")
    if ext.lower() in SPREADSHEET_EXTENSIONS:
        rows = read_spreadsheet_rows(content)
    else:
        rows = parse_csv_text(decode_file(content))

    logger.info("Fallback parser read %d rows from %s", len(rows), filename)
    return rows
