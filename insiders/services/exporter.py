import io
import logging
import os
from typing import Optional

import pandas as pd

from insiders.core.config import settings
from insiders.models.schema_def import CUSTOMER_SCHEMA
from insiders.services.customer_table import CustomerTable
from insiders.services.validator import display_date

logger = logging.getLogger(__name__)

CSV_FILENAME = "customers.csv"
XLSX_FILENAME = "customers.xlsx"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

def to_dataframe(table: CustomerTable) -> pd.DataFrame:
    """Snapshot of the table with the active schema's columns, dates as yyyy-mm-dd."""
    df = pd.DataFrame(table.rows(), columns=table.columns())

    if not table.is_dynamic:
        for col in CUSTOMER_SCHEMA.date_field_names():
            df[col] = df[col].map(display_date)

    return df

def export_csv(table: CustomerTable) -> bytes:
    return to_dataframe(table).to_csv(index=False).encode("utf-8")

def export_xlsx(table: CustomerTable) -> bytes:
    buffer = io.BytesIO()
    to_dataframe(table).to_excel(buffer, index=False, sheet_name="Customers", engine="openpyxl")
    return buffer.getvalue()

def write_export(data: bytes, filename: str, directory: Optional[str] = None) -> str:
    """Writes an export into EXPORT_DIR and returns its path."""
    directory = directory or settings.EXPORT_DIR
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, filename)
    with open(path, "wb") as out_file:
        out_file.write(data)
    logger.info("Wrote %d bytes to %s", len(data), path)
    return path
