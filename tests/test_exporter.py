import io
import os
import pandas as pd
import pytest

from insiders.models.customer import DynamicCustomer, FixedCustomer
from insiders.services.customer_table import CustomerTable
from insiders.services.exporter import export_csv, export_xlsx, to_dataframe, write_export

@pytest.fixture
def table():
    return CustomerTable([
        FixedCustomer(id=1, name="Jane Doe", earned_points=150, sign_up_date="2024-03-05T10:00:00.000Z"),
        FixedCustomer(id=2, name="Smith, John", is_employee=True),
    ])

def test_to_dataframe_columns_and_dates(table):
    df = to_dataframe(table)

    assert list(df.columns)[:3] == ["id", "displayId", "name"]
    assert df.loc[0, "signUpDate"] == "2024-03-05"
    assert df.loc[1, "signUpDate"] == ""

def test_export_csv(table):
    """
    Goal: The CSV export round-trips through a standard reader, quoting included.
    """
    data = export_csv(table)

    df = pd.read_csv(io.BytesIO(data), keep_default_na=False)
    assert list(df["name"]) == ["Jane Doe", "Smith, John"]
    assert list(df["earnedPoints"]) == [150, 0]

def test_export_xlsx(table):
    data = export_xlsx(table)

    df = pd.read_excel(io.BytesIO(data), engine="openpyxl")
    assert len(df) == 2
    assert "isEmployee" in df.columns

def test_export_dynamic_table():
    table = CustomerTable([DynamicCustomer(id=1, dynamic_fields={"Member": "Ann", "Joined": "2024-01-01"})])

    df = pd.read_csv(io.BytesIO(export_csv(table)))

    assert list(df.columns) == ["id", "Member", "Joined"]

def test_export_empty_table_has_header_only():
    df = pd.read_csv(io.BytesIO(export_csv(CustomerTable())))
    assert len(df) == 0
    assert "email" in df.columns

def test_write_export(tmp_path):
    path = write_export(b"a,b\n", "customers.csv", directory=str(tmp_path))

    assert path == os.path.join(str(tmp_path), "customers.csv")
    with open(path, "rb") as f:
        assert f.read() == b"a,b\n"
