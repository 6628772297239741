import pytest

from insiders.models.customer import DynamicCustomer, FixedCustomer
from insiders.models.schema_def import CUSTOMER_SCHEMA
from insiders.services.customer_table import CustomerTable

@pytest.fixture
def fixed_table():
    return CustomerTable([
        FixedCustomer(id=1, name="Ann"),
        FixedCustomer(id=2, name="Bob"),
    ])

def test_columns_fixed(fixed_table):
    assert fixed_table.columns() == CUSTOMER_SCHEMA.field_names()
    assert fixed_table.is_dynamic is False

def test_columns_dynamic():
    """
    Goal: Schema-less backends drive the column set from the first record.
    """
    table = CustomerTable([
        DynamicCustomer(id=1, dynamic_fields={"Member": "Ann", "Tier": "Gold"}),
    ])

    assert table.is_dynamic
    assert table.columns() == ["id", "Member", "Tier"]
    assert table.rows() == [{"id": 1, "Member": "Ann", "Tier": "Gold"}]

def test_get_remove_by_string_or_int_id(fixed_table):
    assert fixed_table.get("2").name == "Bob"
    assert fixed_table.remove("1") is True
    assert fixed_table.remove(99) is False
    assert len(fixed_table) == 1

def test_replace_is_wholesale(fixed_table):
    fixed_table.replace([FixedCustomer(id=9, name="Zed")])
    assert [r.id for r in fixed_table.records] == [9]

def test_upsert(fixed_table):
    fixed_table.upsert(FixedCustomer(id=2, name="Bobby"))
    fixed_table.upsert(FixedCustomer(id=3, name="Cy"))

    assert [r.name for r in fixed_table.records] == ["Ann", "Bobby", "Cy"]

def test_temporary_records(fixed_table):
    """
    Goal: An optimistic add gets a temporary id and can be discarded again.
    """
    record = fixed_table.add_temporary({"name": "Pending", "id": "ignored", "points": "5"})

    assert record.is_temporary
    assert record.earned_points == 5
    assert len(fixed_table) == 3

    fixed_table.discard_temporary()

    assert len(fixed_table) == 2
    assert not any(r.is_temporary for r in fixed_table.records)
