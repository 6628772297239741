import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from insiders.models.customer import CustomerRecord, DynamicCustomer, FixedCustomer
from insiders.models.schema_def import CUSTOMER_SCHEMA, CanonicalField, CustomerSchema
from insiders.services import validator

logger = logging.getLogger(__name__)

DYNAMIC_FIELDS_KEY = "dynamicFields"
FIRST_NAME_KEYS = ("firstname", "fname", "givenname")
LAST_NAME_KEYS = ("lastname", "lname", "surname", "familyname")

def normalize_key(key: Any) -> str:
    """
    Collapses a column name for lookup.
    Example: "Phone No", "phone_no", "PhoneNo" -> "phoneno"
    """
    return re.sub(r"[\s_\-]+", "", str(key).lower())

def _normalized_lookup(raw_row: Mapping[str, Any]) -> Dict[str, Any]:
    lookup: Dict[str, Any] = {}
    for key, value in raw_row.items():
        # The first column wins when two headers collapse to the same key
        lookup.setdefault(normalize_key(key), value)
    return lookup

def _find_value(
    raw_row: Mapping[str, Any],
    lookup: Dict[str, Any],
    field: CanonicalField,
) -> Optional[Any]:
    # Exact key first, then the field's own name and synonyms normalized
    value = raw_row.get(field.name)
    if not validator.is_blank(value):
        return value

    for candidate in [field.name] + field.synonyms:
        value = lookup.get(normalize_key(candidate))
        if not validator.is_blank(value):
            return value
    return None

def _first_present(lookup: Dict[str, Any], keys) -> str:
    for key in keys:
        value = lookup.get(key)
        if not validator.is_blank(value):
            return str(value).strip()
    return ""

def _as_text(value: Any) -> str:
    if validator.is_blank(value):
        return ""
    return value if isinstance(value, str) else str(value)

def _coerce(field: CanonicalField, value: Any) -> Any:
    if field.type == "integer":
        return validator.parse_int_or_default(value, 0)
    if field.type == "float":
        return validator.parse_float_or_default(value, 0.0)
    if field.type == "boolean":
        return validator.parse_bool(value)
    return _as_text(value)

def _reconcile_dynamic(dynamic: Mapping[str, Any], identifier: Any) -> DynamicCustomer:
    fields = {str(k): _as_text(v) for k, v in dynamic.items()}
    return DynamicCustomer(id=identifier, dynamic_fields=fields)

def _resolve_id(raw_row: Mapping[str, Any], lookup: Dict[str, Any], schema: CustomerSchema, index: int) -> Any:
    id_field = schema.field_by_name("id")
    value = _find_value(raw_row, lookup, id_field) if id_field else raw_row.get("id")
    if validator.is_blank(value):
        return index
    if isinstance(value, (int, str)) and not isinstance(value, bool):
        return value
    return str(value)

def reconcile_row(
    raw_row: Mapping[str, Any],
    index: int,
    schema: CustomerSchema = CUSTOMER_SCHEMA,
) -> CustomerRecord:
    """
    Maps one raw row (CSV fallback row or backend record) onto the canonical
    customer shape. Unknown columns are ignored and bad values default, so this
    never raises on content. `index` is the row's position in the batch and
    becomes the id when the row has none.

    Running it on a record's own `to_wire()` output returns the same record.
    """
    lookup = _normalized_lookup(raw_row)
    identifier = _resolve_id(raw_row, lookup, schema, index)

    dynamic = raw_row.get(DYNAMIC_FIELDS_KEY)
    if dynamic is None:
        dynamic = lookup.get(normalize_key(DYNAMIC_FIELDS_KEY))
    if isinstance(dynamic, Mapping):
        return _reconcile_dynamic(dynamic, identifier)

    values: Dict[str, Any] = {}
    for field in schema.fields:
        if field.name == "id":
            continue
        values[field.attr] = _coerce(field, _find_value(raw_row, lookup, field))

    if not values.get("name"):
        full_name = " ".join(
            part for part in (_first_present(lookup, FIRST_NAME_KEYS), _first_present(lookup, LAST_NAME_KEYS)) if part
        )
        values["name"] = full_name

    return FixedCustomer(id=identifier, **values)

def reconcile_rows(
    rows: List[Mapping[str, Any]],
    schema: CustomerSchema = CUSTOMER_SCHEMA,
) -> List[CustomerRecord]:
    """Order-preserving; placeholder ids are 1-based row positions."""
    rows = [row for row in rows if isinstance(row, Mapping)]
    records = [reconcile_row(row, index, schema) for index, row in enumerate(rows, start=1)]
    logger.debug("Reconciled %d rows", len(records))
    return records
