from typing import Any, Dict, List, Optional

from insiders.models.customer import CustomerRecord, DynamicCustomer, new_temporary_id
from insiders.models.schema_def import CUSTOMER_SCHEMA
from insiders.services.field_reconciler import reconcile_row

class CustomerTable:
    """
    The admin console's in-memory customer snapshot.
    It is replaced wholesale after every mutating call; whichever response
    arrives last wins.
    """

    def __init__(self, records: Optional[List[CustomerRecord]] = None):
        self.records: List[CustomerRecord] = list(records or [])

    def __len__(self) -> int:
        return len(self.records)

    def replace(self, records: List[CustomerRecord]) -> None:
        self.records = list(records)

    @property
    def is_dynamic(self) -> bool:
        return bool(self.records) and isinstance(self.records[0], DynamicCustomer)

    def columns(self) -> List[str]:
        """
        Column set of the active schema: the first record's dynamic field
        names for schema-less backends, the canonical fields otherwise.
        """
        if self.is_dynamic:
            return ["id"] + list(self.records[0].dynamic_fields.keys())
        return CUSTOMER_SCHEMA.field_names()

    def rows(self) -> List[Dict[str, Any]]:
        """Flat rows keyed by columns(), ready for display or export."""
        out = []
        for record in self.records:
            if isinstance(record, DynamicCustomer):
                out.append({"id": record.id, **record.dynamic_fields})
            else:
                out.append(record.to_wire())
        return out

    def get(self, customer_id: Any) -> Optional[CustomerRecord]:
        key = str(customer_id)
        return next((r for r in self.records if str(r.id) == key), None)

    def remove(self, customer_id: Any) -> bool:
        key = str(customer_id)
        before = len(self.records)
        self.records = [r for r in self.records if str(r.id) != key]
        return len(self.records) != before

    def upsert(self, record: CustomerRecord) -> None:
        key = str(record.id)
        for i, existing in enumerate(self.records):
            if str(existing.id) == key:
                self.records[i] = record
                return
        self.records.append(record)

    def add_temporary(self, data: Dict[str, Any]) -> CustomerRecord:
        """Optimistic row shown until the backend confirms the add."""
        record = reconcile_row({**data, "id": new_temporary_id()}, len(self.records) + 1)
        self.records.append(record)
        return record

    def discard_temporary(self) -> None:
        self.records = [r for r in self.records if not r.is_temporary]
