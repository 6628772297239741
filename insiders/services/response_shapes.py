"""
Row extraction from upload responses.

The upload endpoint has answered with a different envelope in every backend
revision. Each extractor below recognises one envelope and returns its rows,
or None. `extract_rows` tries them in order and the first non-empty answer
wins.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

Rows = List[Dict[str, Any]]
Extractor = Callable[[Any], Optional[Rows]]

# Keys that make a dict look like a customer record
RECORD_HINT_KEYS = ("id", "email", "name")

def _non_empty_list(value: Any) -> Optional[Rows]:
    # Only lists of records count as rows
    if isinstance(value, list) and value and all(isinstance(row, Mapping) for row in value):
        return value
    return None

def _from_key(key: str) -> Extractor:
    def extract(response: Any) -> Optional[Rows]:
        if not isinstance(response, dict):
            return None
        return _non_empty_list(response.get(key))

    extract.__name__ = f"from_{key}"
    return extract

def from_bare_array(response: Any) -> Optional[Rows]:
    return _non_empty_list(response)

def scan_record_like(response: Any) -> Optional[Rows]:
    """First top-level list whose first element has an id, email or name."""
    if not isinstance(response, dict):
        return None
    for value in response.values():
        rows = _non_empty_list(value)
        if rows and isinstance(rows[0], dict) and any(k in rows[0] for k in RECORD_HINT_KEYS):
            return rows
    return None

EXTRACTORS: List[Extractor] = [
    _from_key("data"),
    from_bare_array,
    _from_key("customers"),
    _from_key("result"),
    _from_key("rows"),
    _from_key("body"),
    scan_record_like,
]

def extract_rows(response: Any, extractors: Optional[List[Extractor]] = None) -> Optional[Rows]:
    for extractor in extractors or EXTRACTORS:
        rows = extractor(response)
        if rows:
            logger.debug("Upload response matched %s (%d rows)", extractor.__name__, len(rows))
            return rows

    logger.debug("No rows found in upload response of type %s", type(response).__name__)
    return None
