from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

def to_camel_case(header: str) -> str:
    """``"First  Name "`` -> ``"firstName"``. Whitespace-only headers give ``""``."""
    words = header.lower().split()
    if not words:
        return ""
    return words[0] + "".join(w[:1].upper() + w[1:] for w in words[1:])

def map_row_to_contact(row: Sequence[Any], headers: Sequence[Optional[str]]) -> Dict[str, Any]:
    """Build a contact dict keyed by camelCased headers, dropping empty headers and empty cells.

    Rows may be shorter than the header row. When two headers normalize to the
    same key the rightmost column wins.
    """
    contact: Dict[str, Any] = {}
    for i, header in enumerate(headers):
        if not header:
            continue
        key = to_camel_case(str(header))
        if not key:
            continue
        value = row[i] if i < len(row) else None
        if value is None or value == "":
            continue
        contact[key] = value
    return contact
