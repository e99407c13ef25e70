from __future__ import annotations

from typing import Any, List, Mapping, Sequence

from .fields import PLACEHOLDER


def display_value(record: Mapping[str, Any], header: str) -> str:
    value = record.get(header)
    if value is None or value == "":
        return PLACEHOLDER
    return str(value)


def render_rows(records: Sequence[Mapping[str, Any]], headers: Sequence[str]) -> List[List[str]]:
    """Table cells in header order, with `-` for missing or empty values."""
    return [[display_value(record, h) for h in headers] for record in records]


def summary_text(count: int) -> str:
    return f"{count} record(s) loaded." if count > 0 else "No data loaded."
