"""Header policies: which columns a deployment shows and exports, and in what order.

`DynamicPolicy` accumulates every key seen across the records and pins the
identifier to the front. `FixedPolicy` uses a predefined column list and maps
raw keys onto it through a synonym table. A deployment picks one through
`build_policy`.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .fields import (
    FIXED_COLUMN_STYLES,
    FIXED_HEADERS,
    KEY_SYNONYMS,
    PINNED_FIELDS,
    ColumnStyle,
)
from .parser import normalize_key


def _lookup_key(key: str) -> str:
    return normalize_key(key).replace(" ", "").casefold()


def as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def reconcile_dynamic(records: Iterable[Mapping[str, Any]], pinned: Sequence[str] = PINNED_FIELDS) -> List[str]:
    """Union of record keys in first-seen order, pinned fields moved to the front."""
    seen: Dict[str, None] = {}
    for record in records:
        for key in record:
            seen.setdefault(key, None)

    front = [p for p in pinned if p in seen]
    return front + [k for k in seen if k not in front]


def reconcile_fixed(headers: Sequence[str] = FIXED_HEADERS) -> List[str]:
    return list(headers)


def map_keys(
    raw: Mapping[str, Any],
    headers: Sequence[str] = FIXED_HEADERS,
    synonyms: Mapping[str, str] = KEY_SYNONYMS,
) -> Dict[str, str]:
    """Map raw keys onto the fixed headers.

    Every named header is present in the result. Unmapped keys and keys whose
    canonical name is not a header are dropped.
    """
    lookup = {_lookup_key(k): v for k, v in synonyms.items()}
    columns = [h for h in headers if h]
    record: Dict[str, str] = {h: "" for h in columns}

    for key, value in raw.items():
        canonical = lookup.get(_lookup_key(key))
        if canonical is None or canonical not in record:
            continue
        text = as_text(value)
        # Two synonyms for one column: a blank value never overwrites a filled one.
        if text or not record[canonical]:
            record[canonical] = text

    return record


class HeaderPolicy:
    name = ""

    def headers(self, records: Sequence[Mapping[str, Any]]) -> List[str]:
        raise NotImplementedError

    def conform(self, raw: Mapping[str, Any]) -> Dict[str, str]:
        raise NotImplementedError

    @property
    def column_styles(self) -> Optional[List[ColumnStyle]]:
        return None


class DynamicPolicy(HeaderPolicy):
    name = "dynamic"

    def __init__(self, pinned: Sequence[str] = PINNED_FIELDS):
        self.pinned = tuple(pinned)

    def headers(self, records):
        return reconcile_dynamic(records, self.pinned)

    def conform(self, raw):
        return {key: as_text(value) for key, value in raw.items() if key and str(key).strip()}


class FixedPolicy(HeaderPolicy):
    name = "fixed"

    def __init__(
        self,
        headers: Sequence[str] = FIXED_HEADERS,
        synonyms: Mapping[str, str] = KEY_SYNONYMS,
        styles: Optional[Sequence[ColumnStyle]] = FIXED_COLUMN_STYLES,
    ):
        named = [h for h in headers if h]
        if len(named) != len(set(named)):
            raise ValueError("Fixed headers must be distinct apart from blank spacer columns.")
        if styles is not None and len(styles) != len(headers):
            raise ValueError("Expected one column style per fixed header.")
        self._headers = tuple(headers)
        self.synonyms = dict(synonyms)
        self._styles = tuple(styles) if styles is not None else None

    def headers(self, records=()):
        return reconcile_fixed(self._headers)

    def conform(self, raw):
        return map_keys(raw, self._headers, self.synonyms)

    @property
    def column_styles(self):
        return list(self._styles) if self._styles is not None else None


def build_policy(mode: str) -> HeaderPolicy:
    if mode == DynamicPolicy.name:
        return DynamicPolicy()
    if mode == FixedPolicy.name:
        return FixedPolicy()
    raise ValueError(f"Unknown schema mode: {mode!r}")
