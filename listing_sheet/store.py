from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .errors import EmptyInput
from .log import get_logger
from .parser import normalize_key, parse_records
from .schema import DynamicPolicy, HeaderPolicy, as_text

logger = get_logger(__name__)


def pairs_to_record(pairs: Iterable[Sequence[Any]]) -> Dict[str, str]:
    """Build a record from (key, value) rows of the entry form; blank keys are skipped."""
    record: Dict[str, str] = {}
    for row in pairs:
        if row is None or len(row) < 2:
            continue
        key = normalize_key(as_text(row[0]))
        if key:
            record[key] = as_text(row[1]).strip()
    return record


class RecordStore:
    """Ordered, in-memory list of records for one session.

    Mutations build a new list and swap it in, so a failed operation leaves
    the previous records untouched.
    """

    def __init__(self, policy: Optional[HeaderPolicy] = None, records: Iterable[Mapping[str, Any]] = ()):
        self.policy = policy or DynamicPolicy()
        self._records: List[Dict[str, str]] = [dict(r) for r in records]

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> Tuple[Dict[str, str], ...]:
        return tuple(dict(r) for r in self._records)

    @property
    def headers(self) -> List[str]:
        return self.policy.headers(self._records)

    def get(self, index: int) -> Dict[str, str]:
        return dict(self._records[self._check_index(index)])

    def add_text(self, text: Optional[str]) -> int:
        """Parse pasted text and append its records. Returns the number added."""
        new_records = [self.policy.conform(raw) for raw in parse_records(text)]
        self._records = self._records + new_records
        logger.info("Added %d parsed record(s); %d total", len(new_records), len(self._records))
        return len(new_records)

    def add_record(self, pairs: Iterable[Sequence[Any]]) -> Dict[str, str]:
        record = self._record_from_form(pairs)
        self._records = self._records + [record]
        logger.info("Added record manually; %d total", len(self._records))
        return dict(record)

    def replace_record(self, index: int, pairs: Iterable[Sequence[Any]]) -> Dict[str, str]:
        index = self._check_index(index)
        record = self._record_from_form(pairs)
        self._records = self._records[:index] + [record] + self._records[index + 1:]
        logger.info("Replaced record %d", index)
        return dict(record)

    def import_records(self, rows: Iterable[Mapping[str, Any]]) -> int:
        # Imported headers become keys as-is; the synonym table is not applied.
        new_records = [{str(k): as_text(v) for k, v in row.items()} for row in rows]
        self._records = self._records + new_records
        logger.info("Imported %d record(s); %d total", len(new_records), len(self._records))
        return len(new_records)

    def delete(self, index: int) -> None:
        index = self._check_index(index)
        self._records = self._records[:index] + self._records[index + 1:]
        logger.info("Deleted record %d; %d left", index, len(self._records))

    def clear(self) -> None:
        self._records = []
        logger.info("Cleared all records")

    def _record_from_form(self, pairs) -> Dict[str, str]:
        raw = pairs_to_record(pairs)
        if not raw:
            raise EmptyInput("Enter at least one field name.")
        return self.policy.conform(raw)

    def _check_index(self, index: int) -> int:
        if not isinstance(index, int) or isinstance(index, bool):
            raise IndexError(f"Record index must be an integer, got {index!r}")
        if index < 0 or index >= len(self._records):
            raise IndexError(f"No record at index {index} ({len(self._records)} loaded)")
        return index
