from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from .errors import EmptyInput, NoRecordsFound
from .fields import IDENTIFIER_FIELD
from .log import get_logger

logger = get_logger(__name__)

COLONS = ":："
RE_RECORD_START = re.compile(rf"^(?={re.escape(IDENTIFIER_FIELD)}[{COLONS}])", re.MULTILINE)
RE_SEPARATOR = re.compile(f"[{COLONS}]")
RE_WHITESPACE = re.compile(r"\s+")
BOM = "\ufeff"

NO_RECORDS_MESSAGE = f"No valid records found. Each record must start with '{IDENTIFIER_FIELD}：'."


def normalize_key(key: str) -> str:
    """Trim a key and collapse inner whitespace runs (ideographic space included)."""
    return RE_WHITESPACE.sub(" ", key.strip())


def split_line(line: str) -> Optional[Tuple[str, str]]:
    """Split one line at its first colon.

    Returns None for lines without a colon or with a blank key.
    """
    parts = RE_SEPARATOR.split(line, maxsplit=1)
    if len(parts) != 2:
        return None
    key = normalize_key(parts[0])
    if not key:
        return None
    return key, parts[1].strip()


def split_chunks(text: str) -> List[str]:
    """Cut text into one chunk per record, each starting at a marker line."""
    pieces = RE_RECORD_START.split(text.strip().lstrip(BOM).strip())
    chunks = [p.strip() for p in pieces if p.strip()]
    if not chunks:
        raise NoRecordsFound(NO_RECORDS_MESSAGE)
    if not RE_RECORD_START.match(chunks[0]):
        # Text before the first marker, or no marker at all.
        raise NoRecordsFound(NO_RECORDS_MESSAGE)
    return chunks


def parse_chunk(chunk: str) -> Dict[str, str]:
    record: Dict[str, str] = {}
    spelling: Dict[str, str] = {}

    for line in chunk.splitlines():
        pair = split_line(line)
        if pair is None:
            continue
        key, value = pair
        # Same key in another letter case: keep the first spelling.
        key = spelling.setdefault(key.casefold(), key)
        record[key] = value

    return record


def parse_records(text: Optional[str]) -> List[Dict[str, str]]:
    """Parse pasted text into one raw record per `编号：` block.

    Raises EmptyInput for blank text and NoRecordsFound when the text does
    not start with a record marker.
    """
    if text is None or not text.strip().lstrip(BOM).strip():
        raise EmptyInput("Input text cannot be empty.")

    chunks = split_chunks(text)
    logger.debug("Split input into %d chunk(s)", len(chunks))
    return [parse_chunk(chunk) for chunk in chunks]
