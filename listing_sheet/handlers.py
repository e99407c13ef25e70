from __future__ import annotations

from typing import Any, List, Optional

import gradio as gr
import pandas as pd

from .config import load_settings
from .errors import ListingSheetError, NoRecordsFound
from .log import get_logger
from .schema import build_policy
from .spreadsheet import export_to_temp, read_records
from .store import RecordStore
from .table import render_rows, summary_text

logger = get_logger(__name__)

FORM_HEADERS = ["Field", "Value"]
ROW_NUMBER_COLUMN = "#"


def new_store(mode: Optional[str] = None) -> RecordStore:
    if mode is None:
        mode = load_settings().schema_mode
    return RecordStore(build_policy(mode))


def display_headers(headers: List[str]) -> List[str]:
    """Give each blank spacer column its own label of spaces so column names stay unique."""
    labels: List[str] = []
    spacers = 0
    for header in headers:
        if header:
            labels.append(header)
        else:
            spacers += 1
            labels.append(" " * spacers)
    return labels


def table_frame(store: RecordStore) -> pd.DataFrame:
    headers = store.headers
    rows = render_rows(store.records, headers)
    data = [[str(i)] + row for i, row in enumerate(rows, start=1)]
    return pd.DataFrame(data, columns=[ROW_NUMBER_COLUMN] + display_headers(headers))


def view(store: RecordStore):
    return store, table_frame(store), summary_text(len(store))


def blank_form(store: RecordStore) -> List[List[str]]:
    headers = [h for h in store.headers if h]
    if not headers:
        return [["", ""]]
    return [[h, ""] for h in headers]


def form_rows(form: Any) -> List[List[Any]]:
    if form is None:
        return []
    if isinstance(form, pd.DataFrame):
        return form.fillna("").values.tolist()
    return [list(row) for row in form]


def row_index(row_number: Any) -> int:
    """Turn the 1-based record number typed by the user into a list index."""
    if row_number is None or row_number == "":
        raise IndexError("Enter a record number.")
    try:
        number = float(row_number)
    except (TypeError, ValueError):
        raise IndexError(f"Invalid record number: {row_number!r}")
    if not number.is_integer():
        raise IndexError(f"Invalid record number: {row_number!r}")
    return int(number) - 1


def handle_parse(text: str, store: RecordStore):
    try:
        added = store.add_text(text)
    except NoRecordsFound as exc:
        logger.warning("Parse rejected: %s", exc)
        return (*view(store), "", f"Parsing failed: {exc}")
    except ListingSheetError as exc:
        logger.warning("Parse rejected: %s", exc)
        return (*view(store), text, str(exc))
    return (*view(store), "", f"Added {added} record(s).")


def handle_add_record(form: Any, store: RecordStore):
    try:
        store.add_record(form_rows(form))
    except ListingSheetError as exc:
        return (*view(store), blank_form(store), str(exc))
    return (*view(store), blank_form(store), "Record added.")


def handle_load_record(row_number: Any, store: RecordStore):
    try:
        record = store.get(row_index(row_number))
    except IndexError as exc:
        return blank_form(store), str(exc)

    headers = [h for h in store.headers if h]
    rows = [[h, record.get(h, "")] for h in headers]
    rows += [[k, v] for k, v in record.items() if k not in headers]
    return rows, f"Loaded record {int(float(row_number))}."


def handle_replace_record(row_number: Any, form: Any, store: RecordStore):
    try:
        index = row_index(row_number)
        store.replace_record(index, form_rows(form))
    except (ListingSheetError, IndexError) as exc:
        return (*view(store), str(exc))
    return (*view(store), f"Record {index + 1} updated.")


def handle_delete_record(row_number: Any, store: RecordStore):
    try:
        index = row_index(row_number)
        store.delete(index)
    except IndexError as exc:
        return (*view(store), str(exc))
    return (*view(store), f"Record {index + 1} deleted.")


def handle_clear(store: RecordStore):
    store.clear()
    return (*view(store), "All records cleared.")


def handle_import(file_obj, store: RecordStore):
    try:
        rows = read_records(file_obj)
    except ListingSheetError as exc:
        logger.warning("Import failed: %s", exc)
        return (*view(store), gr.update(value=None), str(exc))

    added = store.import_records(rows)
    return (*view(store), gr.update(value=None), f"Imported {added} record(s).")


def handle_export(store: RecordStore, file_name: Optional[str] = None):
    if len(store) == 0:
        return None, "No data loaded."

    settings = load_settings()
    try:
        path = export_to_temp(
            store.records,
            store.headers,
            file_name or settings.export_file_name,
            settings.sheet_name,
            store.policy.column_styles,
        )
    except ListingSheetError as exc:
        logger.warning("Export failed: %s", exc)
        return None, str(exc)

    return path, f"Export successful! Saved to {path}"
