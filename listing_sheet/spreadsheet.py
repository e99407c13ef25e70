from __future__ import annotations

import io
import os
import tempfile
from datetime import date, datetime, time
from typing import Any, Dict, List, Mapping, Optional, Sequence

import xlrd
from openpyxl import Workbook, load_workbook
from openpyxl.cell.read_only import EmptyCell
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from xlrd.biffh import error_text_from_code

from .errors import ExportFailure, FileReadFailure, ImportDecodeFailure
from .fields import HEADER_FONT_SIZE, HEADER_ROW_HEIGHT, ColumnStyle
from .log import get_logger

logger = get_logger(__name__)

# Legacy .xls files are OLE2 compound documents.
OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

# Marks a cell that does not exist in the file, as opposed to an empty one.
MISSING = object()


def read_file_bytes(file_obj) -> bytes:
    """Read raw bytes from an uploaded file, a file-like object or a path."""
    if file_obj is None:
        raise FileReadFailure("No file uploaded.")

    try:
        if hasattr(file_obj, 'read'):
            if hasattr(file_obj, 'seek'):
                file_obj.seek(0)
            content = file_obj.read()
            if isinstance(content, str):
                raise FileReadFailure("Expected a binary file.")
            return content

        path = file_obj.name if hasattr(file_obj, 'name') else file_obj
        with open(path, 'rb') as f:
            return f.read()
    except OSError as exc:
        raise FileReadFailure("Failed to read the file.") from exc


def cell_text(value: Any) -> str:
    if value is None or value is MISSING:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def header_keys(header_row: Sequence[Any]) -> List[Optional[str]]:
    """Column keys from the first row; blank cells give None, repeats get a `_n` suffix."""
    keys: List[Optional[str]] = []
    counts: Dict[str, int] = {}
    for cell in header_row:
        name = cell_text(cell).strip()
        if not name:
            keys.append(None)
            continue
        n = counts.get(name, 0)
        counts[name] = n + 1
        keys.append(name if n == 0 else f"{name}_{n}")
    return keys


def xlsx_rows(data: bytes) -> List[List[Any]]:
    """Cell values of the first sheet; cells absent from the file come back as MISSING."""
    wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0]
        return [
            [MISSING if isinstance(cell, EmptyCell) else cell.value for cell in row]
            for row in ws.iter_rows()
        ]
    finally:
        wb.close()


def xls_value(cell, datemode: int) -> Any:
    if cell.ctype == xlrd.XL_CELL_EMPTY:
        return MISSING
    if cell.ctype == xlrd.XL_CELL_BLANK:
        return None
    if cell.ctype == xlrd.XL_CELL_DATE:
        return xlrd.xldate_as_datetime(cell.value, datemode)
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if cell.ctype == xlrd.XL_CELL_ERROR:
        return error_text_from_code.get(cell.value, "")
    return cell.value


def xls_rows(data: bytes) -> List[List[Any]]:
    book = xlrd.open_workbook(file_contents=data)
    try:
        sheet = book.sheet_by_index(0)
        return [[xls_value(c, book.datemode) for c in sheet.row(r)] for r in range(sheet.nrows)]
    finally:
        book.release_resources()


def rows_to_records(rows: Sequence[Sequence[Any]]) -> List[Dict[str, str]]:
    """First row gives the keys; every later row with a cell under a key becomes a record."""
    if not rows:
        return []
    keys = header_keys(rows[0])

    records: List[Dict[str, str]] = []
    for row in rows[1:]:
        record: Dict[str, str] = {}
        for key, value in zip(keys, row):
            if key is not None and value is not MISSING:
                record[key] = cell_text(value)
        if record:
            records.append(record)
    return records


def read_records(file_obj) -> List[Dict[str, str]]:
    """Decode the first sheet of an .xlsx or .xls file into one record per data row."""
    data = read_file_bytes(file_obj)

    try:
        rows = xls_rows(data) if data.startswith(OLE2_SIGNATURE) else xlsx_rows(data)
        records = rows_to_records(rows)
    except Exception as exc:
        raise ImportDecodeFailure("Failed to parse the Excel file. Please ensure it is a valid format.") from exc

    logger.info("Decoded %d row(s) from workbook", len(records))
    return records


def write_text(ws, row: int, column: int, value: Any) -> None:
    cell = ws.cell(row=row, column=column, value=cell_text(value))
    # Stored as text, so values starting with "=" never become formulas.
    cell.data_type = "s"


def style_header_row(ws, styles: Sequence[ColumnStyle]) -> None:
    for idx, style in enumerate(styles, start=1):
        cell = ws.cell(row=1, column=idx)
        cell.font = Font(bold=True, size=HEADER_FONT_SIZE, color=style.font_color)
        cell.fill = PatternFill(fill_type="solid", start_color=style.fill_color, end_color=style.fill_color)
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        ws.column_dimensions[get_column_letter(idx)].width = style.width
    ws.row_dimensions[1].height = HEADER_ROW_HEIGHT


def build_workbook(
    records: Sequence[Mapping[str, Any]],
    headers: Sequence[str],
    sheet_name: str = "Parsed Data",
    styles: Optional[Sequence[ColumnStyle]] = None,
) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name
    for col, header in enumerate(headers, start=1):
        if header:
            write_text(ws, 1, col, header)
    for row, record in enumerate(records, start=2):
        for col, header in enumerate(headers, start=1):
            # Keys the record lacks stay absent; empty values are written as
            # empty text cells, never as the table placeholder.
            if header and header in record:
                write_text(ws, row, col, record[header])
    if styles:
        style_header_row(ws, styles)
    return wb


def export_records(
    records: Sequence[Mapping[str, Any]],
    headers: Sequence[str],
    path: str,
    sheet_name: str = "Parsed Data",
    styles: Optional[Sequence[ColumnStyle]] = None,
) -> str:
    if not records:
        raise ExportFailure("No data to export.")

    try:
        build_workbook(records, headers, sheet_name, styles).save(path)
    except Exception as exc:
        raise ExportFailure("Failed to export data to Excel.") from exc

    logger.info("Exported %d record(s) to %s", len(records), path)
    return path


def export_to_temp(
    records: Sequence[Mapping[str, Any]],
    headers: Sequence[str],
    file_name: Optional[str] = None,
    sheet_name: str = "Parsed Data",
    styles: Optional[Sequence[ColumnStyle]] = None,
) -> str:
    if not file_name or not file_name.strip():
        file_name = "parsed_data_export"
    file_name = os.path.basename(file_name.strip())
    if not file_name.lower().endswith(".xlsx"):
        file_name += ".xlsx"

    path = os.path.join(tempfile.gettempdir(), file_name)
    return export_records(records, headers, path, sheet_name, styles)
