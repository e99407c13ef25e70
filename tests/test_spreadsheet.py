"""Tests for .xlsx/.xls import and .xlsx export."""

import io
from datetime import date

import pytest
import xlrd
from openpyxl import Workbook, load_workbook
from xlrd.sheet import Cell

from listing_sheet.errors import ExportFailure, FileReadFailure, ImportDecodeFailure
from listing_sheet.fields import FIXED_COLUMN_STYLES, FIXED_HEADERS, HEADER_ROW_HEIGHT
from listing_sheet.schema import FixedPolicy
from listing_sheet.spreadsheet import (
    OLE2_SIGNATURE,
    cell_text,
    export_records,
    export_to_temp,
    header_keys,
    read_records,
    rows_to_records,
)
from listing_sheet.store import RecordStore


def _write_workbook(path, rows):
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    wb.save(path)
    return path


def test_export_layout(tmp_path):
    path = export_records(
        [{"编号": "1", "段位": "黑鹰"}, {"编号": "2", "体力": "5"}],
        ["编号", "段位", "体力"],
        str(tmp_path / "out.xlsx"),
        sheet_name="Parsed Data",
    )
    wb = load_workbook(path)
    assert wb.sheetnames == ["Parsed Data"]
    rows = list(wb.active.iter_rows(values_only=True))
    assert rows[0] == ("编号", "段位", "体力")
    assert rows[1] == ("1", "黑鹰", None)
    assert rows[2] == ("2", None, "5")


def test_export_never_writes_placeholder(tmp_path):
    path = export_records([{"a": "", "b": "x"}], ["a", "b"], str(tmp_path / "out.xlsx"))
    values = [c.value for c in load_workbook(path).active[2]]
    assert values == [None, "x"]
    assert "-" not in values


def test_round_trip_dynamic(tmp_path, sample_text):
    store = RecordStore()
    store.add_text(sample_text)
    path = export_records(store.records, store.headers, str(tmp_path / "rt.xlsx"))

    imported = read_records(path)
    assert len(imported) == len(store)
    for original, back in zip(store.records, imported):
        assert back == original


def test_fixed_export_styles_header_row(tmp_path):
    store = RecordStore(FixedPolicy())
    store.add_text("编号：1\n皮肤：A")
    path = export_records(
        store.records,
        store.headers,
        str(tmp_path / "fixed.xlsx"),
        styles=store.policy.column_styles,
    )
    ws = load_workbook(path).active
    assert [c.value for c in ws[1]] == [h or None for h in FIXED_HEADERS]

    first = ws.cell(row=1, column=1)
    assert first.font.b is True
    assert first.fill.fill_type == "solid"
    assert first.fill.start_color.rgb.endswith(FIXED_COLUMN_STYLES[0].fill_color)
    assert first.font.color.rgb.endswith(FIXED_COLUMN_STYLES[0].font_color)
    assert first.alignment.horizontal == "center"
    assert first.alignment.wrap_text is True
    assert ws.column_dimensions["A"].width == FIXED_COLUMN_STYLES[0].width
    assert ws.row_dimensions[1].height == HEADER_ROW_HEIGHT

    skin_col = FIXED_HEADERS.index("特殊皮肤") + 1
    assert ws.cell(row=2, column=skin_col).value == "A"


def test_export_without_records_fails(tmp_path):
    with pytest.raises(ExportFailure):
        export_records([], ["a"], str(tmp_path / "empty.xlsx"))


def test_export_to_unwritable_path_fails(tmp_path):
    with pytest.raises(ExportFailure):
        export_records([{"a": "1"}], ["a"], str(tmp_path / "missing" / "out.xlsx"))


def test_export_to_temp_enforces_suffix():
    path = export_to_temp([{"a": "1"}], ["a"], "listing_test_export")
    assert path.endswith("listing_test_export.xlsx")
    assert read_records(path) == [{"a": "1"}]


def test_import_converts_cells_to_text(tmp_path):
    path = _write_workbook(
        tmp_path / "in.xlsx",
        [["编号", "价格", "比例", "日期"], [1818781769481982, 30.0, 1.5, date(2024, 5, 1)]],
    )
    assert read_records(str(path)) == [
        {"编号": "1818781769481982", "价格": "30", "比例": "1.5", "日期": "2024-05-01T00:00:00"}
    ]


def test_import_skips_blank_cells_rows_and_headers(tmp_path):
    path = _write_workbook(
        tmp_path / "in.xlsx",
        [["a", None, "b"], ["1", "orphan", None], [None, None, None], ["2", None, "3"]],
    )
    assert read_records(str(path)) == [{"a": "1"}, {"a": "2", "b": "3"}]


def test_import_reads_first_sheet_only(tmp_path):
    wb = Workbook()
    wb.active.append(["a"])
    wb.active.append(["1"])
    other = wb.create_sheet("Other")
    other.append(["b"])
    other.append(["2"])
    path = tmp_path / "two.xlsx"
    wb.save(path)
    assert read_records(str(path)) == [{"a": "1"}]


def test_import_from_file_like_object(tmp_path):
    path = _write_workbook(tmp_path / "in.xlsx", [["a"], ["1"]])
    buffer = io.BytesIO(path.read_bytes())
    buffer.seek(3)
    assert read_records(buffer) == [{"a": "1"}]


def test_import_empty_sheet(tmp_path):
    path = tmp_path / "empty.xlsx"
    Workbook().save(path)
    assert read_records(str(path)) == []


def test_import_missing_file_is_read_failure(tmp_path):
    with pytest.raises(FileReadFailure):
        read_records(str(tmp_path / "nope.xlsx"))


def test_import_without_file_is_read_failure():
    with pytest.raises(FileReadFailure):
        read_records(None)


def test_import_garbage_is_decode_failure(tmp_path):
    path = tmp_path / "bad.xlsx"
    path.write_bytes(b"not a workbook")
    with pytest.raises(ImportDecodeFailure):
        read_records(str(path))


def test_header_keys_suffix_repeats():
    assert header_keys(["a", "a", None, " ", "b", "a"]) == ["a", "a_1", None, None, "b", "a_2"]


def test_cell_text():
    assert cell_text(None) == ""
    assert cell_text(3.0) == "3"
    assert cell_text(3.25) == "3.25"
    assert cell_text(7) == "7"
    assert cell_text("x") == "x"


def test_values_starting_with_equals_stay_text(tmp_path):
    store = RecordStore()
    store.add_text("编号：1\n备注：=见群公告\n价格：=100+20")
    path = export_records(store.records, store.headers, str(tmp_path / "eq.xlsx"))

    ws = load_workbook(path).active
    assert [c.data_type for c in ws[2]] == ["s", "s", "s"]
    assert read_records(path) == [{"编号": "1", "备注": "=见群公告", "价格": "=100+20"}]


def test_all_blank_record_survives_round_trip(tmp_path):
    store = RecordStore()
    store.add_text("编号：1\n段位：A")
    store.add_record([["段位", ""]])
    path = export_records(store.records, store.headers, str(tmp_path / "blank.xlsx"))

    imported = read_records(path)
    assert len(imported) == 2
    assert imported == [{"编号": "1", "段位": "A"}, {"段位": ""}]


def test_fixed_round_trip_keeps_every_named_column(tmp_path):
    store = RecordStore(FixedPolicy())
    store.add_text("编号：1\n皮肤：A")
    path = export_records(store.records, store.headers, str(tmp_path / "fixed_rt.xlsx"))
    assert read_records(path) == list(store.records)


class _FakeSheet:
    def __init__(self, rows):
        self._rows = rows
        self.nrows = len(rows)

    def row(self, index):
        return self._rows[index]


class _FakeBook:
    datemode = 0

    def __init__(self, rows):
        self._sheet = _FakeSheet(rows)
        self.released = False

    def sheet_by_index(self, index):
        assert index == 0
        return self._sheet

    def release_resources(self):
        self.released = True


def test_import_legacy_xls(tmp_path, monkeypatch):
    book = _FakeBook([
        [Cell(xlrd.XL_CELL_TEXT, "编号"), Cell(xlrd.XL_CELL_TEXT, "价格"), Cell(xlrd.XL_CELL_TEXT, "日期"), Cell(xlrd.XL_CELL_TEXT, "在线")],
        [Cell(xlrd.XL_CELL_NUMBER, 1818.0), Cell(xlrd.XL_CELL_BLANK, ""), Cell(xlrd.XL_CELL_DATE, 45413.0), Cell(xlrd.XL_CELL_BOOLEAN, 1)],
        [Cell(xlrd.XL_CELL_EMPTY, ""), Cell(xlrd.XL_CELL_EMPTY, "")],
        [Cell(xlrd.XL_CELL_TEXT, "2")],
    ])
    seen = {}

    def fake_open_workbook(file_contents=None, **kwargs):
        seen["data"] = file_contents
        return book

    monkeypatch.setattr(xlrd, "open_workbook", fake_open_workbook)
    path = tmp_path / "legacy.xls"
    path.write_bytes(OLE2_SIGNATURE + b"\x00" * 64)

    assert read_records(str(path)) == [
        {"编号": "1818", "价格": "", "日期": "2024-05-01T00:00:00", "在线": "True"},
        {"编号": "2"},
    ]
    assert seen["data"].startswith(OLE2_SIGNATURE)
    assert book.released


def test_corrupt_xls_is_decode_failure(tmp_path):
    path = tmp_path / "broken.xls"
    path.write_bytes(OLE2_SIGNATURE + b"\x00" * 64)
    with pytest.raises(ImportDecodeFailure):
        read_records(str(path))


def test_rows_to_records_empty():
    assert rows_to_records([]) == []
