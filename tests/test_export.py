"""Unit tests for inventory/export.py -- workbook export and share links.

Workbooks are written to tmp_path and read back with openpyxl.
"""

import io
from urllib.parse import unquote

from openpyxl import load_workbook

from inventory.export import (
    SHEET_TITLE,
    records_workbook,
    share_link,
    table_workbook,
    workbook_bytes,
    write_workbook,
)
from inventory.models import AssetRecord, TableItem, record_columns
from inventory.validation import validate_input


def _record(make_form, **overrides) -> AssetRecord:
    return AssetRecord.from_input(validate_input(make_form(**overrides)), registered_at="domingo, 02/03/2025, 09:05:07")


class TestRecordsWorkbook:
    def test_sheet_title_and_header(self, make_form, tmp_path):
        path = write_workbook([_record(make_form)], tmp_path / "out" / "inventario.xlsx")
        sheet = load_workbook(path).active
        assert sheet.title == SHEET_TITLE
        header = [c.value for c in sheet[1]]
        assert header == record_columns()
        assert header[0] == "brand"
        assert header[-1] == "registeredAt"

    def test_one_row_per_record(self, make_form, tmp_path):
        records = [
            _record(make_form, serial_number="SN1", asset_tag="100"),
            _record(make_form, serial_number="SN2", asset_tag="200"),
        ]
        sheet = load_workbook(write_workbook(records, tmp_path / "inv.xlsx")).active
        assert sheet.max_row == 3
        serial_col = record_columns().index("serialNumber") + 1
        assert [sheet.cell(row=r, column=serial_col).value for r in (2, 3)] == ["SN1", "SN2"]

    def test_empty_registry_gives_header_only(self, tmp_path):
        sheet = load_workbook(write_workbook([], tmp_path / "empty.xlsx")).active
        assert sheet.max_row == 1

    def test_formula_cells_are_neutralized(self, make_form):
        record = _record(make_form, processor="=HYPERLINK(\"http://evil\")", sector="@SUM(A1)")
        sheet = load_workbook(io.BytesIO(workbook_bytes(records_workbook([record])))).active
        row = {h: c.value for h, c in zip(record_columns(), sheet[2])}
        assert row["processor"].startswith("\t=")
        assert row["sector"].startswith("\t@")
        assert row["brand"] == "Dell"


def test_table_workbook_includes_id_and_created_at():
    item = TableItem(
        brand="Dell",
        serial_number="SN1",
        asset_tag="100",
        model="Notebook",
        ram="8GBDDR4",
        processor="i5",
        motherboard="0XYZ12",
        storage="SSD",
        location="Universidade Aberta Brasileira",
        id=7,
        created_at="2025-03-12T14:30:00",
    )
    sheet = load_workbook(io.BytesIO(workbook_bytes(table_workbook([item])))).active
    assert sheet.cell(row=1, column=1).value == "id"
    assert sheet.cell(row=1, column=11).value == "createdAt"
    assert sheet.cell(row=2, column=1).value == "7"


def test_share_link_encodes_message_and_url():
    link = share_link("https://files.example.org/inventario.xlsx", "Segue o inventario: ")
    assert link.startswith("https://wa.me/?text=")
    encoded = link[len("https://wa.me/?text=") :]
    assert " " not in encoded
    assert unquote(encoded) == "Segue o inventario: https://files.example.org/inventario.xlsx"
