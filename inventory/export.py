"""
inventory/export.py -- Spreadsheet export and share links.

One workbook, one sheet ("Inventario"), a header row of record keys and one row
per record. The same workbook can be written to a file or returned as bytes for
an HTTP response or an upload.

Formula injection (CWE-1236): cells that start with =, +, - or @ are prefixed
with a tab so spreadsheet applications treat them as text.
"""

import io
from pathlib import Path
from typing import Iterable, Union
from urllib.parse import quote

from openpyxl import Workbook

from inventory.models import AssetRecord, TableItem, record_columns

SHEET_TITLE = "Inventario"
DEFAULT_FILENAME = "inventario.xlsx"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_SHARE_BASE = "https://wa.me/?text="
_FORMULA_PREFIXES = ("=", "+", "-", "@")

_TABLE_COLUMNS = [
    "id",
    "brand",
    "serialNumber",
    "assetTag",
    "model",
    "ram",
    "processor",
    "motherboard",
    "storage",
    "location",
    "createdAt",
]


def _sanitize_cell(value) -> str:
    text = "" if value is None else str(value)
    if text.startswith(_FORMULA_PREFIXES):
        return "\t" + text
    return text


def _build(headers: list[str], rows: Iterable[list]) -> Workbook:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_TITLE
    sheet.append(headers)
    for row in rows:
        sheet.append([_sanitize_cell(v) for v in row])
    return workbook


def records_workbook(records: Iterable[AssetRecord]) -> Workbook:
    columns = record_columns()
    return _build(columns, ([r.to_dict()[c] for c in columns] for r in records))


def table_workbook(items: Iterable[TableItem]) -> Workbook:
    rows = (
        [
            i.id,
            i.brand,
            i.serial_number,
            i.asset_tag,
            i.model,
            i.ram,
            i.processor,
            i.motherboard,
            i.storage,
            i.location,
            i.created_at,
        ]
        for i in items
    )
    return _build(_TABLE_COLUMNS, rows)


def workbook_bytes(workbook: Workbook) -> bytes:
    buf = io.BytesIO()
    workbook.save(buf)
    return buf.getvalue()


def write_workbook(records: Iterable[AssetRecord], path: Union[Path, str] = DEFAULT_FILENAME) -> Path:
    """Write records to an .xlsx file and return its path."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    records_workbook(records).save(target)
    return target


def share_link(file_url: str, message: str) -> str:
    """Build a WhatsApp share link pointing at a published workbook.

    Publishing the file is the caller's job; this only builds the link text.
    """
    return _SHARE_BASE + quote(f"{message}{file_url}", safe="")
