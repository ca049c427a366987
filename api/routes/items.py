"""
api/routes/items.py -- Items table routes for the inventory backend.

Routes:
  POST   /items          -- insert one item (uniqueness on serialNumber and assetTag)
  GET    /items          -- list every item
  GET    /items/export   -- every item as an .xlsx workbook

Duplicate errors carry a code naming which key collided:
  duplicate_serial_number | duplicate_asset_tag | duplicate_both
Clients (inventory.mirror.ItemsApiMirror) rely on these codes.
"""

import logging

from fastapi import APIRouter, HTTPException, Request, Response

from api.limiter import limiter
from api.models import ErrorDetail, ItemCreate, ItemRow
from core.errors import DuplicateAsset, RemoteTableError
from inventory.export import DEFAULT_FILENAME, XLSX_MEDIA_TYPE, table_workbook, workbook_bytes
from inventory.table import RemoteTable

logger = logging.getLogger("inventory.api.items")

router = APIRouter()


# ---------------------------------------------------------------------------
# POST /items -- insert one item
# ---------------------------------------------------------------------------


@router.post("/items", response_model=ItemRow, status_code=201)
@limiter.limit("30/minute")
def create_item(request: Request, body: ItemCreate) -> ItemRow:
    """Insert an item into the table.

    400 when serialNumber and/or assetTag is already registered (the error
    code says which), or when the insert fails for any other reason.
    """
    table: RemoteTable = request.app.state.table
    try:
        created = table.insert(body.to_item())
    except DuplicateAsset as e:
        raise HTTPException(
            status_code=400,
            detail=ErrorDetail(code=f"duplicate_{e.kind.value}", message=e.message).model_dump(),
        )
    except RemoteTableError as e:
        logger.error("Error adding item %s: %s", body.serial_number, e)
        raise HTTPException(
            status_code=400,
            detail=ErrorDetail(code="insert_failed", message="Error adding item.").model_dump(),
        )
    logger.info("Item %s inserted (id=%s)", created.serial_number, created.id)
    return ItemRow.from_item(created)


# ---------------------------------------------------------------------------
# GET /items -- list every item
# ---------------------------------------------------------------------------


def _all_items(request: Request):
    table: RemoteTable = request.app.state.table
    try:
        return table.list_all()
    except RemoteTableError as e:
        logger.error("Error fetching items: %s", e)
        raise HTTPException(
            status_code=400,
            detail=ErrorDetail(code="fetch_failed", message="Error fetching items.").model_dump(),
        )


@router.get("/items", response_model=list[ItemRow])
@limiter.limit("60/minute")
def list_items(request: Request) -> list[ItemRow]:
    """Return every item in insertion order."""
    return [ItemRow.from_item(i) for i in _all_items(request)]


# ---------------------------------------------------------------------------
# GET /items/export -- spreadsheet download
# ---------------------------------------------------------------------------


@router.get("/items/export")
@limiter.limit("10/minute")
def export_items(request: Request) -> Response:
    """Return every item as a one-sheet .xlsx workbook."""
    content = workbook_bytes(table_workbook(_all_items(request)))
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{DEFAULT_FILENAME}"'},
    )
