"""
inventory/mirror.py -- Best-effort one-way replication of created records.

A mirror receives every newly created record after the local store has
committed it. Mirrors never see updates or deletes. Every failure is raised as
RemoteMirrorError; the registry logs it and hands it back to the caller as a
warning, it never undoes the local write.

Mirrors:
  SheetWebhookMirror -- POST the full record as JSON to a spreadsheet-ingestion webhook
  ItemsApiMirror     -- POST the record to the HTTP backend's /items route
  TableMirror        -- insert directly into a RemoteTable (MIRROR_TABLE=true, at TABLE_DB_URL)

HTTP mirrors share one requests.Session for connection pooling. requests is
blocking, so each call runs in a worker thread via asyncio.to_thread.
"""

import asyncio
import logging
from typing import Optional

import requests

from core.config import Settings
from core.errors import DuplicateAsset, DuplicateKind, RemoteMirrorError, RemoteTableError
from inventory.models import AssetRecord, TableItem
from inventory.table import RemoteTable

logger = logging.getLogger("inventory.mirror")

# Mirror targets are fixed, configured URLs; 3 hops is generous.
_session = requests.Session()
_session.max_redirects = 3


def item_payload(item: TableItem) -> dict[str, str]:
    """JSON body accepted by POST /items."""
    return {
        "brand": item.brand,
        "serialNumber": item.serial_number,
        "assetTag": item.asset_tag,
        "model": item.model,
        "ram": item.ram,
        "processor": item.processor,
        "motherboard": item.motherboard,
        "storage": item.storage,
        "location": item.location,
    }


class SheetWebhookMirror:
    name = "sheet-webhook"

    def __init__(self, url: str, timeout: float = 10.0, session: Optional[requests.Session] = None) -> None:
        self.url = url
        self.timeout = timeout
        self.session = session or _session

    def _post(self, record: AssetRecord) -> None:
        try:
            resp = self.session.post(self.url, json=record.to_dict(), timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise RemoteMirrorError(self.name, f"Could not send item to the spreadsheet: {e}") from e

    async def publish(self, record: AssetRecord) -> None:
        await asyncio.to_thread(self._post, record)
        logger.info("Item %s sent to spreadsheet webhook", record.serial_number)


class ItemsApiMirror:
    """Client for the backend's POST /items route.

    A 400 carrying a duplicate_* error code becomes a RemoteMirrorError with
    duplicate set, so the caller can tell the backend already holds the key.
    """

    name = "items-api"

    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None) -> None:
        self.url = base_url.rstrip("/") + "/items"
        self.timeout = timeout
        self.session = session or _session

    def _post(self, record: AssetRecord) -> None:
        try:
            resp = self.session.post(self.url, json=item_payload(TableItem.from_record(record)), timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteMirrorError(self.name, f"Backend unreachable: {e}") from e
        if resp.status_code == 201:
            return
        code, message = _error_fields(resp)
        duplicate = None
        if code.startswith("duplicate_"):
            try:
                duplicate = DuplicateKind(code[len("duplicate_") :])
            except ValueError:
                duplicate = None
        raise RemoteMirrorError(
            self.name,
            message or f"Backend answered HTTP {resp.status_code}",
            duplicate=duplicate,
        )

    async def publish(self, record: AssetRecord) -> None:
        await asyncio.to_thread(self._post, record)
        logger.info("Item %s sent to backend %s", record.serial_number, self.url)


def _error_fields(resp: requests.Response) -> tuple[str, str]:
    """Pull (code, message) out of the backend's error envelope, if there is one."""
    try:
        body = resp.json()
    except ValueError:
        return "", ""
    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        return "", ""
    return str(error.get("code") or ""), str(error.get("message") or "")


class TableMirror:
    name = "items-table"

    def __init__(self, table: RemoteTable) -> None:
        self.table = table

    def _insert(self, record: AssetRecord) -> None:
        try:
            self.table.insert(TableItem.from_record(record))
        except DuplicateAsset as e:
            raise RemoteMirrorError(self.name, e.message, duplicate=e.kind) from e
        except RemoteTableError as e:
            raise RemoteMirrorError(self.name, str(e)) from e

    async def publish(self, record: AssetRecord) -> None:
        await asyncio.to_thread(self._insert, record)
        logger.info("Item %s inserted into items table", record.serial_number)


def build_mirrors(settings: Settings) -> list:
    """Return the mirrors enabled in settings, in publish order."""
    mirrors: list = []
    if settings.sheet_webhook_url:
        mirrors.append(SheetWebhookMirror(settings.sheet_webhook_url, timeout=settings.mirror_timeout))
    if settings.items_api_url:
        mirrors.append(ItemsApiMirror(settings.items_api_url, timeout=settings.mirror_timeout))
    if settings.mirror_table:
        mirrors.append(TableMirror(RemoteTable(settings.table_db_url)))
    return mirrors
