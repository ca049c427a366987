#!/usr/bin/env python3
"""
Inventory -- equipment registration for the municipal education network.

Records equipment in the local store and mirrors every new registration to the
configured spreadsheet webhook and backend.

Usage:
  python main.py add --brand Dell --serial-number SN1 --asset-tag 100 --model Notebook \\
      --ram 8GBDDR4 --processor "i5-8250U" --motherboard "Dell 0XYZ" --storage "SSD 256GB" \\
      --location secretaria --sector TI
  python main.py edit SN1 --storage "SSD 512GB"
  python main.py delete SN1
  python main.py list
  python main.py list --json
  python main.py show SN1
  python main.py export --output inventario.xlsx
  python main.py share --url https://files.example.org/inventario.xlsx
  python main.py catalogs

Environment variables (see core/config.py):
  LOCAL_DB_PATH       Local store file (default: data/inventory_local.db)
  SHEET_WEBHOOK_URL   Spreadsheet webhook mirror; empty disables it
  ITEMS_API_URL       Backend base URL for the /items mirror; empty disables it
  MIRROR_TABLE        true to insert new items straight into the table at TABLE_DB_URL
  MIRROR_TIMEOUT      Seconds before a mirror call gives up (default: 10)
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from core.catalogs import LOCATIONS, MODEL_TYPES, RAM_SPECS
from core.config import LOG_DATEFMT, LOG_FORMAT, get_settings
from core.errors import AssetNotFound, DuplicateAsset, InventoryError, LocalStoreError, ValidationError
from inventory.export import DEFAULT_FILENAME, share_link, write_workbook
from inventory.local_store import LocalAssetStore
from inventory.mirror import build_mirrors
from inventory.models import AssetRecord
from inventory.registry import AssetRegistry
from inventory.validation import validate_input

# (attribute, flag, help) for every form field, in form order.
_FORM_FIELDS: list[tuple[str, str, str]] = [
    ("brand", "--brand", "Brand of the item"),
    ("serial_number", "--serial-number", "Serial number (unique, cannot be changed later)"),
    ("asset_tag", "--asset-tag", "Asset tag number (digits only, unique)"),
    ("model", "--model", "Model type (see: catalogs)"),
    ("ram_spec", "--ram", "RAM spec (see: catalogs)"),
    ("processor", "--processor", "Processor"),
    ("motherboard", "--motherboard", "Motherboard"),
    ("storage", "--storage", "Storage"),
    ("location", "--location", "Location key or name (see: catalogs)"),
    ("sector", "--sector", "Sector the equipment belongs to"),
]

_LABELS: dict[str, str] = {
    "brand": "Brand",
    "serial_number": "Serial number",
    "asset_tag": "Asset tag",
    "model": "Model",
    "ram_spec": "RAM",
    "processor": "Processor",
    "motherboard": "Motherboard",
    "storage": "Storage",
    "location": "Location",
    "sector": "Sector",
    "registered_at": "Registered at",
}


def _add_form_args(parser: argparse.ArgumentParser, skip: tuple[str, ...] = ()) -> None:
    for attr, flag, help_text in _FORM_FIELDS:
        if attr in skip:
            continue
        parser.add_argument(flag, dest=attr, metavar="VALUE", help=help_text)


def _form_from_args(args: argparse.Namespace, base: Optional[AssetRecord] = None) -> dict[str, object]:
    """Collect form fields from args, falling back to base for anything not given."""
    form: dict[str, object] = {}
    for attr, _flag, _help in _FORM_FIELDS:
        value = getattr(args, attr, None)
        if value is None and base is not None:
            value = getattr(base, attr)
        form[attr] = value
    return form


def _print_line(record: AssetRecord) -> None:
    print(
        f"  {record.serial_number:<16} {record.asset_tag:>8}  {record.brand} - {record.location} - "
        f"{record.ram_spec} - {record.processor} - {record.motherboard} - {record.storage}"
    )
    print(f"  {'':<16} {'':>8}  Registered at: {record.registered_at}")


def _print_details(record: AssetRecord) -> None:
    print("\n  Item details")
    print(f"  {'─' * 40}")
    for attr, label in _LABELS.items():
        print(f"  {label + ':':<15} {getattr(record, attr)}")
    print()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def _cmd_add(registry: AssetRegistry, args: argparse.Namespace) -> int:
    data = validate_input(_form_from_args(args))
    result = await registry.create(data)
    print(f"  Item {result.record.serial_number} registered ({result.record.registered_at}).")
    for warning in result.warnings:
        print(f"  [!] Saved locally, but {warning.mirror} failed: {warning.message}")
    return 0


async def _cmd_edit(registry: AssetRegistry, args: argparse.Namespace) -> int:
    existing = registry.get(args.serial)
    if existing is None:
        raise AssetNotFound(args.serial)
    form = _form_from_args(args, base=existing)
    form["serial_number"] = args.serial
    record = await registry.update(args.serial, validate_input(form))
    print(f"  Item {record.serial_number} updated.")
    return 0


async def _cmd_delete(registry: AssetRegistry, args: argparse.Namespace) -> int:
    if await registry.delete(args.serial):
        print(f"  Item {args.serial} deleted.")
    else:
        print(f"  Item {args.serial} was not registered; nothing to delete.")
    return 0


async def _cmd_list(registry: AssetRegistry, args: argparse.Namespace) -> int:
    records = registry.list()
    if args.json:
        print(json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False))
        return 0
    if not records:
        print("  No items registered.")
        return 0
    for record in records:
        _print_line(record)
    print(f"\n  {len(records)} item(s).")
    return 0


async def _cmd_show(registry: AssetRegistry, args: argparse.Namespace) -> int:
    record = registry.get(args.serial)
    if record is None:
        raise AssetNotFound(args.serial)
    _print_details(record)
    return 0


async def _cmd_export(registry: AssetRegistry, args: argparse.Namespace) -> int:
    records = registry.list()
    path = write_workbook(records, args.output)
    print(f"  {len(records)} item(s) exported to {path}.")
    return 0


_COMMANDS = {
    "add": _cmd_add,
    "edit": _cmd_edit,
    "delete": _cmd_delete,
    "list": _cmd_list,
    "show": _cmd_show,
    "export": _cmd_export,
}


async def _run(args: argparse.Namespace) -> int:
    settings = get_settings()
    store = LocalAssetStore(args.db or settings.local_db_path)
    try:
        registry = await AssetRegistry.open(store, build_mirrors(settings))
        return await _COMMANDS[args.command](registry, args)
    finally:
        store.close()


def _print_catalogs() -> None:
    for title, catalog in (("Model types", MODEL_TYPES), ("RAM specs", RAM_SPECS), ("Locations", LOCATIONS)):
        print(f"\n  {title}")
        print(f"  {'─' * 40}")
        for key, label in catalog.items():
            print(f"  {key:<22} {label}")
    print()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inventory",
        description="Register and track equipment for the municipal education network.",
    )
    parser.add_argument("--db", metavar="PATH", help="Local store file (overrides LOCAL_DB_PATH)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log registry and mirror activity")
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    add = sub.add_parser("add", help="Register a new item")
    _add_form_args(add)

    edit = sub.add_parser("edit", help="Replace the fields of a registered item")
    edit.add_argument("serial", metavar="SERIAL", help="Serial number of the item to edit")
    _add_form_args(edit, skip=("serial_number",))

    delete = sub.add_parser("delete", help="Delete an item from the local store")
    delete.add_argument("serial", metavar="SERIAL")

    list_ = sub.add_parser("list", help="List registered items")
    list_.add_argument("--json", action="store_true", help="Output the records as JSON")

    show = sub.add_parser("show", help="Show every field of one item")
    show.add_argument("serial", metavar="SERIAL")

    export = sub.add_parser("export", help="Write every item to an .xlsx workbook")
    export.add_argument("--output", default=DEFAULT_FILENAME, metavar="PATH")

    share = sub.add_parser("share", help="Print a WhatsApp link to a published workbook")
    share.add_argument("--url", required=True, help="Where the exported workbook has been published")

    sub.add_parser("catalogs", help="List valid model types, RAM specs and locations")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )

    if args.command == "catalogs":
        _print_catalogs()
        return 0
    if args.command == "share":
        print(share_link(args.url, get_settings().share_message))
        return 0

    try:
        return asyncio.run(_run(args))
    except ValidationError as e:
        print(f"  [!] Invalid {e.field}: {e.message}")
    except DuplicateAsset as e:
        print(f"  [!] {e.message}")
    except AssetNotFound as e:
        print(f"  [!] {e}")
    except LocalStoreError as e:
        print(f"  [!] Local store error: {e}")
    except InventoryError as e:
        print(f"  [!] {e}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
