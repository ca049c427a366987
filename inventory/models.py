"""
inventory/models.py -- Domain dataclasses for the equipment inventory.

Pure data containers. Uniqueness rules live in inventory/registry.py and
inventory/table.py; field validation lives in inventory/validation.py.

Records travel as JSON (local store values, mirror payloads, exports) with
camelCase keys. to_dict()/from_dict() are the only place that mapping is spelled
out, so Python code always uses the snake_case attributes.
"""

from dataclasses import dataclass, fields
from typing import Any, Optional

# Python attribute -> JSON key. Order is the column order of exports.
_JSON_KEYS: dict[str, str] = {
    "brand": "brand",
    "serial_number": "serialNumber",
    "asset_tag": "assetTag",
    "model": "model",
    "ram_spec": "ramSpec",
    "processor": "processor",
    "motherboard": "motherboard",
    "storage": "storage",
    "location": "location",
    "sector": "sector",
    "registered_at": "registeredAt",
}


@dataclass
class AssetInput:
    """Operator-submitted fields of an asset, already validated at the boundary.

    location holds the display name (see core.catalogs.resolve_location).
    """

    brand: str
    serial_number: str
    asset_tag: str
    model: str
    ram_spec: str
    processor: str
    motherboard: str
    storage: str
    location: str
    sector: str


@dataclass
class AssetRecord:
    """A registered equipment asset.

    serial_number is the natural key and the local storage key; it never
    changes after creation. registered_at is stamped once by the registry and
    carried unchanged through updates.
    """

    brand: str
    serial_number: str
    asset_tag: str
    model: str
    ram_spec: str
    processor: str
    motherboard: str
    storage: str
    location: str
    sector: str
    registered_at: str = ""

    @classmethod
    def from_input(cls, data: AssetInput, registered_at: str) -> "AssetRecord":
        values = {f.name: getattr(data, f.name) for f in fields(AssetInput)}
        return cls(**values, registered_at=registered_at)

    def to_dict(self) -> dict[str, str]:
        return {key: getattr(self, attr) for attr, key in _JSON_KEYS.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AssetRecord":
        """Build a record from its JSON form. Missing keys become empty strings."""
        return cls(**{attr: str(data.get(key) or "") for attr, key in _JSON_KEYS.items()})


def record_columns() -> list[str]:
    """JSON keys of an AssetRecord in export column order."""
    return list(_JSON_KEYS.values())


@dataclass
class TableItem:
    """A row of the server-side items table.

    The table stores the nine fields the HTTP backend accepts; sector and the
    locale-formatted registered_at stay on the client. created_at is ISO 8601,
    stamped by the table on insert.

    id is None before the row is written to the database.
    """

    brand: str
    serial_number: str
    asset_tag: str
    model: str
    ram: str
    processor: str
    motherboard: str
    storage: str
    location: str
    id: Optional[int] = None
    created_at: str = ""

    @classmethod
    def from_record(cls, record: AssetRecord) -> "TableItem":
        return cls(
            brand=record.brand,
            serial_number=record.serial_number,
            asset_tag=record.asset_tag,
            model=record.model,
            ram=record.ram_spec,
            processor=record.processor,
            motherboard=record.motherboard,
            storage=record.storage,
            location=record.location,
        )
