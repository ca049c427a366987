"""
core/errors.py -- Error taxonomy for the inventory.

Every failure the registry, the stores and the mirrors can report is one of
these classes. Callers (CLI, API) map them to user-facing messages; nothing in
inventory/ formats output for a human directly.

  ValidationError   -- malformed input, rejected before any store is touched
  DuplicateAsset    -- uniqueness invariant violated, rejected before any store is touched
  AssetNotFound     -- update of a serial number that is not registered
  LocalStoreError   -- the local persistent store transaction failed
  RemoteTableError  -- the server-side table failed for a reason other than a duplicate
  RemoteMirrorError -- a best-effort mirror failed after the local write succeeded

Layer rule: core/ is the kernel. This module may not import from api/ or inventory/.
"""

from enum import Enum
from typing import Optional


class InventoryError(Exception):
    """Base class for every inventory failure."""


class ValidationError(InventoryError):
    """A field failed boundary validation."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class DuplicateKind(str, Enum):
    SERIAL_NUMBER = "serial_number"
    ASSET_TAG = "asset_tag"
    BOTH = "both"


_DUPLICATE_MESSAGES: dict[DuplicateKind, str] = {
    DuplicateKind.BOTH: "Item already registered with this serial number and asset tag.",
    DuplicateKind.SERIAL_NUMBER: "Item already registered with this serial number.",
    DuplicateKind.ASSET_TAG: "Item already registered with this asset tag.",
}


def classify_duplicate(serial_taken: bool, tag_taken: bool) -> Optional[DuplicateKind]:
    """Return which unique field(s) collided, or None when neither did."""
    if serial_taken and tag_taken:
        return DuplicateKind.BOTH
    if serial_taken:
        return DuplicateKind.SERIAL_NUMBER
    if tag_taken:
        return DuplicateKind.ASSET_TAG
    return None


class DuplicateAsset(InventoryError):
    """A serial number and/or asset tag is already registered.

    kind tells the caller which field collided so each case gets its own message.
    """

    def __init__(self, kind: DuplicateKind) -> None:
        self.kind = kind
        self.message = _DUPLICATE_MESSAGES[kind]
        super().__init__(self.message)


class AssetNotFound(InventoryError):
    def __init__(self, serial_number: str) -> None:
        super().__init__(f"No item registered with serial number {serial_number!r}.")
        self.serial_number = serial_number


class LocalStoreError(InventoryError):
    """A local store read, write or delete failed and was rolled back."""


class RemoteTableError(InventoryError):
    """The server-side table failed (connection, schema, statement)."""


class RemoteMirrorError(InventoryError):
    """A mirror write failed. Non-blocking: the local write already succeeded.

    duplicate is set when the mirror rejected the record because of a uniqueness
    conflict on its side, so callers can tell divergence apart from outages.
    """

    def __init__(self, mirror: str, message: str, duplicate: Optional[DuplicateKind] = None) -> None:
        super().__init__(f"{mirror}: {message}")
        self.mirror = mirror
        self.message = message
        self.duplicate = duplicate
