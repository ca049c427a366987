"""
inventory/registry.py -- The asset registry: one create/update/delete/list surface
over the local store and the mirrors.

Invariants enforced here, before any store is touched:
  - serial_number is unique across the registry
  - asset_tag is unique across the registry

Ordering: the local store write is awaited and committed first; only then is
the in-memory working set updated, and only after that are mirrors attempted.
A LocalStoreError therefore leaves the working set unchanged. A mirror failure
is logged and returned in CreateResult.warnings; the local record stays.

Only create is mirrored. update and delete are local-only, so the mirrors act
as a one-way log of registrations and may diverge from the local copy.

The working set is loaded once from the local store in open() and served from
memory afterwards. An asyncio.Lock serializes check-then-write so two tasks
interleaving on the same event loop cannot both pass the duplicate check;
mirror calls run outside the lock.

Usage:
    registry = await AssetRegistry.open(LocalAssetStore(path), mirrors)
    result = await registry.create(validate_input(form))
    for warning in result.warnings: ...
    await registry.update("SN1", validate_input(form))
    await registry.delete("SN1")
    records = registry.list()
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from core.config import get_settings
from core.errors import (
    AssetNotFound,
    DuplicateAsset,
    DuplicateKind,
    RemoteMirrorError,
    ValidationError,
    classify_duplicate,
)
from inventory.local_store import LocalAssetStore
from inventory.models import AssetInput, AssetRecord

logger = logging.getLogger("inventory.registry")

_WEEKDAYS_PT = (
    "segunda-feira",
    "terça-feira",
    "quarta-feira",
    "quinta-feira",
    "sexta-feira",
    "sábado",
    "domingo",
)


def format_registered_at(dt: datetime) -> str:
    """Render dt the way the operators read it: pt-BR, long weekday, 24h clock.

    Example: "quarta-feira, 12/03/2025, 14:30:00"
    """
    return f"{_WEEKDAYS_PT[dt.weekday()]}, {dt:%d/%m/%Y}, {dt:%H:%M:%S}"


@dataclass
class CreateResult:
    """Outcome of a successful create.

    warnings holds one RemoteMirrorError per mirror that failed. An empty list
    means every configured mirror accepted the record.
    """

    record: AssetRecord
    warnings: list[RemoteMirrorError] = field(default_factory=list)


class AssetRegistry:
    def __init__(self, store: LocalAssetStore, mirrors: Optional[list] = None, tz_name: Optional[str] = None) -> None:
        self.store = store
        self.mirrors = list(mirrors or [])
        self.tz = ZoneInfo(tz_name or get_settings().timezone)
        self._items: dict[str, AssetRecord] = {}
        self._lock = asyncio.Lock()

    @classmethod
    async def open(
        cls,
        store: LocalAssetStore,
        mirrors: Optional[list] = None,
        tz_name: Optional[str] = None,
    ) -> "AssetRegistry":
        """Build a registry and load its working set from the local store."""
        registry = cls(store, mirrors, tz_name)
        await registry.load()
        return registry

    async def load(self) -> None:
        records = await self.store.get_all()
        self._items = {r.serial_number: r for r in records}
        logger.info("Loaded %d item(s) from local store", len(self._items))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list(self) -> list[AssetRecord]:
        return list(self._items.values())

    def get(self, serial_number: str) -> Optional[AssetRecord]:
        return self._items.get(serial_number)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _find_duplicate(self, data: AssetInput, exclude: Optional[str] = None) -> Optional[DuplicateKind]:
        """Classify collisions with every record except the one keyed by exclude."""
        others = [r for sn, r in self._items.items() if sn != exclude]
        return classify_duplicate(
            serial_taken=any(r.serial_number == data.serial_number for r in others),
            tag_taken=any(r.asset_tag == data.asset_tag for r in others),
        )

    def _stamp(self) -> str:
        return format_registered_at(datetime.now(self.tz))

    async def create(self, data: AssetInput) -> CreateResult:
        """Register a new asset, then mirror it.

        Raises DuplicateAsset (no store touched) or LocalStoreError (working
        set unchanged). Mirror failures come back in CreateResult.warnings.
        """
        async with self._lock:
            kind = self._find_duplicate(data)
            if kind is not None:
                raise DuplicateAsset(kind)
            record = AssetRecord.from_input(data, registered_at=self._stamp())
            await self.store.put(record)
            self._items[record.serial_number] = record
        logger.info("Registered item %s (asset tag %s)", record.serial_number, record.asset_tag)

        warnings: list[RemoteMirrorError] = []
        for mirror in self.mirrors:
            try:
                await mirror.publish(record)
            except RemoteMirrorError as e:
                warning = e
            except Exception as e:
                # The local write is committed; any mirror fault is only a warning.
                name = getattr(mirror, "name", type(mirror).__name__)
                warning = RemoteMirrorError(name, str(e) or type(e).__name__)
                warning.__cause__ = e
            else:
                continue
            logger.warning(
                "Mirror %s failed for item %s: %s", warning.mirror, record.serial_number, warning.message
            )
            warnings.append(warning)
        return CreateResult(record=record, warnings=warnings)

    async def update(self, serial_number: str, data: AssetInput) -> AssetRecord:
        """Replace the full record stored under serial_number.

        registered_at is carried over from the existing record. The serial
        number itself cannot change; the asset tag must not belong to another
        record.
        """
        if data.serial_number != serial_number:
            raise ValidationError("serial_number", "Serial number cannot be changed.")
        async with self._lock:
            existing = self._items.get(serial_number)
            if existing is None:
                raise AssetNotFound(serial_number)
            kind = self._find_duplicate(data, exclude=serial_number)
            if kind is not None:
                raise DuplicateAsset(kind)
            record = AssetRecord.from_input(data, registered_at=existing.registered_at)
            await self.store.put(record)
            self._items[serial_number] = record
        logger.info("Updated item %s", serial_number)
        return record

    async def delete(self, serial_number: str) -> bool:
        """Remove the record. Returns False (and does nothing else) if it was not registered."""
        async with self._lock:
            if serial_number not in self._items:
                return False
            await self.store.delete(serial_number)
            del self._items[serial_number]
        logger.info("Deleted item %s", serial_number)
        return True
