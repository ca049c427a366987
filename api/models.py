"""
API request and response models for the inventory backend.

These Pydantic v2 models define the HTTP transport contract. They are
intentionally separate from the dataclasses in inventory/models.py, which own
the internal domain representation. Route handlers map between the two.

Wire field names are camelCase (serialNumber, assetTag, createdAt); Python
attributes stay snake_case through Field aliases.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.catalogs import MODEL_TYPES, RAM_SPECS, resolve_location
from inventory.models import TableItem
from inventory.validation import ASSET_TAG_PATTERN

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class ItemCreate(BaseModel):
    """Request body for POST /items.

    Every field is required and non-empty. assetTag is digits only; model, ram
    and location must come from the fixed catalogs. location may be sent as a
    catalog key and is stored as its display name.
    """

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    brand: str = Field(min_length=1, max_length=255)
    serial_number: str = Field(alias="serialNumber", min_length=1, max_length=255)
    asset_tag: str = Field(alias="assetTag", min_length=1, max_length=64, pattern=ASSET_TAG_PATTERN)
    model: str = Field(min_length=1)
    ram: str = Field(min_length=1)
    processor: str = Field(min_length=1, max_length=255)
    motherboard: str = Field(min_length=1, max_length=255)
    storage: str = Field(min_length=1, max_length=255)
    location: str = Field(min_length=1)

    @field_validator("model")
    @classmethod
    def known_model(cls, value: str) -> str:
        if value not in MODEL_TYPES:
            raise ValueError(f"Unknown model type {value!r}")
        return value

    @field_validator("ram")
    @classmethod
    def known_ram(cls, value: str) -> str:
        if value not in RAM_SPECS:
            raise ValueError(f"Unknown RAM spec {value!r}")
        return value

    @field_validator("location")
    @classmethod
    def known_location(cls, value: str) -> str:
        resolved = resolve_location(value)
        if resolved is None:
            raise ValueError(f"Unknown location {value!r}")
        return resolved

    def to_item(self) -> TableItem:
        return TableItem(
            brand=self.brand,
            serial_number=self.serial_number,
            asset_tag=self.asset_tag,
            model=self.model,
            ram=self.ram,
            processor=self.processor,
            motherboard=self.motherboard,
            storage=self.storage,
            location=self.location,
        )


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class ItemRow(BaseModel):
    """One row of the items table, all columns."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    brand: str
    serial_number: str = Field(alias="serialNumber")
    asset_tag: str = Field(alias="assetTag")
    model: str
    ram: str
    processor: str
    motherboard: str
    storage: str
    location: str
    created_at: str = Field(alias="createdAt")

    @classmethod
    def from_item(cls, item: TableItem) -> "ItemRow":
        """Build an ItemRow from a stored TableItem."""
        return cls(
            id=item.id,
            brand=item.brand,
            serial_number=item.serial_number,
            asset_tag=item.asset_tag,
            model=item.model,
            ram=item.ram,
            processor=item.processor,
            motherboard=item.motherboard,
            storage=item.storage,
            location=item.location,
            created_at=item.created_at,
        )


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
