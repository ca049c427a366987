"""
inventory/validation.py -- Boundary validation for operator-submitted asset fields.

Runs before the registry sees anything: a ValidationError here means no store
was touched. The registry itself trusts its AssetInput and only enforces
uniqueness.

Rules:
  - every field is required (non-empty after stripping whitespace)
  - asset_tag is ASCII digits only (^[0-9]*$)
  - model and ram_spec must be catalog keys
  - location may be a catalog key or a display name; it is stored as the display name
"""

import re
from collections.abc import Mapping

from core.catalogs import MODEL_TYPES, RAM_SPECS, resolve_location
from core.errors import ValidationError
from inventory.models import AssetInput

ASSET_TAG_PATTERN = r"^[0-9]*$"
_ASSET_TAG_RE = re.compile(ASSET_TAG_PATTERN)

# Order matters: the first missing field is the one reported.
REQUIRED_FIELDS: tuple[str, ...] = (
    "brand",
    "serial_number",
    "asset_tag",
    "model",
    "ram_spec",
    "processor",
    "motherboard",
    "storage",
    "location",
    "sector",
)


def validate_asset_tag(value: str) -> str:
    value = value.strip()
    if not _ASSET_TAG_RE.match(value):
        raise ValidationError("asset_tag", "Asset tag must contain digits only.")
    return value


def validate_input(raw: Mapping[str, object]) -> AssetInput:
    """Validate and normalize raw form fields into an AssetInput.

    raw is keyed by AssetInput attribute names. Unknown keys are ignored.
    Raises core.errors.ValidationError on the first bad field.
    """
    cleaned: dict[str, str] = {}
    for name in REQUIRED_FIELDS:
        value = raw.get(name)
        text = value.strip() if isinstance(value, str) else ""
        if not text:
            raise ValidationError(name, "This field is required.")
        cleaned[name] = text

    cleaned["asset_tag"] = validate_asset_tag(cleaned["asset_tag"])

    if cleaned["model"] not in MODEL_TYPES:
        raise ValidationError("model", f"Unknown model type {cleaned['model']!r}.")
    if cleaned["ram_spec"] not in RAM_SPECS:
        raise ValidationError("ram_spec", f"Unknown RAM spec {cleaned['ram_spec']!r}.")

    location = resolve_location(cleaned["location"])
    if location is None:
        raise ValidationError("location", f"Unknown location {cleaned['location']!r}.")
    cleaned["location"] = location

    return AssetInput(**cleaned)
