"""
core/config.py -- Inventory settings, read once from the environment and .env.

Every environment variable the CLI and the API honour is a field on Settings;
the env var name is the upper-cased field name (sheet_webhook_url ->
SHEET_WEBHOOK_URL). Code asks get_settings() for the cached instance and never
reads os.environ itself.

validate_mirrors() fails fast on a mirror URL that is not http(s) or a
non-positive timeout; otherwise a typo would only surface later as a mirror
warning on every create.

Layer rule: core/ is the kernel. This module may not import from api/ or inventory/.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("inventory.config")

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"

LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class Settings(BaseSettings):
    """Every field has a default, so Settings() works without a .env file.

    An empty mirror URL disables that mirror.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    log_level: str = "INFO"
    # Locale-formatted registration timestamps are rendered in this zone.
    timezone: str = "America/Sao_Paulo"

    # ------------------------------------------------------------------
    # Stores
    # ------------------------------------------------------------------

    local_db_path: Path = _DATA_DIR / "inventory_local.db"
    table_db_url: str = f"sqlite:///{_DATA_DIR / 'inventory_items.db'}"

    # ------------------------------------------------------------------
    # Mirrors (optional -- empty string means the mirror is disabled)
    # ------------------------------------------------------------------

    sheet_webhook_url: str = ""
    items_api_url: str = ""
    # Insert straight into the items table at TABLE_DB_URL, bypassing the HTTP backend.
    mirror_table: bool = False
    mirror_timeout: float = 10.0

    # ------------------------------------------------------------------
    # HTTP backend
    # ------------------------------------------------------------------

    cors_origins: list[str] = ["http://localhost", "http://localhost:3000", "http://127.0.0.1"]

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    share_message: str = "I want to share the inventory with you.\n\nExcel file: "

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_mirrors(self) -> "Settings":
        """Reject mirror URLs that are not http(s) and non-positive timeouts."""
        for name in ("sheet_webhook_url", "items_api_url"):
            url = getattr(self, name)
            if url and not url.startswith(("http://", "https://")):
                raise ValueError(f"{name.upper()} must be an http:// or https:// URL.")
        if self.mirror_timeout <= 0:
            raise ValueError("MIRROR_TIMEOUT must be greater than zero.")
        if self.debug and not (self.sheet_webhook_url or self.items_api_url or self.mirror_table):
            logger.warning("No mirrors configured -- records will only be stored locally.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide Settings, built on first call.

    Tests that change the environment call get_settings.cache_clear().
    """
    return Settings()
