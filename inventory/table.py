"""
inventory/table.py -- SQLAlchemy-backed server-side items table.

Uses SQLAlchemy Core (not ORM) so the dataclasses in inventory/models.py remain
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change, not a rewrite.

Pattern: Repository + Data Mapper. RemoteTable is the repository; _row_to_item
is the mapper. Route handlers never touch SQL directly.

Uniqueness: serial_number and asset_tag each carry a UNIQUE constraint, so two
concurrent inserts cannot both succeed. When an insert violates one, the
IntegrityError is classified by looking up the conflicting rows, which gives
the three-way DuplicateAsset (serial only, tag only, both) without a racy
check-before-insert.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    table = RemoteTable()                               # SQLite default
    table = RemoteTable("postgresql://user:pw@host/db") # PostgreSQL
    item = table.insert(TableItem(...))
    items = table.list_all()
    table.close()
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Column,
    Integer,
    MetaData,
    String,
    Table,
    UniqueConstraint,
    create_engine,
    event,
    or_,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.config import get_settings
from core.errors import DuplicateAsset, RemoteTableError, classify_duplicate
from inventory.models import TableItem

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_items = Table(
    "items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("brand", String(255), nullable=False),
    Column("serial_number", String(255), nullable=False),
    Column("asset_tag", String(64), nullable=False),
    Column("model", String(100), nullable=False),
    Column("ram", String(100), nullable=False),
    Column("processor", String(255), nullable=False),
    Column("motherboard", String(255), nullable=False),
    Column("storage", String(255), nullable=False),
    Column("location", String(255), nullable=False),
    Column("created_at", String(32), nullable=False),
    UniqueConstraint("serial_number", name="uq_items_serial_number"),
    UniqueConstraint("asset_tag", name="uq_items_asset_tag"),
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class RemoteTable:
    def __init__(self, db_url: Optional[str] = None) -> None:
        db_url = db_url or get_settings().table_db_url
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            # FastAPI runs sync route handlers in a thread pool, so the same
            # connection may be used from several threads.
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    def insert(self, item: TableItem) -> TableItem:
        """Insert a new row and return it as stored.

        Raises DuplicateAsset when serial_number and/or asset_tag is taken, and
        RemoteTableError for any other database failure.
        """
        with self.engine.connect() as conn:
            try:
                result = conn.execute(
                    _items.insert().values(
                        brand=item.brand,
                        serial_number=item.serial_number,
                        asset_tag=item.asset_tag,
                        model=item.model,
                        ram=item.ram,
                        processor=item.processor,
                        motherboard=item.motherboard,
                        storage=item.storage,
                        location=item.location,
                        created_at=_now_iso(),
                    )
                )
                conn.commit()
            except IntegrityError as e:
                conn.rollback()
                try:
                    kind = self._classify_conflict(conn, item)
                except SQLAlchemyError as lookup_error:
                    raise RemoteTableError(f"Error adding item: {lookup_error}") from e
                if kind is None:
                    # Constraint other than the two unique keys (e.g. NOT NULL).
                    raise RemoteTableError(f"Error adding item: {e.orig}") from e
                raise DuplicateAsset(kind) from e
            except SQLAlchemyError as e:
                raise RemoteTableError(f"Error adding item: {e}") from e
            item_id = result.inserted_primary_key[0]
        created = self.get(item_id)
        if created is None:
            raise RemoteTableError(f"Inserted item {item_id} could not be read back.")
        return created

    def _classify_conflict(self, conn, item: TableItem):
        rows = conn.execute(
            _items.select().where(
                or_(
                    _items.c.serial_number == item.serial_number,
                    _items.c.asset_tag == item.asset_tag,
                )
            )
        ).fetchall()
        return classify_duplicate(
            serial_taken=any(r.serial_number == item.serial_number for r in rows),
            tag_taken=any(r.asset_tag == item.asset_tag for r in rows),
        )

    def get(self, item_id: int) -> Optional[TableItem]:
        """Fetch a single row by ID. Returns None if not found."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(_items.select().where(_items.c.id == item_id)).fetchone()
        except SQLAlchemyError as e:
            raise RemoteTableError(f"Error fetching item {item_id}: {e}") from e
        return _row_to_item(row) if row is not None else None

    def list_all(self) -> list[TableItem]:
        """Return every row in insertion order."""
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(_items.select().order_by(_items.c.id)).fetchall()
        except SQLAlchemyError as e:
            raise RemoteTableError(f"Error fetching items: {e}") from e
        return [_row_to_item(r) for r in rows]

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(_items.select().limit(1))
        except SQLAlchemyError:
            return False
        return True

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern -- DB row -> domain dataclass)
# ---------------------------------------------------------------------------


def _row_to_item(row) -> TableItem:
    return TableItem(
        id=row.id,
        brand=row.brand,
        serial_number=row.serial_number,
        asset_tag=row.asset_tag,
        model=row.model,
        ram=row.ram,
        processor=row.processor,
        motherboard=row.motherboard,
        storage=row.storage,
        location=row.location,
        created_at=row.created_at,
    )
