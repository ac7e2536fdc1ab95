"""
Business logic for lost and found items.

``ItemService`` is the item registry.  Items are created with status
``open`` and listed newest first by their server‑assigned creation
timestamp.  The status column is only changed by
``PickupService.update_status``.
"""

import logging
import sqlite3
from datetime import datetime, timezone
from typing import List

from ..core.db import Database
from ..core.errors import NotFoundError
from ..schemas.item import ItemCreate, ItemRead, ItemStatus

logger = logging.getLogger(__name__)

ITEM_COLUMNS = (
    "id, type, name, category, color, date, location, description, "
    "image_url, status, posted_by, created_at"
)


def row_to_item(row: sqlite3.Row) -> ItemRead:
    return ItemRead(
        id=row["id"],
        type=row["type"],
        name=row["name"],
        category=row["category"],
        color=row["color"],
        date=row["date"],
        location=row["location"],
        description=row["description"],
        image_url=row["image_url"],
        status=row["status"],
        posted_by=row["posted_by"],
        created_at=row["created_at"],
    )


class ItemService:
    """Create, list and fetch item postings."""

    @classmethod
    async def create_item(cls, db: Database, data: ItemCreate, owner_id: int) -> ItemRead:
        """Store a new posting owned by ``owner_id`` and return it.

        Optional attributes are stored exactly as given.  Raises
        ``NotFoundError`` if the owner does not exist.
        """
        created_at = datetime.now(timezone.utc).isoformat()
        with db.transaction() as cursor:
            owner = cursor.execute("SELECT id FROM users WHERE id = ?", (owner_id,)).fetchone()
            if not owner:
                raise NotFoundError("User not found")
            cursor.execute(
                """
                INSERT INTO items (type, name, category, color, date, location,
                                   description, image_url, status, posted_by, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    data.type.value,
                    data.name,
                    data.category,
                    data.color,
                    data.date,
                    data.location,
                    data.description,
                    data.image_url,
                    ItemStatus.open.value,
                    owner_id,
                    created_at,
                ),
            )
            item_id = cursor.lastrowid
        logger.info("User %s posted %s item %s", owner_id, data.type.value, item_id)
        return ItemRead(
            id=item_id,
            status=ItemStatus.open,
            posted_by=owner_id,
            created_at=created_at,
            **data.model_dump(),
        )

    @classmethod
    async def list_items(cls, db: Database) -> List[ItemRead]:
        """Return every item, newest first."""
        rows = db.connection.execute(
            f"SELECT {ITEM_COLUMNS} FROM items ORDER BY created_at DESC, id DESC"
        ).fetchall()
        return [row_to_item(row) for row in rows]

    @classmethod
    async def get_item(cls, db: Database, item_id: int) -> ItemRead:
        """Fetch one item.  Raises ``NotFoundError`` if it does not exist."""
        row = db.connection.execute(
            f"SELECT {ITEM_COLUMNS} FROM items WHERE id = ?", (item_id,)
        ).fetchone()
        if not row:
            raise NotFoundError("Item not found")
        return row_to_item(row)
