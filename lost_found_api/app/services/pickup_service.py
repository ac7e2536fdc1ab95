"""
Business logic for pickup meetings.

``PickupService`` coordinates the meeting between the person who
found an item and the person who lost it.  Status changes go through
``validate_transition``; completing a pickup marks the item as
``returned`` in the same transaction as the status change.
"""

import logging
import sqlite3
from datetime import datetime, timezone
from typing import List, Optional

from ..core.db import Database
from ..core.errors import InvalidTransitionError, NotFoundError
from ..schemas.item import ItemStatus
from ..schemas.pickup import (
    ALLOWED_TRANSITIONS,
    PickupCreate,
    PickupDetail,
    PickupRead,
    PickupStatus,
)
from ..schemas.user import UserSummary
from .item_service import ITEM_COLUMNS, row_to_item

logger = logging.getLogger(__name__)

PICKUP_COLUMNS = (
    "id, item_id, requester_id, owner_id, status, meeting_spot, meeting_time, created_at"
)


def validate_transition(current: PickupStatus, new: PickupStatus) -> None:
    """Raise ``InvalidTransitionError`` unless ``current → new`` is allowed."""
    if new == current or new in ALLOWED_TRANSITIONS[current]:
        return
    raise InvalidTransitionError(
        f"Cannot change pickup status from {current.value} to {new.value}"
    )


def _row_to_pickup(row: sqlite3.Row) -> PickupRead:
    return PickupRead(
        id=row["id"],
        item_id=row["item_id"],
        requester_id=row["requester_id"],
        owner_id=row["owner_id"],
        status=row["status"],
        meeting_spot=row["meeting_spot"],
        meeting_time=row["meeting_time"],
        created_at=row["created_at"],
    )


def _user_summary(cursor: sqlite3.Cursor, user_id: int) -> Optional[UserSummary]:
    row = cursor.execute("SELECT id, name FROM users WHERE id = ?", (user_id,)).fetchone()
    return UserSummary(id=row["id"], name=row["name"]) if row else None


class PickupService:
    """Create, list and progress pickup requests."""

    @classmethod
    async def create_pickup(cls, db: Database, data: PickupCreate, requester_id: int) -> PickupRead:
        """Create a ``pending`` pickup requested by ``requester_id``.

        The item and the owner must exist.  Whether the owner actually
        posted the item, or whether the item is still open, is not
        checked.
        """
        created_at = datetime.now(timezone.utc).isoformat()
        with db.transaction() as cursor:
            if not cursor.execute("SELECT id FROM items WHERE id = ?", (data.item_id,)).fetchone():
                raise NotFoundError("Item not found")
            for user_id in (data.owner_id, requester_id):
                if not cursor.execute("SELECT id FROM users WHERE id = ?", (user_id,)).fetchone():
                    raise NotFoundError("User not found")
            cursor.execute(
                """
                INSERT INTO pickups (item_id, requester_id, owner_id, status,
                                     meeting_spot, meeting_time, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    data.item_id,
                    requester_id,
                    data.owner_id,
                    PickupStatus.pending.value,
                    data.meeting_spot,
                    data.meeting_time,
                    created_at,
                ),
            )
            pickup_id = cursor.lastrowid
        logger.info(
            "User %s requested pickup %s for item %s with user %s",
            requester_id, pickup_id, data.item_id, data.owner_id,
        )
        return PickupRead(
            id=pickup_id,
            item_id=data.item_id,
            requester_id=requester_id,
            owner_id=data.owner_id,
            status=PickupStatus.pending,
            meeting_spot=data.meeting_spot,
            meeting_time=data.meeting_time,
            created_at=created_at,
        )

    @classmethod
    async def list_for_user(cls, db: Database, user_id: int) -> List[PickupDetail]:
        """Return the pickups where ``user_id`` is requester or owner.

        The item is expanded to the full record and both participants
        to their display name.
        """
        cursor = db.connection.cursor()
        try:
            rows = cursor.execute(
                f"SELECT {PICKUP_COLUMNS} FROM pickups "
                "WHERE requester_id = ? OR owner_id = ? ORDER BY id",
                (user_id, user_id),
            ).fetchall()
            result = []
            for row in rows:
                item_row = cursor.execute(
                    f"SELECT {ITEM_COLUMNS} FROM items WHERE id = ?", (row["item_id"],)
                ).fetchone()
                result.append(
                    PickupDetail(
                        id=row["id"],
                        item_id=row_to_item(item_row) if item_row else None,
                        requester_id=_user_summary(cursor, row["requester_id"]),
                        owner_id=_user_summary(cursor, row["owner_id"]),
                        status=row["status"],
                        meeting_spot=row["meeting_spot"],
                        meeting_time=row["meeting_time"],
                        created_at=row["created_at"],
                    )
                )
            return result
        finally:
            cursor.close()

    @classmethod
    async def update_status(cls, db: Database, pickup_id: int, status: PickupStatus) -> PickupRead:
        """Move a pickup to ``status``.

        Raises ``NotFoundError`` for an unknown pickup and
        ``InvalidTransitionError`` for a move the state machine does
        not allow.  When ``status`` is ``completed`` the item is marked
        ``returned``; both writes commit or roll back together.
        """
        with db.transaction() as cursor:
            row = cursor.execute(
                f"SELECT {PICKUP_COLUMNS} FROM pickups WHERE id = ?", (pickup_id,)
            ).fetchone()
            if not row:
                raise NotFoundError("Pickup not found")
            current = PickupStatus(row["status"])
            validate_transition(current, status)
            cursor.execute(
                "UPDATE pickups SET status = ? WHERE id = ?", (status.value, pickup_id)
            )
            if status is PickupStatus.completed:
                cursor.execute(
                    "UPDATE items SET status = ? WHERE id = ?",
                    (ItemStatus.returned.value, row["item_id"]),
                )
        logger.info("Pickup %s: %s -> %s", pickup_id, current.value, status.value)
        pickup = _row_to_pickup(row)
        return pickup.model_copy(update={"status": status})
