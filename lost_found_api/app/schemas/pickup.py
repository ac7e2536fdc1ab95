"""
Pydantic models for pickup (meeting) requests.

A pickup moves forward through ``pending → accepted → completed``;
``accepted`` may be skipped but a status never goes back.  The legal
moves are encoded in ``ALLOWED_TRANSITIONS`` and checked by
``PickupService.update_status``.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional

from pydantic import Field

from .base import APIModel
from .item import ItemRead
from .user import UserSummary


class PickupStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    completed = "completed"


# Writing the current status again is always allowed (idempotent retry).
ALLOWED_TRANSITIONS: Dict[PickupStatus, FrozenSet[PickupStatus]] = {
    PickupStatus.pending: frozenset({PickupStatus.accepted, PickupStatus.completed}),
    PickupStatus.accepted: frozenset({PickupStatus.completed}),
    PickupStatus.completed: frozenset(),
}


class PickupCreate(APIModel):
    """Schema for requesting a pickup meeting."""

    item_id: int = Field(..., examples=[1])
    owner_id: int = Field(..., examples=[2])
    meeting_spot: Optional[str] = Field(None, examples=["Library front desk"])
    meeting_time: Optional[str] = Field(None, examples=["2025-03-15 14:00"])


class PickupStatusUpdate(APIModel):
    status: PickupStatus = Field(..., examples=["accepted"])


class PickupRead(APIModel):
    """Stored pickup with plain reference ids."""

    id: int
    item_id: int
    requester_id: int
    owner_id: int
    status: PickupStatus
    meeting_spot: Optional[str] = None
    meeting_time: Optional[str] = None
    created_at: str


class PickupDetail(APIModel):
    """Pickup with its item and participants expanded.

    The wire names stay ``itemId``/``requesterId``/``ownerId`` but
    carry the referenced records instead of ids.
    """

    id: int
    item_id: Optional[ItemRead] = None
    requester_id: Optional[UserSummary] = None
    owner_id: Optional[UserSummary] = None
    status: PickupStatus
    meeting_spot: Optional[str] = None
    meeting_time: Optional[str] = None
    created_at: str
