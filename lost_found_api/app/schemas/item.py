"""
Pydantic models for lost and found items.

``ItemCreate`` is what a client posts; everything except ``type`` is
optional and stored as given.  ``ItemRead`` is the stored record as
returned by the API, including the server‑assigned ``status``,
``postedBy`` and ``createdAt``.
"""

from enum import Enum
from typing import Optional

from pydantic import Field

from .base import APIModel


class ItemType(str, Enum):
    lost = "lost"
    found = "found"

    @property
    def opposite(self) -> "ItemType":
        return ItemType.found if self is ItemType.lost else ItemType.lost


class ItemStatus(str, Enum):
    open = "open"
    matched = "matched"
    returned = "returned"


class ItemCreate(APIModel):
    """Schema for posting an item."""

    type: ItemType = Field(..., examples=["lost"])
    name: Optional[str] = Field(None, examples=["Black backpack"])
    category: Optional[str] = Field(None, examples=["bag"])
    color: Optional[str] = Field(None, examples=["black"])
    # Free text as entered by the client, e.g. "2025-03-14" or "last Friday".
    date: Optional[str] = Field(None, examples=["2025-03-14"])
    location: Optional[str] = Field(None, examples=["Library"])
    description: Optional[str] = Field(None, examples=["Laptop sleeve inside, keychain on zipper"])
    image_url: Optional[str] = Field(None, examples=["https://example.com/backpack.jpg"])


class ItemRead(ItemCreate):
    """Schema for reading an item from the API."""

    id: int
    status: ItemStatus = ItemStatus.open
    posted_by: int
    created_at: str
