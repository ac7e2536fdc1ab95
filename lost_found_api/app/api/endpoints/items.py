"""
Item endpoints.

Listing is public; posting an item and asking for matches require a
valid token.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from lost_found_api.app.core.db import Database, get_db
from lost_found_api.app.core.errors import NotFoundError
from lost_found_api.app.core.security import get_current_user
from lost_found_api.app.schemas.item import ItemCreate, ItemRead
from lost_found_api.app.services.item_service import ItemService
from lost_found_api.app.services.match_service import MatchService


router = APIRouter()


@router.post("", response_model=ItemRead)
async def create_item(
    item: ItemCreate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> ItemRead:
    """Post a lost or found item owned by the caller.

    The new item always starts ``open``.
    """
    try:
        return await ItemService.create_item(db, item, current_user["id"])
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("", response_model=List[ItemRead])
async def list_items(db: Database = Depends(get_db)) -> List[ItemRead]:
    """List every item, newest first."""
    return await ItemService.list_items(db)


@router.get("/match/{item_id}", response_model=List[ItemRead])
async def match_item(
    item_id: int,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> List[ItemRead]:
    """Open items of the opposite type sharing category, color,
    location or a word of the item's name.
    """
    try:
        return await MatchService.find_matches(db, item_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
