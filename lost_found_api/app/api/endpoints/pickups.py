"""
Pickup endpoints.

All routes require a valid token.  The caller is the requester when
creating a pickup; listing returns only pickups the caller takes part
in.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from lost_found_api.app.core.db import Database, get_db
from lost_found_api.app.core.errors import InvalidTransitionError, NotFoundError
from lost_found_api.app.core.security import get_current_user
from lost_found_api.app.schemas.pickup import (
    PickupCreate,
    PickupDetail,
    PickupRead,
    PickupStatusUpdate,
)
from lost_found_api.app.services.pickup_service import PickupService


router = APIRouter()


@router.post("", response_model=PickupRead)
async def create_pickup(
    pickup: PickupCreate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> PickupRead:
    try:
        return await PickupService.create_pickup(db, pickup, current_user["id"])
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("", response_model=List[PickupDetail])
async def list_pickups(
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> List[PickupDetail]:
    """Pickups where the caller is requester or owner, with item and
    participants expanded.
    """
    return await PickupService.list_for_user(db, current_user["id"])


@router.put("/{pickup_id}", response_model=PickupRead)
async def update_pickup_status(
    pickup_id: int,
    body: PickupStatusUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> PickupRead:
    """Advance a pickup (``pending → accepted → completed``).

    Completing a pickup marks its item as ``returned``.  Returns 404
    for an unknown pickup and 409 for a move that reverts a state.
    """
    try:
        return await PickupService.update_status(db, pickup_id, body.status)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
