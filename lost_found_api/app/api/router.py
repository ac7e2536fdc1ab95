"""
Top‑level API router.

Aggregates the domain routers.  The application includes this router
under the ``/api`` prefix, giving ``/api/auth``, ``/api/items`` and
``/api/pickup``.
"""

from fastapi import APIRouter

from .endpoints import auth, items, pickups

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(items.router, prefix="/items", tags=["items"])
# Singular on purpose: existing clients call /api/pickup.
router.include_router(pickups.router, prefix="/pickup", tags=["pickup"])
