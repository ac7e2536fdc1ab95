"""
Endpoint modules.

Each module defines an APIRouter for one domain (auth, items,
pickups).  The routers are aggregated in ``api/router.py``.
"""
