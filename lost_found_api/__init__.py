"""
Top‑level package for the Campus Lost & Found API.

All functionality lives in submodules under ``app``; import the
application as ``lost_found_api.app.main:app``.
"""

__all__ = []
