"""
HTTP API package.

``router.py`` aggregates the domain routers defined in ``endpoints``;
the application mounts the aggregate under ``/api``.
"""
