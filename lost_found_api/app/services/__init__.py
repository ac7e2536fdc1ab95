"""
Service layer.

Each service encapsulates the business logic of one domain (users,
items, matches, pickups).  Services receive the ``Database`` handle
explicitly, raise the errors defined in ``core.errors`` and know
nothing about HTTP.
"""
