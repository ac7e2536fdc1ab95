"""
Pydantic schema definitions for API payloads.

Each domain (users, items, pickups) defines its own Pydantic models
for request and response bodies.  Schemas are separated from the
storage layer to decouple API representation from persistence.

Field names are snake_case in Python and camelCase on the wire
(``imageUrl``, ``postedBy``, ``meetingSpot`` ...).  Requests may use
either spelling.
"""
