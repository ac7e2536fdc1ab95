"""
Application package initializer.

The project is organised into layers: ``core`` (configuration,
logging, security, storage, errors), ``schemas`` (pydantic models),
``services`` (business logic per domain) and ``api`` (FastAPI
routers).  ``main`` wires them together.
"""

from .main import app  # noqa: F401
