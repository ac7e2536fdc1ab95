"""
Pydantic models for user data.

Defines schemas for registering, logging in and reading users.  The
password hash never leaves the service layer, so no read schema
carries a password field.
"""

from enum import Enum
from typing import Optional

from pydantic import Field

from .base import APIModel


class Role(str, Enum):
    student = "student"
    staff = "staff"
    admin = "admin"


class UserCreate(APIModel):
    """Schema for registering a user."""

    name: Optional[str] = Field(None, examples=["Ada Lovelace"])
    email: str = Field(..., examples=["ada@campus.edu"])
    password: str = Field(..., examples=["correct horse battery staple"])
    role: Role = Field(Role.student, examples=["student"])


class UserLogin(APIModel):
    email: str = Field(..., examples=["ada@campus.edu"])
    password: str


class UserRead(APIModel):
    """Public view of a user, as returned after register/login."""

    id: int
    name: Optional[str] = None
    email: str
    role: Role


class UserSummary(APIModel):
    """Display‑name‑only view used when expanding pickup participants."""

    id: int
    name: Optional[str] = None


class AuthResponse(APIModel):
    token: str
    user: UserRead
