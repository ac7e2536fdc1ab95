"""
Business logic for users.

``UserService`` is the credential store: it registers users with a
hashed password and authenticates them by email and password.
"""

import logging
import sqlite3
from datetime import datetime, timezone

from starlette.concurrency import run_in_threadpool

from ..core.db import Database
from ..core.errors import DuplicateEntityError, InvalidCredentialsError
from ..core.security import hash_password, verify_password
from ..schemas.user import UserCreate, UserRead

logger = logging.getLogger(__name__)


def _row_to_user(row: sqlite3.Row) -> UserRead:
    return UserRead(id=row["id"], name=row["name"], email=row["email"], role=row["role"])


class UserService:
    """Registration and authentication of campus users."""

    @classmethod
    async def create_user(cls, db: Database, data: UserCreate) -> UserRead:
        """Register a new user.

        Raises ``DuplicateEntityError`` if the email is already taken;
        no second record is written in that case.
        """
        logger.info("Registering user %s", data.email)
        # PBKDF2 is CPU bound; keep it off the event loop.
        hashed = await run_in_threadpool(hash_password, data.password)
        try:
            with db.transaction() as cursor:
                existing = cursor.execute(
                    "SELECT id FROM users WHERE email = ?", (data.email,)
                ).fetchone()
                if existing:
                    raise DuplicateEntityError("User already exists")
                cursor.execute(
                    "INSERT INTO users (name, email, password, role, created_at) VALUES (?, ?, ?, ?, ?)",
                    (
                        data.name,
                        data.email,
                        hashed,
                        data.role.value,
                        datetime.now(timezone.utc).isoformat(),
                    ),
                )
                user_id = cursor.lastrowid
        except sqlite3.IntegrityError as e:
            # Lost a race against a concurrent registration of the same email
            raise DuplicateEntityError("User already exists") from e
        return UserRead(id=user_id, name=data.name, email=data.email, role=data.role)

    @classmethod
    async def authenticate(cls, db: Database, email: str, password: str) -> UserRead:
        """Return the user if the credentials match.

        Unknown email and wrong password raise the same
        ``InvalidCredentialsError`` so callers cannot probe for
        registered addresses.
        """
        row = db.connection.execute(
            "SELECT id, name, email, password, role FROM users WHERE email = ?",
            (email,),
        ).fetchone()
        valid = row is not None and await run_in_threadpool(verify_password, password, row["password"])
        if not valid:
            logger.warning("Failed login for %s", email)
            raise InvalidCredentialsError("Invalid Credentials")
        logger.info("User %s logged in", row["id"])
        return _row_to_user(row)

