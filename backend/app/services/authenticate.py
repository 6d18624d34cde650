"""Credential Check — email/password login against bcrypt hashes in the users table.

Invariants:
    - authenticate returns the user (without the hash) or None; bad input, unknown
      email, wrong password and unreadable hashes all look the same to the caller
    - get_user uses one pooled connection, released on every exit path (store.connect)
    - Store failures are not credential failures: they surface as PersistenceError
    - Plain passwords are never logged

Design Decisions:
    - bcrypt.checkpw runs in a worker thread: hashing is deliberately slow and would
      otherwise stall the event loop
    - Session issuance is out of scope; callers decide what a successful check grants
"""

import asyncio
import logging
from dataclasses import dataclass

import bcrypt
from pydantic import ValidationError

from app.core.domain_types import UserId
from app.core.errors import PersistenceError
from app.core.repository_protocols import Store
from app.infrastructure.observability import log_context
from app.schemas.credentials import Credentials

logger = logging.getLogger(__name__)

FETCH_USER_BY_EMAIL = "SELECT id, name, email, password FROM users WHERE email = :email"


@dataclass(frozen=True)
class AuthenticatedUser:
    id: UserId
    name: str
    email: str


def hash_password(password: str) -> str:
    """bcrypt hash suitable for the users.password column."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def _password_matches(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


class Authenticator:
    def __init__(self, store: Store):
        self.store = store

    async def get_user(self, email: str) -> dict | None:
        """Full users row for `email`, or None."""
        try:
            async with self.store.connect("get_user") as conn:
                result = await conn.query(FETCH_USER_BY_EMAIL, {"email": email})
        except PersistenceError as e:
            e.context.user_message = "Failed to fetch user."
            logger.error(
                f"Failed to fetch user: {e.message}",
                extra=log_context("get_user", error_code=e.code),
            )
            raise
        return result.rows[0] if result.rows else None

    async def authenticate(self, email: str, password: str) -> AuthenticatedUser | None:
        try:
            credentials = Credentials(email=email, password=password)
        except ValidationError:
            logger.info("Invalid credentials")
            return None

        user = await self.get_user(credentials.email)
        if user is None or not await asyncio.to_thread(
            _password_matches, credentials.password, user["password"],
        ):
            logger.info("Invalid credentials")
            return None
        return AuthenticatedUser(
            id=UserId(user["id"]), name=user["name"], email=user["email"],
        )
