"""User domain service.

Passwords are stored as PBKDF2-SHA256 hashes in the form
``pbkdf2$<iterations>$<salt>$<hash>`` with base64 salt and hash.
"""

import base64
import hmac
import os
from hashlib import pbkdf2_hmac
from typing import Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import User as UserEntity
from ledgerbook.domain.errors import ConflictError, ValidationError, duplicate_username

PBKDF2_ITERATIONS = 310_000


def _b64(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")


def _unb64(s: str) -> bytes:
    return base64.b64decode(s.encode("ascii"))


def hash_password(plain: str, *, iterations: int = PBKDF2_ITERATIONS, salt: bytes | None = None) -> str:
    salt = salt or os.urandom(16)
    dk = pbkdf2_hmac("sha256", plain.encode("utf-8"), salt, iterations)
    return f"pbkdf2${iterations}${_b64(salt)}${_b64(dk)}"


def verify_password(plain: str, stored: str) -> bool:
    try:
        scheme, s_iter, s_salt, s_hash = stored.split("$", 3)
        iterations = int(s_iter)
        salt = _unb64(s_salt)
        expected = _unb64(s_hash)
    except ValueError:
        return False
    if scheme != "pbkdf2":
        return False
    test = pbkdf2_hmac("sha256", plain.encode("utf-8"), salt, iterations)
    return hmac.compare_digest(test, expected)


class UserService:
    """Service for managing users."""

    def __init__(self, db: Database, iterations: int = PBKDF2_ITERATIONS):
        """Initialize user service.

        Args:
            db: Database instance
            iterations: PBKDF2 iteration count for new hashes
        """
        self.db = db
        self.iterations = iterations

    def create_user(self, username: str, password: str) -> int:
        """Create a user.

        Returns:
            User ID

        Raises:
            ValidationError: If username or password is blank
            ConflictError: If username already exists
        """
        username = username.strip()
        if not username:
            raise ValidationError("Username is required")
        if not password:
            raise ValidationError("Password is required")
        if self.db.get_user_by_username(username) is not None:
            raise ConflictError(duplicate_username(username))
        return self.db.create_user(
            username=username,
            password_hash=hash_password(password, iterations=self.iterations),
        )

    def get_user(self, user_id: int) -> Optional[UserEntity]:
        """Get user by ID."""
        return self.db.get_user(user_id)

    def get_user_by_username(self, username: str) -> Optional[UserEntity]:
        """Get user by username."""
        return self.db.get_user_by_username(username)

    def list_users(self) -> list[UserEntity]:
        """List all users."""
        return self.db.list_users()

    def authenticate(self, username: str, password: str) -> Optional[UserEntity]:
        """Return the user when the password matches, otherwise None."""
        user = self.db.get_user_by_username(username)
        if user is None:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user
