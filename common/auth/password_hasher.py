"""
bcrypt password hashing.

Passwords are pre-hashed with SHA-256 so inputs longer than bcrypt's
72-byte limit are not silently truncated.

Example:
    hasher = PasswordHasher(rounds=12)
    hashed = hasher.hash_password("s3cret")
    hasher.verify_password("s3cret", hashed)  # True
"""

import base64
import hashlib

import bcrypt as bcrypt_lib


class PasswordHasher:
    """Hashes and verifies passwords with bcrypt."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    @staticmethod
    def _prehash_password(password: str) -> str:
        sha256_hash = hashlib.sha256(password.encode("utf-8")).digest()
        return base64.b64encode(sha256_hash).decode("utf-8")

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt with SHA-256 pre-hashing."""
        prehashed = self._prehash_password(password)
        salt = bcrypt_lib.gensalt(rounds=self.rounds)
        return bcrypt_lib.hashpw(prehashed.encode("utf-8"), salt).decode("utf-8")

    def verify_password(self, password: str, hashed: str) -> bool:
        """Check a plain password against a stored hash."""
        prehashed = self._prehash_password(password)
        try:
            return bcrypt_lib.checkpw(prehashed.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            return False
