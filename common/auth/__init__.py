"""
Auth module - Password hashing.
"""

from common.auth.password_hasher import PasswordHasher

__all__ = ["PasswordHasher"]
