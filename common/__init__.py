"""
Common library for reusable infrastructure components.

- database: Async MongoDB connection manager
- auth: Password hashing
- utils: Standard exceptions
- config: Base settings class
"""

from common.database import MongoDB
from common.auth import PasswordHasher
from common.utils import (
    APIException,
    ValidationException,
    NotFoundException,
    ConflictException,
    PersistenceException,
    AggregationException,
    NotImplementedCapabilityException,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    # Auth
    "PasswordHasher",
    # Utils
    "APIException",
    "ValidationException",
    "NotFoundException",
    "ConflictException",
    "PersistenceException",
    "AggregationException",
    "NotImplementedCapabilityException",
    # Config
    "BaseAppSettings",
]
