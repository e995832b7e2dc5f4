"""
Utilities module - Common exceptions and helpers.
"""

from common.utils.exceptions import (
    APIException,
    ValidationException,
    NotFoundException,
    ConflictException,
    PersistenceException,
    AggregationException,
    NotImplementedCapabilityException,
    ValidationError,
    NotFoundError,
    ConflictError,
    PersistenceError,
    AggregationError,
    NotImplementedCapabilityError,
)

__all__ = [
    "APIException",
    "ValidationException",
    "NotFoundException",
    "ConflictException",
    "PersistenceException",
    "AggregationException",
    "NotImplementedCapabilityException",
    # Taxonomy aliases
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "PersistenceError",
    "AggregationError",
    "NotImplementedCapabilityError",
]
