"""
Custom HTTP exceptions with error codes.

Extends FastAPI's HTTPException with standardized error codes so that
service-layer failures can be surfaced by any web layer unchanged.

Example:
    from common.utils import NotFoundException

    async def get_user_by_id(user_id: str):
        user = await store.find_one({"_id": user_id})
        if not user:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        return user
"""

from typing import Optional, Any, Dict
from fastapi import HTTPException


class APIException(HTTPException):
    """
    Base API exception with error code support.

    Provides consistent error response format across the API.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        code: Optional[str] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Create an API exception.

        Args:
            status_code: HTTP status code
            message: Human-readable error message
            code: Machine-readable error code
            details: Additional error details
            headers: Optional response headers
        """
        detail: Dict[str, Any] = {"message": message}

        if code:
            detail["code"] = code

        if details is not None:
            detail["details"] = details

        self.message = message
        self.code = code

        super().__init__(
            status_code=status_code,
            detail=detail,
            headers=headers,
        )

    def __str__(self) -> str:
        return self.message


class ValidationException(APIException):
    """422 Validation Error - Required field missing or malformed input."""

    def __init__(
        self,
        message: str = "Validation error",
        code: str = "VALIDATION_ERROR",
        details: Optional[Any] = None,
        errors: Optional[list] = None,
    ):
        detail_info = details
        if errors:
            detail_info = {"errors": errors, **(details or {})}
        super().__init__(422, message, code, detail_info)


class NotFoundException(APIException):
    """404 Not Found - No record matches a required lookup."""

    def __init__(
        self,
        message: str = "Not found",
        code: str = "NOT_FOUND",
        details: Optional[Any] = None,
    ):
        super().__init__(404, message, code, details)


class ConflictException(APIException):
    """409 Conflict - Resource already exists."""

    def __init__(
        self,
        message: str = "Conflict",
        code: str = "CONFLICT",
        details: Optional[Any] = None,
    ):
        super().__init__(409, message, code, details)


class PersistenceException(APIException):
    """500 - A store mutation affected no records, or a store call failed or timed out."""

    def __init__(
        self,
        message: str = "Persistence error",
        code: str = "PERSISTENCE_ERROR",
        details: Optional[Any] = None,
    ):
        super().__init__(500, message, code, details)


class AggregationException(APIException):
    """500 - A grouping query failed outright."""

    def __init__(
        self,
        message: str = "Aggregation error",
        code: str = "AGGREGATION_ERROR",
        details: Optional[Any] = None,
    ):
        super().__init__(500, message, code, details)


class NotImplementedCapabilityException(APIException):
    """501 Not Implemented - Declared capability has no implementation yet."""

    def __init__(
        self,
        message: str = "Not implemented",
        code: str = "NOT_IMPLEMENTED",
        details: Optional[Any] = None,
    ):
        super().__init__(501, message, code, details)


# Taxonomy aliases
ValidationError = ValidationException
NotFoundError = NotFoundException
ConflictError = ConflictException
PersistenceError = PersistenceException
AggregationError = AggregationException
NotImplementedCapabilityError = NotImplementedCapabilityException
