"""
Profile store adapter.

Wraps the Motor users collection behind the handful of operations the
services need. Every call is bounded by a timeout, and driver errors are
translated into the application's error taxonomy before they leave this
module.
"""

import asyncio
import logging
from typing import Any, Awaitable, Dict, List, Optional, Type

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from common.utils.exceptions import (
    APIException,
    AggregationException,
    ConflictException,
    PersistenceException,
)
from studygroups.database.queries import (
    AVAILABILITY_FIELD,
    GROUPED_FIELD,
    ZIPCODE_FIELD,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


class ProfileStore:
    """
    Store interface over the users collection.

    Mutations report how many records they touched; interpreting a zero
    count is left to the caller.
    """

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """
        Initialize ProfileStore.

        Args:
            collection: Motor collection holding Person documents
            timeout: Upper bound in seconds for each store call
        """
        self._collection = collection
        self._timeout = timeout

    async def _call(
        self,
        operation: str,
        awaitable: Awaitable[Any],
        error_cls: Type[APIException] = PersistenceException,
    ) -> Any:
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.error(f"Store {operation} timed out after {self._timeout}s")
            raise error_cls(
                message=f"Store {operation} timed out after {self._timeout}s",
                code="STORE_TIMEOUT",
            )
        except DuplicateKeyError as e:
            logger.warning(f"Store {operation} rejected duplicate key: {e}")
            raise ConflictException(
                message="Record with the same unique key already exists",
                code="DUPLICATE_KEY",
            )
        except PyMongoError as e:
            logger.error(f"Store {operation} failed: {e}")
            raise error_cls(
                message=f"Store {operation} failed: {e}",
                code="STORE_UNAVAILABLE",
            )

    async def ensure_indexes(self) -> None:
        """Create the indexes the group-formation queries rely on."""
        await self._call(
            "create_index",
            self._collection.create_index([("username", ASCENDING)], unique=True),
        )
        for field in (GROUPED_FIELD, AVAILABILITY_FIELD, ZIPCODE_FIELD):
            await self._call(
                "create_index",
                self._collection.create_index([(field, ASCENDING)]),
            )
        logger.info("Profile store indexes ensured")

    async def find_one(self, predicate: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Return the first matching document, or None."""
        logger.debug(f"find_one: {predicate}")
        return await self._call("find_one", self._collection.find_one(predicate))

    async def find(self, predicate: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Return every matching document in store iteration order."""
        logger.debug(f"find: {predicate}")
        cursor = self._collection.find(predicate)
        return await self._call("find", cursor.to_list(length=None))

    async def insert(self, document: Dict[str, Any]) -> int:
        """Insert a document. Returns the number inserted."""
        result = await self._call("insert", self._collection.insert_one(document))
        return 1 if result.inserted_id is not None else 0

    async def update(self, predicate: Dict[str, Any], mutation: Dict[str, Any]) -> int:
        """Apply a mutation to the first matching document. Returns modified count."""
        logger.debug(f"update: {predicate} -> {mutation}")
        result = await self._call("update", self._collection.update_one(predicate, mutation))
        return result.modified_count

    async def remove(self, predicate: Dict[str, Any]) -> int:
        """Delete the first matching document. Returns deleted count."""
        result = await self._call("remove", self._collection.delete_one(predicate))
        return result.deleted_count

    async def group_by(self, pre_filter: Dict[str, Any], key: str) -> List[Any]:
        """
        Distinct values of a field among documents matching a filter.

        Args:
            pre_filter: Filter applied before grouping
            key: Dotted field path to group on

        Returns:
            One entry per distinct value, in the order the store emits them
        """
        pipeline = [
            {"$match": pre_filter},
            {"$group": {"_id": f"${key}"}},
        ]
        logger.debug(f"group_by: {pipeline}")
        cursor = self._collection.aggregate(pipeline)
        docs = await self._call(
            "group_by", cursor.to_list(length=None), error_cls=AggregationException
        )
        return [doc["_id"] for doc in docs]
