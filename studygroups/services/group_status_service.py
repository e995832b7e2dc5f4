"""
Grouped-status transitions.

A person moves from ungrouped to grouped exactly once. The write is a
conditional update on the prior value, so two formation passes racing for
the same person cannot both claim them.
"""

import logging

from common.utils.exceptions import (
    NotFoundException,
    PersistenceException,
    ValidationException,
)
from studygroups.database.profile_store import ProfileStore
from studygroups.database.queries import GROUPED_FIELD, by_id
from studygroups.models.person import GroupedStatus, Person

logger = logging.getLogger(__name__)


class GroupStatusService:
    """
    Flips a person's grouped flag once their group is final.
    """

    def __init__(self, store: ProfileStore):
        self._store = store

    async def try_mark_grouped(self, person_id: str) -> bool:
        """
        Set grouped if the person is currently ungrouped.

        Args:
            person_id: Person to mark

        Returns:
            True if this call made the transition, False if the person was
            already grouped (including by a concurrent pass)

        Raises:
            NotFoundException: No person with this id; nothing is written
        """
        if not person_id:
            raise ValidationException(message="id not specified", code="ID_REQUIRED")

        existing = await self._store.find_one(by_id(person_id))
        if existing is None:
            raise NotFoundException(
                message=f"failed to find user with id: {person_id}",
                code="USER_NOT_FOUND",
            )

        modified = await self._store.update(
            {**by_id(person_id), GROUPED_FIELD: GroupedStatus.UNGROUPED.value},
            {"$set": {GROUPED_FIELD: GroupedStatus.GROUPED.value}},
        )
        if modified == 0:
            if await self._store.find_one(by_id(person_id)) is None:
                raise NotFoundException(
                    message=f"failed to find user with id: {person_id}",
                    code="USER_NOT_FOUND",
                )
            logger.warning(f"User {person_id} was already grouped")
            return False

        logger.info(f"User {person_id} marked as grouped")
        return True

    async def mark_grouped(self, person_id: str) -> Person:
        """
        Set grouped for a person who must currently be ungrouped.

        Returns:
            The updated person

        Raises:
            NotFoundException: No person with this id
            PersistenceException: Person was already grouped
        """
        if not await self.try_mark_grouped(person_id):
            raise PersistenceException(
                message=f"failed to update grouped status for user with id: {person_id}",
                code="ALREADY_GROUPED",
            )

        doc = await self._store.find_one(by_id(person_id))
        if doc is None:
            raise NotFoundException(
                message=f"failed to find user with id: {person_id}",
                code="USER_NOT_FOUND",
            )
        return Person.from_document(doc)
