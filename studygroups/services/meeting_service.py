"""
Meeting assignment.

Attaches and detaches meeting references on a person once a group's
meeting time and place have been decided elsewhere.
"""

import logging
from abc import ABC, abstractmethod

from common.utils.exceptions import NotFoundException, NotImplementedCapabilityException
from studygroups.database.profile_store import ProfileStore
from studygroups.database.queries import MEETINGS_FIELD, by_id

logger = logging.getLogger(__name__)


class MeetingAssignmentHook(ABC):
    """
    Contract a scheduler uses to record meetings on people.

    attach_meeting is idempotent per meeting id; detach_meeting of an absent
    meeting id is a no-op. Both return whether the meeting list changed.
    """

    @abstractmethod
    async def attach_meeting(self, person_id: str, meeting_id: str, meeting_title: str) -> bool:
        pass

    @abstractmethod
    async def detach_meeting(self, person_id: str, meeting_id: str) -> bool:
        pass


class UnimplementedMeetingHook(MeetingAssignmentHook):
    """Placeholder that refuses every call, so no caller mistakes it for success."""

    async def attach_meeting(self, person_id: str, meeting_id: str, meeting_title: str) -> bool:
        raise NotImplementedCapabilityException(
            message="Meeting assignment is not implemented",
            code="MEETING_ASSIGNMENT_NOT_IMPLEMENTED",
        )

    async def detach_meeting(self, person_id: str, meeting_id: str) -> bool:
        raise NotImplementedCapabilityException(
            message="Meeting assignment is not implemented",
            code="MEETING_ASSIGNMENT_NOT_IMPLEMENTED",
        )


class MongoMeetingHook(MeetingAssignmentHook):
    """
    Stores meeting references in the person's profile.meetings array.
    """

    def __init__(self, store: ProfileStore):
        self._store = store

    async def _require_person(self, person_id: str) -> None:
        if await self._store.find_one(by_id(person_id)) is None:
            raise NotFoundException(
                message=f"failed to find user with id: {person_id}",
                code="USER_NOT_FOUND",
            )

    async def attach_meeting(self, person_id: str, meeting_id: str, meeting_title: str) -> bool:
        """
        Append a meeting unless one with the same id is already attached.

        Raises:
            NotFoundException: Unknown person
        """
        await self._require_person(person_id)

        modified = await self._store.update(
            {**by_id(person_id), f"{MEETINGS_FIELD}.meetingId": {"$ne": meeting_id}},
            {"$push": {MEETINGS_FIELD: {"meetingId": meeting_id, "title": meeting_title}}},
        )
        if modified == 0:
            logger.debug(f"Meeting {meeting_id} already attached to user {person_id}")
            return False

        logger.info(f"Attached meeting {meeting_id} to user {person_id}")
        return True

    async def detach_meeting(self, person_id: str, meeting_id: str) -> bool:
        """
        Remove a meeting by id.

        Raises:
            NotFoundException: Unknown person
        """
        await self._require_person(person_id)

        modified = await self._store.update(
            by_id(person_id),
            {"$pull": {MEETINGS_FIELD: {"meetingId": meeting_id}}},
        )
        if modified == 0:
            logger.debug(f"Meeting {meeting_id} was not attached to user {person_id}")
            return False

        logger.info(f"Detached meeting {meeting_id} from user {person_id}")
        return True
