"""
Service wiring for the study group backend.

Builds the profile store and every service once from an explicit database
handle, and exposes getters for callers such as a web layer or a job.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from common.auth.password_hasher import PasswordHasher
from studygroups import config
from studygroups.config import Settings
from studygroups.database.profile_store import ProfileStore
from studygroups.database.queries import MatchMode
from studygroups.services.aggregation_service import AggregationService
from studygroups.services.group_status_service import GroupStatusService
from studygroups.services.grouping_service import GroupingService
from studygroups.services.meeting_service import MeetingAssignmentHook, MongoMeetingHook
from studygroups.services.session_service import SessionService
from studygroups.services.user_service import UserService


_profile_store: Optional[ProfileStore] = None
_user_service: Optional[UserService] = None
_aggregation_service: Optional[AggregationService] = None
_group_status_service: Optional[GroupStatusService] = None
_grouping_service: Optional[GroupingService] = None
_meeting_hook: Optional[MeetingAssignmentHook] = None
_session_service: Optional[SessionService] = None


def init_services(
    db: AsyncIOMotorDatabase,
    settings: Optional[Settings] = None,
    meeting_hook: Optional[MeetingAssignmentHook] = None,
) -> None:
    """
    Initialize all services with a database connection.

    Called once at application startup.

    Args:
        db: MongoDB database connection
        settings: Application settings; defaults to the module-level settings
        meeting_hook: Meeting assignment implementation; defaults to the
            profile-backed one
    """
    global _profile_store, _user_service, _aggregation_service
    global _group_status_service, _grouping_service, _meeting_hook, _session_service

    settings = settings or config.settings

    _profile_store = ProfileStore(
        db[settings.USERS_COLLECTION],
        timeout=settings.STORE_TIMEOUT_SECONDS,
    )
    _user_service = UserService(
        store=_profile_store,
        password_hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
    )
    _aggregation_service = AggregationService(store=_profile_store)
    _group_status_service = GroupStatusService(store=_profile_store)
    _grouping_service = GroupingService(
        store=_profile_store,
        aggregation_service=_aggregation_service,
        status_service=_group_status_service,
        match_mode=MatchMode(settings.GROUP_MATCH_MODE),
        min_group_size=settings.MIN_GROUP_SIZE,
    )
    _meeting_hook = meeting_hook or MongoMeetingHook(store=_profile_store)
    _session_service = SessionService()


def get_profile_store() -> ProfileStore:
    """Get profile store instance."""
    if _profile_store is None:
        raise RuntimeError("Services not initialized.")
    return _profile_store


def get_user_service() -> UserService:
    """Get user service instance."""
    if _user_service is None:
        raise RuntimeError("Services not initialized.")
    return _user_service


def get_aggregation_service() -> AggregationService:
    """Get aggregation service instance."""
    if _aggregation_service is None:
        raise RuntimeError("Services not initialized.")
    return _aggregation_service


def get_group_status_service() -> GroupStatusService:
    """Get group status service instance."""
    if _group_status_service is None:
        raise RuntimeError("Services not initialized.")
    return _group_status_service


def get_grouping_service() -> GroupingService:
    """Get grouping service instance."""
    if _grouping_service is None:
        raise RuntimeError("Services not initialized.")
    return _grouping_service


def get_meeting_hook() -> MeetingAssignmentHook:
    """Get meeting assignment hook."""
    if _meeting_hook is None:
        raise RuntimeError("Services not initialized.")
    return _meeting_hook


def get_session_service() -> SessionService:
    """Get session service instance."""
    if _session_service is None:
        raise RuntimeError("Services not initialized.")
    return _session_service
