"""Study group services."""

from studygroups.services.aggregation_service import AggregationService
from studygroups.services.group_status_service import GroupStatusService
from studygroups.services.grouping_service import FormationResult, GroupingService
from studygroups.services.meeting_service import (
    MeetingAssignmentHook,
    MongoMeetingHook,
    UnimplementedMeetingHook,
)
from studygroups.services.session_service import SessionService
from studygroups.services.user_service import UserService

__all__ = [
    "AggregationService",
    "GroupStatusService",
    "FormationResult",
    "GroupingService",
    "MeetingAssignmentHook",
    "MongoMeetingHook",
    "UnimplementedMeetingHook",
    "SessionService",
    "UserService",
]
