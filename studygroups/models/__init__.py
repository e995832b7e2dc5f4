"""Study group domain models."""

from studygroups.models.person import (
    AvailabilitySignature,
    GroupedStatus,
    Location,
    MeetingRef,
    Person,
    Profile,
    Weekday,
    WEEKDAY_ORDER,
    normalize_availability,
    to_signature,
)

__all__ = [
    "AvailabilitySignature",
    "GroupedStatus",
    "Location",
    "MeetingRef",
    "Person",
    "Profile",
    "Weekday",
    "WEEKDAY_ORDER",
    "normalize_availability",
    "to_signature",
]
