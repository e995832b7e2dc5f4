"""
Query builders for the users collection.

Keeps the persisted field paths in one place so services never spell them
out by hand.
"""

from enum import Enum
from typing import Any, Dict

from studygroups.models.person import (
    AvailabilitySignature,
    GroupedStatus,
    WEEKDAY_ORDER,
)

GROUPED_FIELD = "profile.grouped"
AVAILABILITY_FIELD = "profile.availability"
ZIPCODE_FIELD = "profile.location.zipcode"
COURSE_FIELD = "profile.course"
MEETINGS_FIELD = "profile.meetings"


class MatchMode(str, Enum):
    """How a person's availability is compared with a signature."""

    EXACT = "exact"
    SUPERSET = "superset"


def by_id(person_id: str) -> Dict[str, Any]:
    return {"_id": person_id}


def ungrouped_filter() -> Dict[str, Any]:
    return {GROUPED_FIELD: GroupedStatus.UNGROUPED.value}


def signature_values(signature: AvailabilitySignature) -> list:
    """Signature as stored values, in canonical weekday order."""
    return [day.value for day in sorted(signature, key=WEEKDAY_ORDER.index)]


def availability_filter(
    signature: AvailabilitySignature,
    mode: MatchMode = MatchMode.EXACT,
) -> Dict[str, Any]:
    """
    Match availability against a signature.

    EXACT is set equality: the array holds every day of the signature and no
    other day, in any order and regardless of repeated entries.
    """
    values = signature_values(signature)
    if mode is MatchMode.SUPERSET:
        return {AVAILABILITY_FIELD: {"$all": values}}
    return {
        AVAILABILITY_FIELD: {
            "$all": values,
            "$not": {"$elemMatch": {"$nin": values}},
        }
    }


def ungrouped_availability_filter(
    signature: AvailabilitySignature,
    mode: MatchMode = MatchMode.EXACT,
) -> Dict[str, Any]:
    return {**ungrouped_filter(), **availability_filter(signature, mode)}
