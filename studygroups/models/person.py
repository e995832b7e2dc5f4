"""
Person model for the study group backend.

One document per registered person in the users collection. Availability is
stored deduplicated in Monday-to-Sunday order.
"""

from enum import Enum
from typing import Any, FrozenSet, Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from common.utils.exceptions import PersistenceException


class Weekday(str, Enum):
    """Weekday tokens a person can mark as available."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @classmethod
    def parse(cls, value: Any) -> "Weekday":
        """
        Parse a weekday from its full name or 3-letter abbreviation.

        Matching is case-insensitive: "Mon", "monday" and "MONDAY" all
        resolve to Weekday.MONDAY.

        Raises:
            ValueError: If the value is not a weekday token
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            token = value.strip().lower()
            for day in cls:
                if token in (day.value.lower(), day.value[:3].lower()):
                    return day
        raise ValueError(f"Unknown weekday: {value!r}")


WEEKDAY_ORDER: List[Weekday] = list(Weekday)

AvailabilitySignature = FrozenSet[Weekday]


def normalize_availability(days: Optional[Iterable[Any]]) -> List[Weekday]:
    """Deduplicate weekday tokens and sort them Monday to Sunday."""
    if days is None:
        return []
    if isinstance(days, str):
        days = [days]
    parsed = {Weekday.parse(day) for day in days}
    return sorted(parsed, key=WEEKDAY_ORDER.index)


def to_signature(days: Optional[Iterable[Any]]) -> AvailabilitySignature:
    """Build the order-independent availability signature for a set of days."""
    return frozenset(normalize_availability(days))


class GroupedStatus(str, Enum):
    """
    Whether a person has been placed in a group.

    The only transition is UNGROUPED -> GROUPED; GROUPED is terminal.
    """

    UNGROUPED = "ungrouped"
    GROUPED = "grouped"


class Location(BaseModel):
    """Where a person is, used for zip-code refinement."""

    zipcode: str = Field(..., min_length=1)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    @field_validator("zipcode", mode="before")
    @classmethod
    def _strip_zipcode(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class MeetingRef(BaseModel):
    """Reference to a meeting a person has been assigned to."""

    meeting_id: str = Field(..., alias="meetingId")
    title: str = ""

    model_config = {"populate_by_name": True}


class Profile(BaseModel):
    """Embedded profile block."""

    id: str
    firstname: str = Field(..., min_length=1)
    lastname: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    location: Location
    grouped: GroupedStatus = GroupedStatus.UNGROUPED
    title: str = "student"
    course: List[str] = Field(default_factory=list)
    availability: List[Weekday] = Field(default_factory=list)
    meetings: List[MeetingRef] = Field(default_factory=list)

    @field_validator("availability", mode="before")
    @classmethod
    def _normalize_availability(cls, value: Any) -> List[Weekday]:
        return normalize_availability(value)

    @field_validator("course", mode="before")
    @classmethod
    def _dedupe_courses(cls, value: Any) -> List[Any]:
        if value is None:
            return []
        return list(dict.fromkeys(value))


class Person(BaseModel):
    """
    A registered person.

    Stores login identity, the opaque credential hash, the profile block,
    and session ids reserved for session bookkeeping.
    """

    id: str = Field(..., alias="_id")
    username: str = Field(..., min_length=1)
    hashed_password: str = Field(..., alias="hashedPassword")
    profile: Profile
    valid_session_ids: List[str] = Field(default_factory=list, alias="validSessionIDs")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_document(cls, doc: dict) -> "Person":
        """
        Build a Person from a raw store document.

        Raises:
            PersistenceException: Stored document does not fit the model
        """
        try:
            return cls.model_validate(doc)
        except PydanticValidationError as e:
            doc_id = doc.get("_id") if isinstance(doc, dict) else None
            raise PersistenceException(
                message=f"invalid stored document for user with id: {doc_id} ({e.error_count()} errors)",
                code="INVALID_DOCUMENT",
            ) from e

    def to_document(self) -> dict:
        """Serialize to the persisted document shape."""
        return self.model_dump(by_alias=True, mode="json")

    @property
    def signature(self) -> AvailabilitySignature:
        """Availability as an order-independent signature."""
        return frozenset(self.profile.availability)

    @property
    def is_grouped(self) -> bool:
        return self.profile.grouped is GroupedStatus.GROUPED

    @property
    def full_name(self) -> str:
        return f"{self.profile.firstname} {self.profile.lastname}"
