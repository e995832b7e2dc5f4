"""
User service for person registration and profile management.

Handles registration, lookups, profile edits, course and availability
changes, and removal.
"""

import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from common.auth.password_hasher import PasswordHasher
from common.utils.exceptions import (
    ConflictException,
    NotFoundException,
    PersistenceException,
    ValidationException,
)
from studygroups.database.profile_store import ProfileStore
from studygroups.database.queries import (
    AVAILABILITY_FIELD,
    COURSE_FIELD,
    ZIPCODE_FIELD,
    MatchMode,
    availability_filter,
    by_id,
    ungrouped_filter,
)
from studygroups.models.person import (
    Location,
    Person,
    Profile,
    Weekday,
    normalize_availability,
    to_signature,
)

logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _error_messages(error: PydanticValidationError) -> List[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in error.errors()
    ]


class UserService:
    """
    Manages registered people and their profiles.
    """

    REQUIRED_REGISTRATION_FIELDS = (
        "username",
        "password",
        "firstname",
        "lastname",
        "email",
        "phone",
    )

    def __init__(self, store: ProfileStore, password_hasher: PasswordHasher):
        """
        Initialize UserService.

        Args:
            store: Profile store holding Person documents
            password_hasher: Produces the stored credential hash
        """
        self._store = store
        self._password_hasher = password_hasher

    # ─────────────────────────────────────────────────────────────────
    # Registration
    # ─────────────────────────────────────────────────────────────────

    async def create_user(
        self,
        username: str,
        password: str,
        firstname: str,
        lastname: str,
        email: str,
        phone: str,
        zipcode: str,
        latitude: Any,
        longitude: Any,
        availability: Optional[Iterable[str]] = None,
    ) -> Person:
        """
        Register a new person.

        Args:
            username: Unique login name
            password: Plain password, stored only as a bcrypt hash
            firstname, lastname, email, phone: Required profile fields
            zipcode, latitude, longitude: Location; all three required
            availability: Weekday tokens; None means no availability yet

        Returns:
            The stored Person

        Raises:
            ValidationException: Missing field, invalid location or weekday
            ConflictException: Username already exists; nothing is inserted
        """
        provided = {
            "username": username,
            "password": password,
            "firstname": firstname,
            "lastname": lastname,
            "email": email,
            "phone": phone,
        }
        for field_name in self.REQUIRED_REGISTRATION_FIELDS:
            if _is_blank(provided[field_name]):
                raise ValidationException(
                    message=f"Registration failed: {field_name} not provided",
                    code="MISSING_FIELD",
                    details={"field": field_name},
                )

        location = self._build_location(zipcode, latitude, longitude)

        try:
            days = normalize_availability(availability)
        except ValueError as e:
            raise ValidationException(
                message=f"Registration failed: {e}",
                code="INVALID_AVAILABILITY",
            )

        existing = await self._store.find_one({"username": username})
        if existing:
            raise ConflictException(
                message="Registration failed: Username already exists",
                code="USERNAME_TAKEN",
            )

        user_id = str(uuid.uuid4())
        try:
            person = Person(
                id=user_id,
                username=username,
                hashed_password=self._password_hasher.hash_password(password),
                profile=Profile(
                    id=user_id,
                    firstname=firstname,
                    lastname=lastname,
                    email=email,
                    phone=phone,
                    location=location,
                    availability=days,
                ),
            )
        except PydanticValidationError as e:
            raise ValidationException(
                message="Registration failed: invalid profile",
                code="INVALID_PROFILE",
                errors=_error_messages(e),
            )

        inserted = await self._store.insert(person.to_document())
        if inserted == 0:
            raise PersistenceException(
                message="failed to add new user",
                code="INSERT_FAILED",
            )

        logger.info(f"User created: {user_id}")
        return await self.get_user_by_id(user_id)

    def _build_location(self, zipcode: Any, latitude: Any, longitude: Any) -> Location:
        if _is_blank(zipcode) or _is_blank(latitude) or _is_blank(longitude):
            raise ValidationException(
                message="Registration failed: Invalid zip code",
                code="INVALID_LOCATION",
            )
        try:
            return Location(zipcode=zipcode, latitude=latitude, longitude=longitude)
        except PydanticValidationError as e:
            raise ValidationException(
                message="Registration failed: Invalid zip code",
                code="INVALID_LOCATION",
                errors=_error_messages(e),
            )

    # ─────────────────────────────────────────────────────────────────
    # Lookups
    # ─────────────────────────────────────────────────────────────────

    async def _find_people(self, predicate: Dict[str, Any]) -> List[Person]:
        docs = await self._store.find(predicate)
        return [Person.from_document(doc) for doc in docs]

    async def get_users(self) -> List[Person]:
        """All registered people."""
        return await self._find_people({})

    async def get_user_by_id(self, user_id: str) -> Person:
        """
        Load a person by id.

        Raises:
            NotFoundException: No person with this id
        """
        if not user_id:
            raise ValidationException(message="id not specified", code="ID_REQUIRED")

        doc = await self._store.find_one(by_id(user_id))
        if doc is None:
            raise NotFoundException(
                message=f"failed to find user with id: {user_id}",
                code="USER_NOT_FOUND",
            )
        return Person.from_document(doc)

    async def get_user_by_username(self, username: str) -> Person:
        """
        Load a person by login name.

        Raises:
            NotFoundException: No person with this username
        """
        if not username:
            raise ValidationException(message="username not specified", code="USERNAME_REQUIRED")

        doc = await self._store.find_one({"username": username})
        if doc is None:
            raise NotFoundException(
                message="Failed to find user with that username",
                code="USER_NOT_FOUND",
            )
        return Person.from_document(doc)

    async def get_users_by_zip(self, zipcode: str) -> List[Person]:
        if not zipcode:
            raise ValidationException(message="zip code not specified", code="ZIPCODE_REQUIRED")
        return await self._find_people({ZIPCODE_FIELD: zipcode})

    async def get_ungrouped_users(self) -> List[Person]:
        return await self._find_people(ungrouped_filter())

    async def get_users_by_day(self, day: str) -> List[Person]:
        """People available on a given weekday."""
        weekday = self._parse_day(day)
        return await self._find_people({AVAILABILITY_FIELD: weekday.value})

    async def get_users_by_availability(
        self,
        days: Iterable[str],
        mode: MatchMode = MatchMode.SUPERSET,
    ) -> List[Person]:
        """
        People whose availability covers the given days.

        With MatchMode.EXACT, only people available on exactly those days.
        """
        if days is None:
            raise ValidationException(message="availability not specified", code="AVAILABILITY_REQUIRED")
        try:
            signature = to_signature(days)
        except ValueError as e:
            raise ValidationException(message=str(e), code="INVALID_AVAILABILITY")
        return await self._find_people(availability_filter(signature, mode))

    # ─────────────────────────────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────────────────────────────

    async def remove(self, user_id: str) -> Dict[str, Any]:
        """
        Delete a person.

        Returns:
            {"deleted": True, "data": <Person as it was before deletion>}
        """
        person = await self.get_user_by_id(user_id)

        deleted = await self._store.remove(by_id(user_id))
        if deleted == 0:
            raise PersistenceException(
                message=f"failed to remove user with id: {user_id}",
                code="DELETE_FAILED",
            )

        logger.info(f"User removed: {user_id}")
        return {"deleted": True, "data": person}

    async def update_user(
        self,
        user_id: str,
        firstname: Optional[str] = None,
        lastname: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        zipcode: Optional[str] = None,
    ) -> Person:
        """
        Update profile fields. Blank arguments keep the current value.

        Raises:
            NotFoundException: Unknown person
            PersistenceException: Nothing changed
        """
        await self.get_user_by_id(user_id)

        changes = {
            "profile.firstname": firstname,
            "profile.lastname": lastname,
            "profile.email": email,
            "profile.phone": phone,
            ZIPCODE_FIELD: zipcode.strip() if isinstance(zipcode, str) else zipcode,
        }
        updates = {path: value for path, value in changes.items() if not _is_blank(value)}

        if not updates:
            raise PersistenceException(
                message=f"failed to update user with id: {user_id}",
                code="NOTHING_TO_UPDATE",
            )

        await self._apply(user_id, {"$set": updates}, "failed to update user")
        logger.info(f"Profile updated for user {user_id}: {sorted(updates)}")
        return await self.get_user_by_id(user_id)

    async def add_course_to_user(self, user_id: str, course_id: str) -> Person:
        await self.get_user_by_id(user_id)
        await self._apply(
            user_id,
            {"$addToSet": {COURSE_FIELD: course_id}},
            "failed to update course to user",
        )
        return await self.get_user_by_id(user_id)

    async def remove_course_from_user(self, user_id: str, course_id: str) -> Person:
        await self.get_user_by_id(user_id)
        await self._apply(
            user_id,
            {"$pull": {COURSE_FIELD: course_id}},
            "failed to remove course from user",
        )
        return await self.get_user_by_id(user_id)

    async def add_availability_to_user(self, user_id: str, day: str) -> Person:
        """
        Add a weekday to a person's availability.

        The whole array is rewritten in canonical order, conditional on it
        not having changed since it was read.
        """
        weekday = self._parse_day(day)
        person = await self.get_user_by_id(user_id)

        current = [d.value for d in person.profile.availability]
        updated = [d.value for d in normalize_availability(current + [weekday.value])]

        modified = await self._store.update(
            {**by_id(user_id), AVAILABILITY_FIELD: current},
            {"$set": {AVAILABILITY_FIELD: updated}},
        )
        if modified == 0:
            raise PersistenceException(
                message=f"failed to update availability for user with id: {user_id}",
                code="UPDATE_FAILED",
            )

        logger.info(f"Added {weekday.value} to availability of user {user_id}")
        return await self.get_user_by_id(user_id)

    async def remove_availability_from_user(self, user_id: str, day: str) -> Person:
        weekday = self._parse_day(day)
        await self.get_user_by_id(user_id)
        await self._apply(
            user_id,
            {"$pull": {AVAILABILITY_FIELD: weekday.value}},
            "failed to update availability for user",
        )
        logger.info(f"Removed {weekday.value} from availability of user {user_id}")
        return await self.get_user_by_id(user_id)

    # ─────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────

    async def _apply(self, user_id: str, mutation: Dict[str, Any], failure: str) -> None:
        modified = await self._store.update(by_id(user_id), mutation)
        if modified == 0:
            raise PersistenceException(
                message=f"{failure} with id: {user_id}",
                code="UPDATE_FAILED",
            )

    @staticmethod
    def _parse_day(day: str) -> Weekday:
        if not day:
            raise ValidationException(message="day not specified", code="DAY_REQUIRED")
        try:
            return Weekday.parse(day)
        except ValueError as e:
            raise ValidationException(message=str(e), code="INVALID_AVAILABILITY")
