"""Shared test fixtures for study group backend tests."""

import copy
import uuid

import pytest
from unittest.mock import AsyncMock, MagicMock

from studygroups.models.person import normalize_availability


# ─────────────────────────────────────────────────────────────────
# In-memory profile store
# ─────────────────────────────────────────────────────────────────

_MISSING = object()


def _resolve(doc, path):
    parts = path.split(".")
    value = doc
    for i, part in enumerate(parts):
        if isinstance(value, list):
            rest = ".".join(parts[i:])
            found = [_resolve(item, rest) for item in value if isinstance(item, dict)]
            return [v for v in found if v is not _MISSING]
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _matches_condition(value, condition):
    if isinstance(condition, dict) and any(key.startswith("$") for key in condition):
        for op, arg in condition.items():
            if op == "$all":
                if not isinstance(value, list) or not all(a in value for a in arg):
                    return False
            elif op == "$size":
                if not isinstance(value, list) or len(value) != arg:
                    return False
            elif op == "$nin":
                if isinstance(value, list):
                    if any(v in arg for v in value):
                        return False
                elif value in arg:
                    return False
            elif op == "$elemMatch":
                if not isinstance(value, list) or not any(_matches_condition(v, arg) for v in value):
                    return False
            elif op == "$not":
                if _matches_condition(value, arg):
                    return False
            elif op == "$ne":
                if isinstance(value, list):
                    if arg in value:
                        return False
                elif value == arg:
                    return False
            else:
                raise NotImplementedError(op)
        return True
    if value is _MISSING:
        return False
    if isinstance(value, list) and not isinstance(condition, list):
        return condition in value
    return value == condition


def _matches(doc, predicate):
    return all(
        _matches_condition(_resolve(doc, path), condition)
        for path, condition in predicate.items()
    )


def _container(doc, path):
    parts = path.split(".")
    target = doc
    for part in parts[:-1]:
        target = target.setdefault(part, {})
    return target, parts[-1]


def _apply(doc, mutation):
    before = copy.deepcopy(doc)
    for op, fields in mutation.items():
        for path, arg in fields.items():
            target, key = _container(doc, path)
            if op == "$set":
                target[key] = copy.deepcopy(arg)
            elif op == "$push":
                target.setdefault(key, []).append(copy.deepcopy(arg))
            elif op == "$addToSet":
                values = target.setdefault(key, [])
                if arg not in values:
                    values.append(copy.deepcopy(arg))
            elif op == "$pull":
                values = target.get(key, [])
                if isinstance(arg, dict):
                    target[key] = [
                        v for v in values
                        if not (isinstance(v, dict) and all(v.get(k) == a for k, a in arg.items()))
                    ]
                else:
                    target[key] = [v for v in values if v != arg]
            else:
                raise NotImplementedError(op)
    return doc != before


class FakeProfileStore:
    """Dict-backed stand-in for ProfileStore supporting the operators services use."""

    def __init__(self, documents=None):
        self.documents = [copy.deepcopy(d) for d in (documents or [])]
        self.update_calls = []

    async def find_one(self, predicate):
        for doc in self.documents:
            if _matches(doc, predicate):
                return copy.deepcopy(doc)
        return None

    async def find(self, predicate):
        return [copy.deepcopy(d) for d in self.documents if _matches(d, predicate)]

    async def insert(self, document):
        self.documents.append(copy.deepcopy(document))
        return 1

    async def update(self, predicate, mutation):
        self.update_calls.append((predicate, mutation))
        for doc in self.documents:
            if _matches(doc, predicate):
                return 1 if _apply(doc, mutation) else 0
        return 0

    async def remove(self, predicate):
        for i, doc in enumerate(self.documents):
            if _matches(doc, predicate):
                del self.documents[i]
                return 1
        return 0

    async def group_by(self, pre_filter, key):
        seen = []
        for doc in self.documents:
            if _matches(doc, pre_filter):
                value = _resolve(doc, key)
                value = None if value is _MISSING else value
                if value not in seen:
                    seen.append(value)
        return seen

    def get(self, person_id):
        return next(d for d in self.documents if d["_id"] == person_id)


# ─────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def person_doc():
    """Factory for stored Person documents."""

    def _make(
        person_id=None,
        username=None,
        availability=(),
        grouped="ungrouped",
        zipcode="07030",
        course=(),
        meetings=(),
    ):
        pid = person_id or str(uuid.uuid4())
        return {
            "_id": pid,
            "username": username or f"user-{pid}",
            "hashedPassword": "$2b$12$hash",
            "profile": {
                "id": pid,
                "firstname": "Ada",
                "lastname": "Lovelace",
                "email": f"{pid}@example.com",
                "phone": "555-0100",
                "location": {
                    "zipcode": zipcode,
                    "latitude": 40.74,
                    "longitude": -74.03,
                },
                "grouped": grouped,
                "title": "student",
                "course": list(course),
                "availability": [d.value for d in normalize_availability(availability)],
                "meetings": list(meetings),
            },
            "validSessionIDs": [],
        }

    return _make


@pytest.fixture
def fake_store():
    return FakeProfileStore()


@pytest.fixture
def mock_store():
    store = AsyncMock()
    store.find_one.return_value = None
    store.find.return_value = []
    store.group_by.return_value = []
    store.update.return_value = 1
    store.insert.return_value = 1
    store.remove.return_value = 1
    return store


@pytest.fixture
def mock_cursor():
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=[])
    return cursor


@pytest.fixture
def mock_collection(mock_cursor):
    collection = AsyncMock()
    # Motor's find() and aggregate() return a cursor synchronously (not a
    # coroutine), so use MagicMock for them. find_one, insert_one etc. stay
    # as AsyncMock.
    collection.find = MagicMock(return_value=mock_cursor)
    collection.aggregate = MagicMock(return_value=mock_cursor)
    return collection


@pytest.fixture
def mock_password_hasher():
    hasher = MagicMock()
    hasher.hash_password = MagicMock(side_effect=lambda password: f"hashed:{password}")
    return hasher
