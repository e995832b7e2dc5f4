"""Unit tests for the ProfileStore adapter over a Motor collection."""

import asyncio

import pytest
from unittest.mock import MagicMock
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from common.utils.exceptions import (
    AggregationException,
    ConflictException,
    PersistenceException,
)
from studygroups.database.profile_store import ProfileStore


@pytest.fixture
def store(mock_collection):
    return ProfileStore(mock_collection, timeout=0.05)


async def _never_returns(*args, **kwargs):
    await asyncio.sleep(10)


class TestReads:
    @pytest.mark.asyncio
    async def test_find_one_passes_predicate(self, store, mock_collection):
        mock_collection.find_one.return_value = {"_id": "u1"}

        result = await store.find_one({"_id": "u1"})

        assert result == {"_id": "u1"}
        mock_collection.find_one.assert_called_once_with({"_id": "u1"})

    @pytest.mark.asyncio
    async def test_find_drains_cursor(self, store, mock_collection, mock_cursor):
        mock_cursor.to_list.return_value = [{"_id": "u1"}, {"_id": "u2"}]

        result = await store.find({"profile.grouped": "ungrouped"})

        assert [d["_id"] for d in result] == ["u1", "u2"]
        mock_collection.find.assert_called_once_with({"profile.grouped": "ungrouped"})
        mock_cursor.to_list.assert_called_once_with(length=None)


class TestMutations:
    @pytest.mark.asyncio
    async def test_update_reports_modified_count(self, store, mock_collection):
        mock_collection.update_one.return_value = MagicMock(modified_count=0)

        modified = await store.update({"_id": "u1"}, {"$set": {"profile.title": "tutor"}})

        assert modified == 0
        mock_collection.update_one.assert_called_once_with(
            {"_id": "u1"}, {"$set": {"profile.title": "tutor"}}
        )

    @pytest.mark.asyncio
    async def test_insert_reports_one(self, store, mock_collection):
        mock_collection.insert_one.return_value = MagicMock(inserted_id="u1")
        assert await store.insert({"_id": "u1"}) == 1

    @pytest.mark.asyncio
    async def test_remove_reports_deleted_count(self, store, mock_collection):
        mock_collection.delete_one.return_value = MagicMock(deleted_count=1)
        assert await store.remove({"_id": "u1"}) == 1

    @pytest.mark.asyncio
    async def test_duplicate_key_is_conflict(self, store, mock_collection):
        mock_collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")

        with pytest.raises(ConflictException) as exc_info:
            await store.insert({"_id": "u1", "username": "ada"})

        assert exc_info.value.code == "DUPLICATE_KEY"


class TestGroupBy:
    @pytest.mark.asyncio
    async def test_builds_match_then_group_pipeline(self, store, mock_collection, mock_cursor):
        mock_cursor.to_list.return_value = [{"_id": ["Monday"]}, {"_id": ["Tuesday"]}]

        keys = await store.group_by({"profile.grouped": "ungrouped"}, "profile.availability")

        assert keys == [["Monday"], ["Tuesday"]]
        mock_collection.aggregate.assert_called_once_with([
            {"$match": {"profile.grouped": "ungrouped"}},
            {"$group": {"_id": "$profile.availability"}},
        ])

    @pytest.mark.asyncio
    async def test_driver_failure_is_aggregation_error(self, store, mock_cursor):
        mock_cursor.to_list.side_effect = ServerSelectionTimeoutError("no servers")

        with pytest.raises(AggregationException):
            await store.group_by({}, "profile.availability")


class TestFailures:
    @pytest.mark.asyncio
    async def test_timeout_is_persistence_error(self, store, mock_collection):
        mock_collection.update_one.side_effect = _never_returns

        with pytest.raises(PersistenceException) as exc_info:
            await store.update({"_id": "u1"}, {"$set": {}})

        assert exc_info.value.code == "STORE_TIMEOUT"

    @pytest.mark.asyncio
    async def test_driver_failure_is_persistence_error(self, store, mock_collection):
        mock_collection.find_one.side_effect = ServerSelectionTimeoutError("no servers")

        with pytest.raises(PersistenceException) as exc_info:
            await store.find_one({"_id": "u1"})

        assert exc_info.value.code == "STORE_UNAVAILABLE"
        assert exc_info.value.status_code == 500


class TestEnsureIndexes:
    @pytest.mark.asyncio
    async def test_username_index_is_unique(self, store, mock_collection):
        await store.ensure_indexes()

        first_call = mock_collection.create_index.call_args_list[0]
        assert first_call.args[0] == [("username", 1)]
        assert first_call.kwargs["unique"] is True
        assert mock_collection.create_index.call_count == 4
