"""Unit tests for GroupStatusService."""

import pytest

from common.utils.exceptions import (
    NotFoundException,
    PersistenceException,
    ValidationException,
)
from studygroups.models.person import GroupedStatus
from studygroups.services.group_status_service import GroupStatusService


class TestMarkGrouped:
    @pytest.mark.asyncio
    async def test_flips_ungrouped_person(self, fake_store, person_doc):
        fake_store.documents = [person_doc("p1", availability=["Mon"])]
        service = GroupStatusService(fake_store)

        person = await service.mark_grouped("p1")

        assert person.profile.grouped is GroupedStatus.GROUPED
        assert fake_store.get("p1")["profile"]["grouped"] == "grouped"

    @pytest.mark.asyncio
    async def test_second_call_is_persistence_error(self, fake_store, person_doc):
        fake_store.documents = [person_doc("p1")]
        service = GroupStatusService(fake_store)
        await service.mark_grouped("p1")

        with pytest.raises(PersistenceException) as exc_info:
            await service.mark_grouped("p1")

        assert exc_info.value.code == "ALREADY_GROUPED"

    @pytest.mark.asyncio
    async def test_unknown_id_is_not_found_without_write(self, mock_store):
        service = GroupStatusService(mock_store)

        with pytest.raises(NotFoundException):
            await service.mark_grouped("missing")

        mock_store.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_write_is_conditional_on_prior_value(self, mock_store, person_doc):
        mock_store.find_one.return_value = person_doc("p1")
        service = GroupStatusService(mock_store)

        await service.try_mark_grouped("p1")

        mock_store.update.assert_called_once_with(
            {"_id": "p1", "profile.grouped": "ungrouped"},
            {"$set": {"profile.grouped": "grouped"}},
        )

    @pytest.mark.asyncio
    async def test_blank_id_is_validation_error(self, mock_store):
        service = GroupStatusService(mock_store)

        with pytest.raises(ValidationException):
            await service.mark_grouped("")


class TestTryMarkGrouped:
    @pytest.mark.asyncio
    async def test_lost_race_returns_false(self, mock_store, person_doc):
        mock_store.find_one.return_value = person_doc("p1")
        mock_store.update.return_value = 0
        service = GroupStatusService(mock_store)

        assert await service.try_mark_grouped("p1") is False

    @pytest.mark.asyncio
    async def test_store_error_propagates(self, mock_store, person_doc):
        mock_store.find_one.return_value = person_doc("p1")
        mock_store.update.side_effect = PersistenceException(code="STORE_TIMEOUT")
        service = GroupStatusService(mock_store)

        with pytest.raises(PersistenceException):
            await service.try_mark_grouped("p1")

    @pytest.mark.asyncio
    async def test_person_deleted_before_write_is_not_found(self, mock_store, person_doc):
        mock_store.find_one.side_effect = [person_doc("p1"), None]
        mock_store.update.return_value = 0
        service = GroupStatusService(mock_store)

        with pytest.raises(NotFoundException):
            await service.mark_grouped("p1")
