"""Unit tests for settings validation and service wiring."""

import pytest
from unittest.mock import MagicMock

from studygroups import config, dependencies
from studygroups.config import Settings
from studygroups.database.queries import MatchMode
from studygroups.services.meeting_service import UnimplementedMeetingHook


class TestSettings:
    def test_defaults_are_valid(self):
        Settings().validate_required()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"STORE_TIMEOUT_SECONDS": 0},
            {"GROUP_MATCH_MODE": "fuzzy"},
            {"MIN_GROUP_SIZE": 0},
            {"BCRYPT_ROUNDS": 3},
        ],
    )
    def test_rejects_invalid_values(self, overrides):
        with pytest.raises(ValueError):
            Settings(**overrides).validate_required()


class TestInitServices:
    def test_builds_services_from_settings(self, mock_collection):
        db = MagicMock()
        db.__getitem__ = MagicMock(return_value=mock_collection)
        settings = Settings(USERS_COLLECTION="people", GROUP_MATCH_MODE="superset", MIN_GROUP_SIZE=3)

        dependencies.init_services(db, settings)

        db.__getitem__.assert_called_once_with("people")
        grouping = dependencies.get_grouping_service()
        assert grouping._match_mode is MatchMode.SUPERSET
        assert grouping._min_group_size == 3

    def test_accepts_custom_meeting_hook(self, mock_collection):
        db = MagicMock()
        db.__getitem__ = MagicMock(return_value=mock_collection)
        hook = UnimplementedMeetingHook()

        dependencies.init_services(db, Settings(), meeting_hook=hook)

        assert dependencies.get_meeting_hook() is hook

    def test_defaults_to_module_settings(self, mock_collection, monkeypatch):
        db = MagicMock()
        db.__getitem__ = MagicMock(return_value=mock_collection)
        monkeypatch.setattr(config, "settings", Settings(USERS_COLLECTION="members", MIN_GROUP_SIZE=2))

        dependencies.init_services(db)

        db.__getitem__.assert_called_once_with("members")
        assert dependencies.get_grouping_service()._min_group_size == 2
