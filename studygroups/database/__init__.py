"""
Study group database access.

Provides the profile store adapter and the query builders it is used with.
"""

from studygroups.database.profile_store import ProfileStore
from studygroups.database.queries import MatchMode

__all__ = [
    "ProfileStore",
    "MatchMode",
]
