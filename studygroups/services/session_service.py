"""
Session bookkeeping contract.

Session ids are reserved on the person document (validSessionIDs) but
issuing and tracking them is not implemented yet.
"""

from common.utils.exceptions import NotImplementedCapabilityException


class SessionService:
    """Every operation raises NotImplementedCapabilityException."""

    def _unimplemented(self, operation: str) -> NotImplementedCapabilityException:
        return NotImplementedCapabilityException(
            message=f"Session bookkeeping is not implemented: {operation}",
            code="SESSIONS_NOT_IMPLEMENTED",
        )

    async def add_session_to_user(self, username: str, session_id: str) -> None:
        raise self._unimplemented("add_session_to_user")

    async def remove_session_from_user(self, session_id: str) -> None:
        raise self._unimplemented("remove_session_from_user")

    async def get_user_by_session_id(self, session_id: str) -> None:
        raise self._unimplemented("get_user_by_session_id")
