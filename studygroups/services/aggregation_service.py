"""
Aggregation over the ungrouped population.

Produces the distinct availability signatures and zip codes present among
people who are still waiting for a group.
"""

import logging
from typing import List

from common.utils.exceptions import AggregationException
from studygroups.database.profile_store import ProfileStore
from studygroups.database.queries import (
    AVAILABILITY_FIELD,
    ZIPCODE_FIELD,
    ungrouped_filter,
)
from studygroups.models.person import AvailabilitySignature, to_signature

logger = logging.getLogger(__name__)


class AggregationService:
    """
    Groups ungrouped people by a key and reports the distinct keys.
    """

    def __init__(self, store: ProfileStore):
        """
        Initialize AggregationService.

        Args:
            store: Profile store to aggregate over
        """
        self._store = store

    async def aggregate_by_availability(self) -> List[AvailabilitySignature]:
        """
        Distinct availability signatures among ungrouped people.

        Two stored arrays holding the same days in a different order
        produce a single signature.

        Returns:
            Signatures in first-seen order; empty when nobody is ungrouped

        Raises:
            AggregationException: Grouping query failed
        """
        keys = await self._store.group_by(ungrouped_filter(), AVAILABILITY_FIELD)

        signatures: List[AvailabilitySignature] = []
        for key in keys:
            try:
                signature = to_signature(key)
            except ValueError as e:
                raise AggregationException(
                    message=f"unable to group users by availability: {e}",
                    code="INVALID_AVAILABILITY_KEY",
                )
            if signature not in signatures:
                signatures.append(signature)

        logger.debug(f"Found {len(signatures)} distinct availability signatures")
        return signatures

    async def aggregate_by_zipcode(self) -> List[str]:
        """
        Distinct zip codes among ungrouped people.

        Raises:
            AggregationException: Grouping query failed
        """
        keys = await self._store.group_by(ungrouped_filter(), ZIPCODE_FIELD)
        zipcodes = list(dict.fromkeys(key for key in keys if key))
        logger.debug(f"Found {len(zipcodes)} distinct zip codes")
        return zipcodes
