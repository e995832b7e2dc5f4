"""
Study group formation.

Partitions ungrouped people into candidate groups that share the same
weekly availability, then records each member as grouped.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from studygroups.database.profile_store import ProfileStore
from studygroups.database.queries import (
    MatchMode,
    signature_values,
    ungrouped_availability_filter,
)
from studygroups.models.person import AvailabilitySignature, Person
from studygroups.services.aggregation_service import AggregationService
from studygroups.services.group_status_service import GroupStatusService

logger = logging.getLogger(__name__)

SortKey = Callable[[Person], Any]


@dataclass
class FormationResult:
    """Outcome of one formation pass."""

    groups: Dict[AvailabilitySignature, List[Person]] = field(default_factory=dict)
    grouped: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


class GroupingService:
    """
    Builds candidate groups from the ungrouped population.

    Buckets are recomputed on every call and never persisted.
    """

    def __init__(
        self,
        store: ProfileStore,
        aggregation_service: AggregationService,
        status_service: GroupStatusService,
        match_mode: MatchMode = MatchMode.EXACT,
        min_group_size: int = 1,
    ):
        """
        Initialize GroupingService.

        Args:
            store: Profile store to query
            aggregation_service: Source of availability signatures
            status_service: Records members as grouped
            match_mode: EXACT puts each person in exactly one bucket;
                SUPERSET lets a person join every bucket whose days they
                cover, so one person can appear in several buckets
            min_group_size: Buckets smaller than this are dropped
        """
        self._store = store
        self._aggregation_service = aggregation_service
        self._status_service = status_service
        self._match_mode = match_mode
        self._min_group_size = min_group_size

    async def sort_by_day(
        self,
        sort_key: Optional[SortKey] = None,
    ) -> Dict[AvailabilitySignature, List[Person]]:
        """
        Bucket ungrouped people by availability signature.

        The empty signature is never queried: every array contains all
        elements of the empty set, so it would match the whole population.
        People with no availability therefore land in no bucket.

        Args:
            sort_key: Order members within each bucket; store order otherwise

        Returns:
            {signature: [Person, ...]}

        Raises:
            AggregationException: Signature aggregation failed
            PersistenceException: A bucket query failed or timed out
        """
        signatures = await self._aggregation_service.aggregate_by_availability()

        buckets: Dict[AvailabilitySignature, List[Person]] = {}
        for signature in signatures:
            if not signature:
                logger.debug("Skipping empty availability signature")
                continue

            docs = await self._store.find(
                ungrouped_availability_filter(signature, self._match_mode)
            )
            members = [Person.from_document(doc) for doc in docs]

            if sort_key is not None:
                members.sort(key=sort_key)

            if len(members) < self._min_group_size:
                logger.debug(
                    f"Bucket {signature_values(signature)} has "
                    f"{len(members)} members, below minimum {self._min_group_size}"
                )
                continue

            buckets[signature] = members

        logger.info(f"Sorted ungrouped users into {len(buckets)} availability buckets")
        return buckets

    async def run_formation_pass(
        self,
        sort_key: Optional[SortKey] = None,
    ) -> FormationResult:
        """
        Run one aggregate-partition-mark pass.

        A person already claimed by a concurrent pass is skipped rather than
        failing the pass. Any other error stops the pass where it is; people
        marked before the failure stay grouped, and re-running the pass picks
        up the rest.

        Returns:
            FormationResult with the buckets and the ids grouped or skipped
        """
        groups = await self.sort_by_day(sort_key=sort_key)
        result = FormationResult(groups=groups)

        seen = set()
        for members in groups.values():
            for person in members:
                if person.id in seen:
                    continue
                seen.add(person.id)

                if await self._status_service.try_mark_grouped(person.id):
                    result.grouped.append(person.id)
                else:
                    result.skipped.append(person.id)

        logger.info(
            f"Formation pass complete: {len(result.grouped)} grouped, "
            f"{len(result.skipped)} skipped across {len(groups)} groups"
        )
        return result
