from __future__ import annotations

import logging
from dataclasses import replace

from scholar_trust.access.control import AccessControl
from scholar_trust.chain import Principal
from scholar_trust.errors import SequenceViolation
from scholar_trust.registry.pools import PoolRegistry
from scholar_trust.registry.schema import MilestoneVerification, require_uint

logger = logging.getLogger(__name__)


class VerificationLedger:
    """Oracle-certified GPA records keyed by (pool id, semester).

    Submissions must target the next unreleased semester of an active pool.
    Resubmitting that same semester before its release replaces the
    pending record; released records are never touched again because the
    pending semester has moved past them.
    """

    def __init__(self, access: AccessControl, pools: PoolRegistry) -> None:
        self._access = access
        self._pools = pools
        self._records: dict[tuple[int, int], MilestoneVerification] = {}

    def verify_milestone(
        self,
        caller: Principal,
        pool_id: int,
        semester: int,
        gpa: int,
        *,
        verified_at: int,
    ) -> bool:
        self._access.require_oracle(caller)
        pool = self._pools.require_active(pool_id)
        require_uint(semester, "semester")
        require_uint(gpa, "gpa")
        if semester != pool.next_semester:
            raise SequenceViolation(
                f"Pool {pool_id} expects semester {pool.next_semester}, received {semester}."
            )

        key = (pool_id, semester)
        if key in self._records:
            logger.info("Pool %d semester %d re-verified by %s", pool_id, semester, caller)
        self._records[key] = MilestoneVerification(
            pool_id=pool_id,
            semester=semester,
            gpa=gpa,
            verified_by=caller,
            verified_at=verified_at,
            released=False,
        )
        logger.info("Pool %d semester %d verified: gpa=%d oracle=%s", pool_id, semester, gpa, caller)
        return True

    def get_verification(self, pool_id: int, semester: int) -> MilestoneVerification | None:
        return self._records.get((pool_id, semester))

    def mark_released(self, pool_id: int, semester: int) -> MilestoneVerification:
        record = self._records[(pool_id, semester)]
        updated = replace(record, released=True)
        self._records[(pool_id, semester)] = updated
        return updated

    def verifications(self) -> list[MilestoneVerification]:
        return [self._records[key] for key in sorted(self._records)]
