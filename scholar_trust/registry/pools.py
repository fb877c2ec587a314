from __future__ import annotations

import logging
from dataclasses import replace

from scholar_trust.config import DEFAULT_MAX_REQUIRED_GPA
from scholar_trust.disbursement.transfer import TransferCapability, move_funds
from scholar_trust.errors import InvalidParameters, PoolNotFound
from scholar_trust.registry.schema import Principal, ScholarshipPool, require_uint

logger = logging.getLogger(__name__)


class PoolRegistry:
    """Append-only, sequentially indexed table of scholarship pools.

    Closed pools stay in the table for informational reads, but every
    gated lookup goes through `require_active`, which reports them exactly
    like ids that were never issued.
    """

    def __init__(
        self,
        transfer: TransferCapability,
        *,
        custody: Principal,
        max_required_gpa: int = DEFAULT_MAX_REQUIRED_GPA,
    ) -> None:
        self._transfer = transfer
        self._custody = custody
        self._max_required_gpa = max_required_gpa
        self._pools: dict[int, ScholarshipPool] = {}
        self._counter = 0

    @property
    def custody(self) -> Principal:
        return self._custody

    def _validate(
        self,
        student: Principal,
        required_gpa: int,
        total_semesters: int,
        amount_per_semester: int,
    ) -> None:
        if not isinstance(student, str) or not student:
            raise InvalidParameters("A student identity is required.")
        require_uint(required_gpa, "required_gpa")
        require_uint(total_semesters, "total_semesters")
        require_uint(amount_per_semester, "amount_per_semester")

        if required_gpa == 0 or required_gpa > self._max_required_gpa:
            raise InvalidParameters(
                f"required_gpa must be within 1..{self._max_required_gpa} (received {required_gpa})."
            )
        if total_semesters == 0:
            raise InvalidParameters("total_semesters must be positive.")
        if amount_per_semester == 0:
            raise InvalidParameters("amount_per_semester must be positive.")

    def create_pool(
        self,
        donor: Principal,
        student: Principal,
        required_gpa: int,
        total_semesters: int,
        amount_per_semester: int,
        *,
        created_at: int,
    ) -> int:
        self._validate(student, required_gpa, total_semesters, amount_per_semester)
        total_amount = total_semesters * amount_per_semester

        move_funds(self._transfer, sender=donor, recipient=self._custody, amount=total_amount)

        pool_id = self._counter + 1
        self._pools[pool_id] = ScholarshipPool(
            pool_id=pool_id,
            donor=donor,
            student=student,
            required_gpa=required_gpa,
            total_semesters=total_semesters,
            amount_per_semester=amount_per_semester,
            total_amount=total_amount,
            remaining_amount=total_amount,
            semesters_released=0,
            created_at=created_at,
            active=True,
        )
        self._counter = pool_id
        logger.info(
            "Pool %d created: donor=%s student=%s total=%d over %d semesters",
            pool_id,
            donor,
            student,
            total_amount,
            total_semesters,
        )
        return pool_id

    def get_pool(self, pool_id: int) -> ScholarshipPool | None:
        return self._pools.get(pool_id)

    def require_active(self, pool_id: int) -> ScholarshipPool:
        require_uint(pool_id, "pool_id")
        pool = self._pools.get(pool_id)
        if pool is None or not pool.active:
            raise PoolNotFound(f"Pool {pool_id} does not exist or is closed.")
        return pool

    def get_counter(self) -> int:
        return self._counter

    def pools(self) -> list[ScholarshipPool]:
        return [self._pools[pool_id] for pool_id in sorted(self._pools)]

    def record_release(self, pool_id: int) -> ScholarshipPool:
        pool = self.require_active(pool_id)
        semesters_released = pool.semesters_released + 1
        updated = replace(
            pool,
            semesters_released=semesters_released,
            remaining_amount=pool.remaining_amount - pool.amount_per_semester,
            active=semesters_released < pool.total_semesters,
        )
        self._pools[pool_id] = updated
        if not updated.active:
            logger.info("Pool %d closed: all %d semesters released", pool_id, pool.total_semesters)
        return updated

    def drain(self, pool_id: int) -> int:
        pool = self.require_active(pool_id)
        self._pools[pool_id] = replace(pool, remaining_amount=0, active=False)
        return pool.remaining_amount
