from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from scholar_trust.chain import Principal
from scholar_trust.disbursement.transfer import TransferCapability, move_funds
from scholar_trust.errors import AlreadyReleased, RequirementMet, RequirementNotMet, Unauthorized
from scholar_trust.registry.schema import require_uint

if TYPE_CHECKING:
    from scholar_trust.registry.pools import PoolRegistry
    from scholar_trust.registry.verifications import VerificationLedger

logger = logging.getLogger(__name__)


class DisbursementEngine:
    """Moves escrowed funds out of custody.

    Per (pool, semester) the flow is unverified -> verified -> released, and
    only a verification at or above the pool's threshold can be released. A
    below-threshold record is terminal for its semester: the money stays in
    `remaining_amount` until the donor reclaims it.
    """

    def __init__(
        self,
        pools: PoolRegistry,
        verifications: VerificationLedger,
        transfer: TransferCapability,
    ) -> None:
        self._pools = pools
        self._verifications = verifications
        self._transfer = transfer

    def release_semester_funds(self, pool_id: int, semester: int) -> int:
        pool = self._pools.require_active(pool_id)
        require_uint(semester, "semester")
        record = self._verifications.get_verification(pool_id, semester)
        if record is None:
            raise RequirementNotMet(f"Pool {pool_id} semester {semester} has not been verified.")
        if not record.meets(pool.required_gpa):
            raise RequirementNotMet(
                f"Pool {pool_id} semester {semester} gpa {record.gpa} is below {pool.required_gpa}."
            )
        if record.released:
            raise AlreadyReleased(f"Pool {pool_id} semester {semester} was already released.")

        amount = pool.amount_per_semester
        move_funds(self._transfer, sender=self._pools.custody, recipient=pool.student, amount=amount)

        self._verifications.mark_released(pool_id, semester)
        self._pools.record_release(pool_id)
        logger.info("Pool %d semester %d released: %d to %s", pool_id, semester, amount, pool.student)
        return amount

    def emergency_withdrawal(self, caller: Principal, pool_id: int) -> int:
        pool = self._pools.require_active(pool_id)
        if caller != pool.donor:
            raise Unauthorized(f"Only the donor of pool {pool_id} may withdraw.")

        pending = self._verifications.get_verification(pool_id, pool.next_semester)
        if pending is not None and pending.meets(pool.required_gpa):
            raise RequirementMet(
                f"Pool {pool_id} semester {pool.next_semester} is verified and releasable."
            )

        amount = pool.remaining_amount
        move_funds(self._transfer, sender=self._pools.custody, recipient=pool.donor, amount=amount)

        self._pools.drain(pool_id)
        logger.info("Pool %d emergency withdrawal: %d returned to %s", pool_id, amount, pool.donor)
        return amount
