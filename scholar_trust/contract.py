from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from scholar_trust.access.control import AccessControl
from scholar_trust.chain import BlockClock, Principal
from scholar_trust.config import DEFAULT_CONTRACT_CONFIG, ContractConfig
from scholar_trust.disbursement.engine import DisbursementEngine
from scholar_trust.disbursement.transfer import TransferCapability
from scholar_trust.errors import ErrorCode, ScholarTrustError
from scholar_trust.registry.pools import PoolRegistry
from scholar_trust.registry.schema import MilestoneVerification, ScholarshipPool
from scholar_trust.registry.verifications import VerificationLedger

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Response:
    """Outcome of an entry point: a success value or the error that stopped it."""

    ok: bool
    value: Any = None
    error: ScholarTrustError | None = None

    @classmethod
    def success(cls, value: Any) -> Response:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ScholarTrustError) -> Response:
        return cls(ok=False, error=error)

    @property
    def code(self) -> ErrorCode | None:
        return None if self.error is None else self.error.code

    @property
    def tag(self) -> str | None:
        return None if self.error is None else self.error.tag

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.value


def _entry_point(method: Callable[..., T]) -> Callable[..., Response]:
    @functools.wraps(method)
    def wrapper(self: ScholarTrust, caller: Principal, *args: Any, **kwargs: Any) -> Response:
        self.clock.advance()
        try:
            value = method(self, caller, *args, **kwargs)
        except ScholarTrustError as exc:
            logger.info(
                "Rejected %s from %s: %s (%d)",
                method.__name__,
                caller,
                exc.tag,
                int(exc.code),
            )
            return Response.failure(exc)
        return Response.success(value)

    return wrapper


class ScholarTrust:
    """Public surface of the scholarship escrow.

    State-changing entry points take the calling identity first and return a
    `Response`; each call is mined in its own block. Read-only queries return
    plain values and never check whether a pool is still active.
    """

    def __init__(
        self,
        owner: Principal,
        transfer: TransferCapability,
        *,
        config: ContractConfig = DEFAULT_CONTRACT_CONFIG,
        clock: BlockClock | None = None,
    ) -> None:
        self.config = config
        self.clock = clock if clock is not None else BlockClock()
        self.access = AccessControl(owner)
        self.pools = PoolRegistry(
            transfer,
            custody=config.custody_identity(owner),
            max_required_gpa=config.max_required_gpa,
        )
        self.verifications = VerificationLedger(self.access, self.pools)
        self.engine = DisbursementEngine(self.pools, self.verifications, transfer)

    @property
    def custody(self) -> Principal:
        return self.pools.custody

    @_entry_point
    def add_oracle(self, caller: Principal, identity: Principal) -> bool:
        return self.access.add_oracle(caller, identity)

    @_entry_point
    def remove_oracle(self, caller: Principal, identity: Principal) -> bool:
        return self.access.remove_oracle(caller, identity)

    @_entry_point
    def create_pool(
        self,
        caller: Principal,
        student: Principal,
        required_gpa: int,
        total_semesters: int,
        amount_per_semester: int,
    ) -> int:
        return self.pools.create_pool(
            caller,
            student,
            required_gpa,
            total_semesters,
            amount_per_semester,
            created_at=self.clock.height,
        )

    @_entry_point
    def verify_milestone(self, caller: Principal, pool_id: int, semester: int, gpa: int) -> bool:
        return self.verifications.verify_milestone(
            caller, pool_id, semester, gpa, verified_at=self.clock.height
        )

    @_entry_point
    def release_semester_funds(self, caller: Principal, pool_id: int, semester: int) -> int:
        return self.engine.release_semester_funds(pool_id, semester)

    @_entry_point
    def emergency_withdrawal(self, caller: Principal, pool_id: int) -> int:
        return self.engine.emergency_withdrawal(caller, pool_id)

    def is_oracle(self, identity: Principal) -> bool:
        return self.access.is_oracle(identity)

    def get_pool_counter(self) -> int:
        return self.pools.get_counter()

    def get_pool_info(self, pool_id: int) -> ScholarshipPool | None:
        return self.pools.get_pool(pool_id)

    def get_milestone_verification(self, pool_id: int, semester: int) -> MilestoneVerification | None:
        return self.verifications.get_verification(pool_id, semester)

    def get_contract_info(self) -> dict[str, str]:
        return self.config.contract_info()
