from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from scholar_trust.chain import Principal
from scholar_trust.errors import InvalidParameters


@dataclass(frozen=True, slots=True)
class ScholarshipPool:
    """One escrow: a donor, a student, a GPA threshold and equal semester payouts."""

    pool_id: int
    donor: Principal
    student: Principal
    required_gpa: int
    total_semesters: int
    amount_per_semester: int
    total_amount: int
    remaining_amount: int
    semesters_released: int
    created_at: int
    active: bool = True

    @property
    def next_semester(self) -> int:
        return self.semesters_released + 1

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class MilestoneVerification:
    pool_id: int
    semester: int
    gpa: int
    verified_by: Principal
    verified_at: int
    released: bool = False

    def meets(self, required_gpa: int) -> bool:
        return self.gpa >= required_gpa

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def require_uint(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameters(f"'{field_name}' must be an integer (received {value!r}).")
    if value < 0:
        raise InvalidParameters(f"'{field_name}' cannot be negative (received {value}).")
    return value
