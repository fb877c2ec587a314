from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    UNAUTHORIZED = 100
    POOL_NOT_FOUND = 101
    REQUIREMENT_NOT_MET = 103
    ALREADY_RELEASED = 104
    INVALID_PARAMETERS = 105
    TRANSFER_FAILED = 106
    UNAUTHORIZED_ORACLE = 107


class ScholarTrustError(Exception):
    """Base class for every failure an entry point can report."""

    code: ErrorCode
    tag: str

    def __str__(self) -> str:
        detail = super().__str__()
        return f"{self.tag} ({int(self.code)}): {detail}" if detail else f"{self.tag} ({int(self.code)})"


class Unauthorized(ScholarTrustError):
    code = ErrorCode.UNAUTHORIZED
    tag = "Unauthorized"


class UnauthorizedOracle(Unauthorized):
    code = ErrorCode.UNAUTHORIZED_ORACLE
    tag = "Unauthorized(Oracle)"


class PoolNotFound(ScholarTrustError):
    code = ErrorCode.POOL_NOT_FOUND
    tag = "PoolNotFound"


class RequirementNotMet(ScholarTrustError):
    code = ErrorCode.REQUIREMENT_NOT_MET
    tag = "RequirementNotMet"


# Both share code 103 with RequirementNotMet; only the tag differs.
class SequenceViolation(RequirementNotMet):
    tag = "SequenceViolation"


class RequirementMet(RequirementNotMet):
    tag = "RequirementMet"


class AlreadyReleased(ScholarTrustError):
    code = ErrorCode.ALREADY_RELEASED
    tag = "AlreadyReleased"


class InvalidParameters(ScholarTrustError):
    code = ErrorCode.INVALID_PARAMETERS
    tag = "InvalidParameters"


class TransferFailed(ScholarTrustError):
    code = ErrorCode.TRANSFER_FAILED
    tag = "TransferFailed"
