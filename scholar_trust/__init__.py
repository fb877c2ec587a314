"""Milestone-based scholarship escrow: oracle-gated, semester-by-semester releases."""

from scholar_trust.chain import BlockClock
from scholar_trust.config import ContractConfig
from scholar_trust.contract import Response, ScholarTrust
from scholar_trust.disbursement.transfer import InMemoryTokenLedger, TransferCapability
from scholar_trust.errors import ErrorCode, ScholarTrustError

__all__ = [
    "BlockClock",
    "ContractConfig",
    "ErrorCode",
    "InMemoryTokenLedger",
    "Response",
    "ScholarTrust",
    "ScholarTrustError",
    "TransferCapability",
]
