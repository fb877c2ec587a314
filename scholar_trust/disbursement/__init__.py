"""Release and reclaim of escrowed scholarship funds."""

from scholar_trust.disbursement.engine import DisbursementEngine
from scholar_trust.disbursement.transfer import InMemoryTokenLedger, TransferCapability

__all__ = ["DisbursementEngine", "InMemoryTokenLedger", "TransferCapability"]
