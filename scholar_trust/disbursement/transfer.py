from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from scholar_trust.chain import Principal
from scholar_trust.errors import TransferFailed

logger = logging.getLogger(__name__)


class TransferCapability(ABC):
    """Atomic value movement between accounts, provided by the host ledger."""

    @abstractmethod
    def transfer(self, sender: Principal, recipient: Principal, amount: int) -> bool:
        """Move `amount` from `sender` to `recipient`; return False on refusal."""


class InMemoryTokenLedger(TransferCapability):
    def __init__(self, balances: dict[Principal, int] | None = None) -> None:
        self._balances: dict[Principal, int] = {}
        for account, amount in (balances or {}).items():
            self.mint(account, amount)

    def mint(self, account: Principal, amount: int) -> int:
        if amount < 0:
            raise ValueError("Cannot mint a negative amount.")
        self._balances[account] = self._balances.get(account, 0) + amount
        return self._balances[account]

    def balance_of(self, account: Principal) -> int:
        return self._balances.get(account, 0)

    def transfer(self, sender: Principal, recipient: Principal, amount: int) -> bool:
        if amount <= 0 or sender == recipient:
            return False
        available = self._balances.get(sender, 0)
        if available < amount:
            return False
        self._balances[sender] = available - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount
        return True


def move_funds(
    transfer: TransferCapability,
    *,
    sender: Principal,
    recipient: Principal,
    amount: int,
) -> None:
    if not transfer.transfer(sender, recipient, amount):
        logger.warning("Transfer refused: %s -> %s amount=%d", sender, recipient, amount)
        raise TransferFailed(f"Transfer of {amount} from '{sender}' to '{recipient}' was refused.")
