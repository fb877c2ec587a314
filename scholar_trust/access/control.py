from __future__ import annotations

import logging

from scholar_trust.chain import Principal
from scholar_trust.errors import Unauthorized, UnauthorizedOracle

logger = logging.getLogger(__name__)


class AccessControl:
    """Owner identity plus the owner-administered oracle allow-list.

    The owner is seeded into the allow-list at deployment. Removing it from
    the list never demotes it: `is_oracle` keeps answering true for the owner.
    """

    def __init__(self, owner: Principal) -> None:
        if not owner:
            raise ValueError("Contract owner identity is required.")
        self._owner = owner
        self._oracles: set[Principal] = {owner}

    def is_owner(self, identity: Principal) -> bool:
        return identity == self._owner

    def is_oracle(self, identity: Principal) -> bool:
        return identity == self._owner or identity in self._oracles

    def oracles(self) -> frozenset[Principal]:
        return frozenset(self._oracles)

    def require_owner(self, caller: Principal) -> None:
        if not self.is_owner(caller):
            raise Unauthorized(f"'{caller}' is not the contract owner.")

    def require_oracle(self, caller: Principal) -> None:
        if not self.is_oracle(caller):
            raise UnauthorizedOracle(f"'{caller}' is not an authorized oracle.")

    def add_oracle(self, caller: Principal, identity: Principal) -> bool:
        self.require_owner(caller)
        self._oracles.add(identity)
        logger.info("Oracle added: %s", identity)
        return True

    def remove_oracle(self, caller: Principal, identity: Principal) -> bool:
        self.require_owner(caller)
        self._oracles.discard(identity)
        logger.info("Oracle removed: %s", identity)
        return True
