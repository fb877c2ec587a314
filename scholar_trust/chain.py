from __future__ import annotations

from dataclasses import dataclass

Principal = str


@dataclass(slots=True)
class BlockClock:
    """Block-height source for `created_at` / `verified_at` markers."""

    height: int = 1

    def __post_init__(self) -> None:
        if self.height < 0:
            raise ValueError("Block height cannot be negative.")

    def advance(self, blocks: int = 1) -> int:
        if blocks < 0:
            raise ValueError("Cannot move the block height backwards.")
        self.height += blocks
        return self.height

    def mine_empty_blocks(self, count: int) -> int:
        return self.advance(count)
