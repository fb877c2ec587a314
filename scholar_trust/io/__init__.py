"""Tabular exports of pool and verification state."""

from scholar_trust.io.snapshotting import build_and_write_snapshot, pools_to_frame, summarize_pools

__all__ = ["build_and_write_snapshot", "pools_to_frame", "summarize_pools"]
