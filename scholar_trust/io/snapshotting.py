from __future__ import annotations

import json
import re
from datetime import UTC, date, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable
from uuid import uuid4

import numpy as np
import pandas as pd

from scholar_trust.registry.schema import MilestoneVerification, ScholarshipPool

if TYPE_CHECKING:
    from scholar_trust.contract import ScholarTrust

POOLS_PREFIX = "pools_snapshot_"
VERIFICATIONS_PREFIX = "verifications_snapshot_"
CHANGES_PREFIX = "pool_changes_"
POOLS_PATTERN = re.compile(r"^pools_snapshot_(\d{8})\.parquet$")

POOL_COLUMNS = [
    "pool_id",
    "donor",
    "student",
    "required_gpa",
    "total_semesters",
    "amount_per_semester",
    "total_amount",
    "remaining_amount",
    "semesters_released",
    "created_at",
    "active",
]

VERIFICATION_COLUMNS = [
    "pool_id",
    "semester",
    "gpa",
    "verified_by",
    "verified_at",
    "released",
]

TRACKED_DIFF_FIELDS = ("remaining_amount", "semesters_released", "active")


def _coerce_output_date(run_date: date | str | None) -> date:
    if run_date is None:
        return datetime.now(tz=UTC).date()
    if isinstance(run_date, date):
        return run_date
    return datetime.strptime(run_date, "%Y%m%d").date()


def _stamp(run_date: date) -> str:
    return run_date.strftime("%Y%m%d")


def _jsonable(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_jsonable(item) for item in value]
    if isinstance(value, np.generic):
        return value.item()
    return value


def pools_to_frame(pools: Iterable[ScholarshipPool]) -> pd.DataFrame:
    rows = [pool.to_dict() for pool in pools]
    if not rows:
        return pd.DataFrame(columns=POOL_COLUMNS)
    frame = pd.DataFrame(rows)[POOL_COLUMNS]
    return frame.sort_values(by=["pool_id"], kind="mergesort").reset_index(drop=True)


def verifications_to_frame(records: Iterable[MilestoneVerification]) -> pd.DataFrame:
    rows = [record.to_dict() for record in records]
    if not rows:
        return pd.DataFrame(columns=VERIFICATION_COLUMNS)
    frame = pd.DataFrame(rows)[VERIFICATION_COLUMNS]
    return frame.sort_values(by=["pool_id", "semester"], kind="mergesort").reset_index(drop=True)


def summarize_pools(frame: pd.DataFrame) -> pd.DataFrame:
    """Add `status` and `disbursed_amount` columns to a pool frame.

    A pool that closed with every semester released is `completed`; any
    other closed pool was drained by its donor and is `withdrawn`. Only
    released semesters count toward `disbursed_amount`, so a withdrawal
    does not inflate it.
    """
    summary = frame.copy()
    if summary.empty:
        summary["status"] = pd.Series(dtype="object")
        summary["disbursed_amount"] = pd.Series(dtype="int64")
        return summary

    active = summary["active"].astype(bool).to_numpy()
    released = summary["semesters_released"].to_numpy(dtype=np.int64)
    total = summary["total_semesters"].to_numpy(dtype=np.int64)
    per_semester = summary["amount_per_semester"].to_numpy(dtype=np.int64)

    summary["status"] = np.where(active, "active", np.where(released >= total, "completed", "withdrawn"))
    summary["disbursed_amount"] = released * per_semester
    return summary


def _records_by_id(frame: pd.DataFrame) -> dict[int, dict[str, Any]]:
    if frame.empty:
        return {}
    keyed = frame.set_index("pool_id", drop=False).to_dict(orient="index")
    return {int(key): value for key, value in keyed.items()}


def build_delta(current_df: pd.DataFrame, prior_df: pd.DataFrame | None) -> dict[str, Any]:
    prior = prior_df if prior_df is not None else pd.DataFrame(columns=POOL_COLUMNS)
    current_records = _records_by_id(current_df)
    prior_records = _records_by_id(prior)

    added_ids = sorted(set(current_records) - set(prior_records))
    shared_ids = sorted(set(current_records) & set(prior_records))

    added = [_jsonable(current_records[pool_id]) for pool_id in added_ids]
    closed: list[int] = []
    changed: list[dict[str, Any]] = []
    for pool_id in shared_ids:
        old_record = prior_records[pool_id]
        new_record = current_records[pool_id]
        fields_changed: dict[str, Any] = {}
        for field in TRACKED_DIFF_FIELDS:
            old_value = _jsonable(old_record.get(field))
            new_value = _jsonable(new_record.get(field))
            if old_value != new_value:
                fields_changed[field] = {"old": old_value, "new": new_value}

        if fields_changed:
            changed.append({"pool_id": pool_id, "fields_changed": fields_changed})
        if bool(old_record.get("active")) and not bool(new_record.get("active")):
            closed.append(pool_id)

    return {"added": added, "closed": closed, "changed": changed}


def write_parquet_atomic(df: pd.DataFrame, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = output_path.parent / f"{output_path.name}.{uuid4().hex}.tmp"
    try:
        df.to_parquet(temp_path, index=False, engine="pyarrow")
        temp_path.replace(output_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()


def write_json_atomic(payload: dict[str, Any], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = output_path.parent / f"{output_path.name}.{uuid4().hex}.tmp"
    try:
        temp_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        temp_path.replace(output_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()


def list_pool_snapshots(processed_dir: Path) -> list[Path]:
    snapshots: list[tuple[datetime, Path]] = []
    for candidate in processed_dir.glob(f"{POOLS_PREFIX}*.parquet"):
        match = POOLS_PATTERN.match(candidate.name)
        if not match:
            continue
        snapshots.append((datetime.strptime(match.group(1), "%Y%m%d"), candidate))

    snapshots.sort(key=lambda item: item[0])
    return [item[1] for item in snapshots]


def find_prior_pool_snapshot(processed_dir: Path, target_date: date) -> Path | None:
    target_name = f"{POOLS_PREFIX}{_stamp(target_date)}.parquet"
    candidates = [path for path in list_pool_snapshots(processed_dir) if path.name != target_name]
    return candidates[-1] if candidates else None


def build_and_write_snapshot(
    contract: ScholarTrust,
    *,
    processed_dir: Path,
    run_date: date | str | None = None,
) -> tuple[Path, Path, Path, dict[str, Any]]:
    snapshot_date = _coerce_output_date(run_date)
    pools_df = pools_to_frame(contract.pools.pools())
    verifications_df = verifications_to_frame(contract.verifications.verifications())

    processed_dir.mkdir(parents=True, exist_ok=True)
    prior_path = find_prior_pool_snapshot(processed_dir, snapshot_date)
    prior_df = pd.read_parquet(prior_path) if prior_path else None

    stamp = _stamp(snapshot_date)
    pools_path = processed_dir / f"{POOLS_PREFIX}{stamp}.parquet"
    verifications_path = processed_dir / f"{VERIFICATIONS_PREFIX}{stamp}.parquet"
    changes_path = processed_dir / f"{CHANGES_PREFIX}{stamp}.json"

    delta = build_delta(pools_df, prior_df)
    write_parquet_atomic(pools_df, pools_path)
    write_parquet_atomic(verifications_df, verifications_path)
    write_json_atomic(delta, changes_path)
    return pools_path, verifications_path, changes_path, delta
