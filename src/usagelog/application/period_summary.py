"""Per-namespace resource-seconds over one partition of snapshots."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pandas as pd

from usagelog.application.partition_writer import read_snapshot
from usagelog.domain.catalog_models import Snapshot

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS: tuple[str, ...] = (
    "cluster_id",
    "namespace",
    "snapshots",
    "pods",
    "cpu_request_seconds",
    "memory_request_byte_seconds",
    "cpu_limit_seconds",
    "memory_limit_byte_seconds",
)


def load_partition(partition_dir: Path) -> list[Snapshot]:
    """Load every snapshot file of a partition, ordered by file name."""
    if not partition_dir.is_dir():
        raise ValueError(f"Partition directory not found: {partition_dir}")
    snapshots = []
    for path in sorted(partition_dir.glob("*.json")):
        if path.name.startswith("."):
            continue
        snapshots.append(read_snapshot(path))
    return snapshots


def _container_rows(snapshot: Snapshot) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for namespace in snapshot.namespaces:
        for pod in namespace.pods:
            for container in pod.containers:
                res = container.resources
                rows.append(
                    {
                        "cluster_id": snapshot.cluster_id,
                        "namespace": namespace.name,
                        "pod_uid": pod.uid or f"{namespace.name}/{pod.name}",
                        "cpu_request_seconds": res.cpu_requests * snapshot.duration,
                        "memory_request_byte_seconds": (
                            res.memory_requests * snapshot.duration
                        ),
                        "cpu_limit_seconds": res.cpu_limits * snapshot.duration,
                        "memory_limit_byte_seconds": (
                            res.memory_limits * snapshot.duration
                        ),
                    }
                )
    return rows


def _namespace_rows(snapshot: Snapshot) -> list[dict[str, Any]]:
    return [
        {
            "cluster_id": snapshot.cluster_id,
            "namespace": namespace.name,
            "time": snapshot.time,
        }
        for namespace in snapshot.namespaces
    ]


def summarize_snapshots(snapshots: list[Snapshot]) -> pd.DataFrame:
    """Aggregate container resources weighted by snapshot duration.

    `snapshots` counts every snapshot listing the namespace, so namespaces
    without containers still get a row with zero usage.
    """
    keys = ["cluster_id", "namespace"]
    presence = [row for snapshot in snapshots for row in _namespace_rows(snapshot)]
    if not presence:
        return pd.DataFrame(columns=list(SUMMARY_COLUMNS))

    summary = (
        pd.DataFrame(presence)
        .groupby(keys, as_index=False)
        .agg(snapshots=("time", "nunique"))
    )
    rows = [row for snapshot in snapshots for row in _container_rows(snapshot)]
    if rows:
        usage = (
            pd.DataFrame(rows)
            .groupby(keys, as_index=False)
            .agg(
                pods=("pod_uid", "nunique"),
                cpu_request_seconds=("cpu_request_seconds", "sum"),
                memory_request_byte_seconds=("memory_request_byte_seconds", "sum"),
                cpu_limit_seconds=("cpu_limit_seconds", "sum"),
                memory_limit_byte_seconds=("memory_limit_byte_seconds", "sum"),
            )
        )
        summary = summary.merge(usage, on=keys, how="left")

    summary = summary.reindex(columns=list(SUMMARY_COLUMNS))
    usage_columns = list(SUMMARY_COLUMNS[3:])
    summary[usage_columns] = summary[usage_columns].fillna(0)
    summary["pods"] = summary["pods"].astype(int)
    return summary.sort_values(keys).reset_index(drop=True)


def summarize_partition(
    partition_dir: Path,
    *,
    output_csv: Path | None = None,
) -> pd.DataFrame:
    """Summarize a partition directory and optionally persist CSV."""
    snapshots = load_partition(partition_dir)
    failed = sum(1 for s in snapshots if not s.success)
    if failed:
        logger.warning("%d of %d snapshots recorded errors", failed, len(snapshots))
    summary = summarize_snapshots(snapshots)
    if output_csv is not None:
        output_csv.parent.mkdir(parents=True, exist_ok=True)
        summary.to_csv(output_csv, index=False)
        logger.info("Summary written to %s", output_csv)
    return summary
