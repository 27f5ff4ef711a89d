"""Application facade exports for the snapshot engine."""

from usagelog.application.aggregator import build_snapshot
from usagelog.application.catalog_service import audit_cluster
from usagelog.application.partition_writer import (
    PartitionedWriter,
    partition_dir_name,
    period_bounds,
    read_snapshot,
    snapshot_filename,
)
from usagelog.application.period_summary import summarize_partition
from usagelog.application.scheduler import (
    SchedulerState,
    SnapshotScheduler,
    TickResult,
)

__all__ = [
    "audit_cluster",
    "build_snapshot",
    "partition_dir_name",
    "period_bounds",
    "read_snapshot",
    "snapshot_filename",
    "summarize_partition",
    "PartitionedWriter",
    "SchedulerState",
    "SnapshotScheduler",
    "TickResult",
]
