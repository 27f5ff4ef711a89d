"""Calendar-month partitioned snapshot writer."""

from __future__ import annotations

import contextlib
import json
import logging
import os
import threading
from datetime import UTC, datetime
from pathlib import Path

from usagelog.domain.catalog_models import Snapshot

logger = logging.getLogger(__name__)

SNAPSHOT_TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
PERIOD_DATE_FORMAT = "%Y%m%d"


def format_snapshot_time(ts: datetime) -> str:
    """Render a timestamp in the fixed UTC snapshot format."""
    return ts.astimezone(UTC).strftime(SNAPSHOT_TIME_FORMAT)


def parse_snapshot_time(value: str) -> datetime:
    """Parse a snapshot `time` field back to an aware UTC datetime."""
    return datetime.strptime(value, SNAPSHOT_TIME_FORMAT).replace(tzinfo=UTC)


def period_bounds(ts: datetime) -> tuple[datetime, datetime]:
    """Return the UTC calendar month [begin, end) covering `ts`."""
    current = ts.astimezone(UTC)
    begin = current.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if begin.month == 12:
        end = begin.replace(year=begin.year + 1, month=1)
    else:
        end = begin.replace(month=begin.month + 1)
    return begin, end


def partition_dir_name(ts: datetime) -> str:
    """Return `period=<YYYYMMDD>-<YYYYMMDD>` for the month of `ts`."""
    begin, end = period_bounds(ts)
    begin_str = begin.strftime(PERIOD_DATE_FORMAT)
    end_str = end.strftime(PERIOD_DATE_FORMAT)
    return f"period={begin_str}-{end_str}"


def snapshot_filename(cluster_id: str, ts: datetime) -> str:
    """Return `<cluster>---<timestamp>.json` with spaces turned into underscores."""
    return f"{cluster_id}---{ts.astimezone(UTC)}.json".replace(" ", "_")


def read_snapshot(path: Path) -> Snapshot:
    """Load a persisted snapshot file."""
    return Snapshot.from_dict(json.loads(path.read_text(encoding="utf-8")))


class PartitionedWriter:
    """Persist snapshots under `<base>/period=.../<cluster>---<ts>.json`."""

    def __init__(self, base_path: Path | str) -> None:
        self.base_path = Path(base_path)
        self._lock = threading.Lock()

    def target_path(
        self,
        snapshot: Snapshot,
        cluster_id: str,
        taken_at: datetime | None = None,
    ) -> Path:
        """Compute the output file path for a snapshot.

        `taken_at` keeps sub-second precision in the filename; without it the
        second-resolution `snapshot.time` is used.
        """
        ts = taken_at or parse_snapshot_time(snapshot.time)
        partition = self.base_path / partition_dir_name(ts)
        return partition / snapshot_filename(cluster_id, ts)

    def write(
        self,
        snapshot: Snapshot,
        cluster_id: str,
        *,
        taken_at: datetime | None = None,
    ) -> Path | None:
        """Serialize and write a snapshot, replacing any existing file.

        Returns the written path, or None when the filesystem refused the
        write. Errors are logged, never raised.
        """
        output_file = self.target_path(snapshot, cluster_id, taken_at)
        payload = json.dumps(snapshot.to_dict(), ensure_ascii=False)
        tmp_file = output_file.with_name(f".{output_file.name}.tmp")

        with self._lock:
            try:
                output_file.parent.mkdir(parents=True, exist_ok=True)
                logger.info("Writing to %s", output_file)
                tmp_file.write_text(payload, encoding="utf-8")
                os.replace(tmp_file, output_file)
            except OSError as exc:
                logger.error("Failed to write snapshot %s: %s", output_file, exc)
                with contextlib.suppress(OSError):
                    tmp_file.unlink(missing_ok=True)
                return None
        return output_file
