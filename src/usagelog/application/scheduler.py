"""Fixed-period snapshot loop."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

from usagelog.application.catalog_service import audit_cluster
from usagelog.application.partition_writer import (
    PartitionedWriter,
    format_snapshot_time,
)
from usagelog.config import SnapshotConfig
from usagelog.domain.catalog_models import Snapshot
from usagelog.infrastructure.cluster_reader import ClusterReader

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    """Lifecycle state of the snapshot loop."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True)
class TickResult:
    """Outcome of one scheduler tick."""

    snapshot: Snapshot
    path: Path | None


def _utc_now() -> datetime:
    return datetime.now(UTC)


class SnapshotScheduler:
    """Run fetch, aggregate and write once per period in one background thread.

    The delay between tick starts is the period plus the time the previous
    tick took. `stop()` interrupts the sleep immediately; a tick already in
    progress is allowed to finish.
    """

    def __init__(
        self,
        reader: ClusterReader,
        writer: PartitionedWriter,
        config: SnapshotConfig,
        *,
        stop_event: threading.Event | None = None,
        clock: Callable[[], datetime] = _utc_now,
        max_ticks: int | None = None,
    ) -> None:
        self.reader = reader
        self.writer = writer
        self.config = config
        self.stop_event = stop_event or threading.Event()
        self.max_ticks = max_ticks
        self.ticks = 0
        self.state = SchedulerState.IDLE
        self._clock = clock
        self._last_tick_start: datetime | None = None
        self._thread: threading.Thread | None = None

    def run_once(self, *, write: bool = True) -> TickResult:
        """Execute a single tick and return the snapshot with its path.

        With `write=False` the snapshot is built but not persisted.
        """
        self.state = SchedulerState.RUNNING
        try:
            started = self._clock()
            previous = self._last_tick_start or started
            self._last_tick_start = started
            logger.info("Starting snapshot for cluster %s", self.config.cluster_id)

            try:
                snapshot = audit_cluster(self.reader, self.config.cluster_id)
            except Exception as exc:
                logger.exception("Unable to build snapshot")
                snapshot = Snapshot(
                    cluster_id=self.config.cluster_id,
                    success=False,
                    error_message=f"Unable to build snapshot: {exc}",
                )
            snapshot.time = format_snapshot_time(started)
            snapshot.duration = (started - previous).total_seconds()

            path = None
            if write:
                path = self.writer.write(
                    snapshot, self.config.cluster_id, taken_at=started
                )
            return TickResult(snapshot=snapshot, path=path)
        finally:
            self.ticks += 1
            self.state = SchedulerState.IDLE

    def run(self) -> None:
        """Loop until stopped or `max_ticks` is reached."""
        logger.info(
            "Starting catalog generation every %ss into %s",
            self.config.period_seconds,
            self.config.destination_path,
        )
        try:
            while not self.stop_event.is_set():
                try:
                    self.run_once()
                except Exception:
                    logger.exception("Snapshot tick failed")
                if self.max_ticks is not None and self.ticks >= self.max_ticks:
                    break
                if self.stop_event.wait(self.config.period_seconds):
                    break
        finally:
            self.state = SchedulerState.STOPPED
            logger.info("Stopping catalog generation")

    def start(self) -> threading.Thread:
        """Run the loop in a background thread."""
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("Snapshot scheduler is already running.")
        self._thread = threading.Thread(
            target=self.run, name="usage-log-scheduler", daemon=False
        )
        self._thread.start()
        return self._thread

    def stop(self) -> None:
        """Signal the loop to exit."""
        self.stop_event.set()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the background thread to exit."""
        if self._thread is not None:
            self._thread.join(timeout)

    def is_alive(self) -> bool:
        """Return whether the background thread is still running."""
        return self._thread is not None and self._thread.is_alive()
