"""Tests for the snapshot scheduler."""

from __future__ import annotations

import subprocess
import threading
import time
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any
from unittest.mock import patch

from conftest import FakeClusterReader

from usagelog.application.partition_writer import PartitionedWriter, read_snapshot
from usagelog.application.scheduler import SchedulerState, SnapshotScheduler
from usagelog.config import SnapshotConfig
from usagelog.domain.catalog_models import Snapshot
from usagelog.infrastructure.cluster_reader import KubectlClusterReader


def _clock(*offsets: float) -> Iterator[datetime]:
    base = datetime(2024, 5, 31, 23, 59, 0, tzinfo=UTC)
    return iter(base + timedelta(seconds=o) for o in offsets)


def _config(tmp_path: Path, period: int = 60) -> SnapshotConfig:
    return SnapshotConfig(
        cluster_id="east-1", period_seconds=period, destination_path=tmp_path
    )


def test_duration_measures_time_since_previous_tick_start(
    tmp_path: Path, reader: FakeClusterReader
) -> None:
    ticks = _clock(0, 61.5, 125)
    scheduler = SnapshotScheduler(
        reader,
        PartitionedWriter(tmp_path),
        _config(tmp_path),
        clock=lambda: next(ticks),
    )

    first = scheduler.run_once()
    second = scheduler.run_once()
    third = scheduler.run_once()

    assert first.snapshot.duration == 0.0
    assert second.snapshot.duration == 61.5
    assert third.snapshot.duration == 63.5
    assert first.snapshot.time == "2024-05-31T23:59:00Z"
    assert scheduler.ticks == 3
    assert scheduler.state is SchedulerState.IDLE


def test_ticks_land_in_month_partitions(
    tmp_path: Path, reader: FakeClusterReader
) -> None:
    ticks = _clock(0, 120)
    scheduler = SnapshotScheduler(
        reader,
        PartitionedWriter(tmp_path),
        _config(tmp_path),
        clock=lambda: next(ticks),
    )
    may = scheduler.run_once().path
    june = scheduler.run_once().path
    assert may is not None and june is not None
    assert may.parent.name == "period=20240501-20240601"
    assert june.parent.name == "period=20240601-20240701"


def test_fetch_failure_still_writes_snapshot(
    tmp_path: Path, reader: FakeClusterReader
) -> None:
    reader.fail_on = "pods"
    writer = PartitionedWriter(tmp_path)
    scheduler = SnapshotScheduler(reader, writer, _config(tmp_path))

    result = scheduler.run_once()

    assert result.path is not None and result.path.exists()
    stored = read_snapshot(result.path)
    assert stored.error_message.startswith("Unable to return list of pods")
    assert stored.success is False
    assert stored.namespaces == []
    assert stored.nodes == []


def test_preview_tick_does_not_write(tmp_path: Path, reader: FakeClusterReader) -> None:
    writer = PartitionedWriter(tmp_path)
    scheduler = SnapshotScheduler(reader, writer, _config(tmp_path))
    result = scheduler.run_once(write=False)
    assert result.path is None
    assert result.snapshot.success is True
    assert list(tmp_path.iterdir()) == []


def test_run_stops_after_max_ticks(tmp_path: Path, reader: FakeClusterReader) -> None:
    scheduler = SnapshotScheduler(
        reader, PartitionedWriter(tmp_path), _config(tmp_path), max_ticks=1
    )
    scheduler.run()
    assert scheduler.ticks == 1
    assert scheduler.state is SchedulerState.STOPPED


def test_run_exits_immediately_when_already_stopped(
    tmp_path: Path, reader: FakeClusterReader
) -> None:
    stop = threading.Event()
    stop.set()
    scheduler = SnapshotScheduler(
        reader, PartitionedWriter(tmp_path), _config(tmp_path), stop_event=stop
    )
    scheduler.run()
    assert scheduler.ticks == 0
    assert reader.calls == []


class _SignallingWriter(PartitionedWriter):
    def __init__(self, base_path: Path) -> None:
        super().__init__(base_path)
        self.written = threading.Event()

    def write(
        self,
        snapshot: Snapshot,
        cluster_id: str,
        *,
        taken_at: datetime | None = None,
    ) -> Path | None:
        path = super().write(snapshot, cluster_id, taken_at=taken_at)
        self.written.set()
        return path


def test_stop_interrupts_sleep(tmp_path: Path, reader: FakeClusterReader) -> None:
    writer = _SignallingWriter(tmp_path)
    scheduler = SnapshotScheduler(reader, writer, _config(tmp_path, period=3600))

    scheduler.start()
    assert writer.written.wait(timeout=5)
    started = time.monotonic()
    scheduler.stop()
    scheduler.join(timeout=5)

    assert not scheduler.is_alive()
    assert time.monotonic() - started < 5
    assert scheduler.ticks == 1
    assert scheduler.state is SchedulerState.STOPPED


def test_unexpected_tick_error_does_not_stop_loop(tmp_path: Path) -> None:
    class _BrokenReader(FakeClusterReader):
        def list_pods(self) -> list[dict[str, Any]]:
            raise ConnectionError("connection reset by peer")

    scheduler = SnapshotScheduler(
        _BrokenReader(), PartitionedWriter(tmp_path), _config(tmp_path), max_ticks=1
    )
    scheduler.run()
    assert scheduler.ticks == 1
    assert scheduler.state is SchedulerState.STOPPED

    files = list(tmp_path.rglob("*.json"))
    assert len(files) == 1
    stored = read_snapshot(files[0])
    assert stored.error_message == (
        "Unable to build snapshot: connection reset by peer"
    )
    assert stored.success is False
    assert stored.cluster_id == "east-1"
    assert stored.time


def test_malformed_kubectl_payload_writes_error_snapshot(tmp_path: Path) -> None:
    scheduler = SnapshotScheduler(
        KubectlClusterReader(), PartitionedWriter(tmp_path), _config(tmp_path)
    )
    with patch(
        "usagelog.infrastructure.kubectl_client.subprocess.run",
        return_value=subprocess.CompletedProcess(
            args=[], returncode=0, stdout="[]", stderr=""
        ),
    ):
        result = scheduler.run_once()

    assert result.path is not None
    stored = read_snapshot(result.path)
    assert stored.error_message.startswith("Unable to return list of namespaces")
    assert stored.success is False


def test_ticks_within_one_second_keep_separate_files(
    tmp_path: Path, reader: FakeClusterReader
) -> None:
    ticks = _clock(0.1, 0.6)
    scheduler = SnapshotScheduler(
        reader,
        PartitionedWriter(tmp_path),
        _config(tmp_path),
        clock=lambda: next(ticks),
    )
    first = scheduler.run_once()
    second = scheduler.run_once()

    assert first.snapshot.time == second.snapshot.time
    assert first.path != second.path
    assert len(list(tmp_path.rglob("*.json"))) == 2
