"""Tests for one-tick cluster auditing."""

from __future__ import annotations

import pytest
from conftest import FakeClusterReader, raw_namespace, raw_pod

from usagelog.application.catalog_service import audit_cluster


def test_successful_audit(reader: FakeClusterReader) -> None:
    snapshot = audit_cluster(reader, "east-1")
    assert snapshot.success is True
    assert snapshot.error_message == ""
    assert snapshot.cluster_id == "east-1"
    assert snapshot.pod_count == 2
    assert snapshot.quota_count == 1
    assert reader.calls == ["namespaces", "pods", "quotas", "nodes"]


@pytest.mark.parametrize(
    ("fail_on", "label", "calls"),
    [
        ("namespaces", "namespaces", ["namespaces"]),
        ("pods", "pods", ["namespaces", "pods"]),
        ("quotas", "resource quotas", ["namespaces", "pods", "quotas"]),
        ("nodes", "nodes", ["namespaces", "pods", "quotas", "nodes"]),
    ],
)
def test_first_fetch_failure_wins(
    reader: FakeClusterReader, fail_on: str, label: str, calls: list[str]
) -> None:
    reader.fail_on = fail_on
    snapshot = audit_cluster(reader, "east-1")
    assert snapshot.success is False
    assert snapshot.error_message.startswith(f"Unable to return list of {label}")
    assert snapshot.cluster_id == "east-1"
    assert snapshot.namespaces == []
    assert snapshot.nodes == []
    assert reader.calls == calls


def test_aggregation_errors_clear_success() -> None:
    reader = FakeClusterReader(
        namespaces=[raw_namespace("ns-a")],
        pods=[raw_pod("p1", "ns-a"), raw_pod("p2", "missing")],
    )
    snapshot = audit_cluster(reader, "east-1")
    assert snapshot.success is False
    assert snapshot.error_message == "1 aggregation error(s) recorded"
    assert snapshot.pod_count == 1
