"""Shared raw Kubernetes object builders for tests."""

from __future__ import annotations

from typing import Any

import pytest

from usagelog.infrastructure.cluster_reader import ClusterReadError


def raw_namespace(name: str, **labels: str) -> dict[str, Any]:
    return {
        "metadata": {
            "name": name,
            "annotations": {"owner": "team-a"},
            "labels": dict(labels),
        }
    }


def raw_pod(
    name: str,
    namespace: str,
    *,
    uid: str | None = None,
    containers: list[dict[str, Any]] | None = None,
    owners: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return {
        "metadata": {
            "name": name,
            "namespace": namespace,
            "uid": uid or f"uid-{name}",
            "labels": {"app": name},
            "ownerReferences": owners or [],
        },
        "spec": {"nodeName": "node-1", "containers": containers or []},
        "status": {"phase": "Running", "podIP": "10.1.0.5"},
    }


def raw_quota(name: str, namespace: str) -> dict[str, Any]:
    return {
        "metadata": {"name": name, "namespace": namespace},
        "spec": {"hard": {"limits.cpu": "4", "limits.memory": "8Gi"}},
        "status": {
            "hard": {"limits.cpu": "4", "limits.memory": "8Gi"},
            "used": {"limits.cpu": "1500m", "requests.memory": "1Gi"},
        },
    }


def raw_node(name: str) -> dict[str, Any]:
    return {
        "metadata": {"name": name, "labels": {"role": "worker"}},
        "spec": {"externalID": f"ext-{name}"},
        "status": {
            "addresses": [
                {"type": "InternalIP", "address": "10.0.0.1"},
                {"type": "ExternalIP", "address": "1.2.3.4"},
            ],
            "conditions": [
                {"type": "MemoryPressure", "status": "False"},
                {"type": "Ready", "status": "True"},
            ],
            "allocatable": {"cpu": "3920m", "memory": "15Gi", "pods": "110"},
            "capacity": {"cpu": "4", "memory": "16Gi", "pods": "110"},
        },
    }


class FakeClusterReader:
    """In-memory cluster reader; `fail_on` names the list call that raises."""

    def __init__(
        self,
        *,
        namespaces: list[dict[str, Any]] | None = None,
        pods: list[dict[str, Any]] | None = None,
        quotas: list[dict[str, Any]] | None = None,
        nodes: list[dict[str, Any]] | None = None,
        fail_on: str | None = None,
    ) -> None:
        self.namespaces = namespaces or []
        self.pods = pods or []
        self.quotas = quotas or []
        self.nodes = nodes or []
        self.fail_on = fail_on
        self.calls: list[str] = []

    def _list(self, kind: str, items: list[dict[str, Any]]) -> list[dict[str, Any]]:
        self.calls.append(kind)
        if self.fail_on == kind:
            raise ClusterReadError(f"{kind} unavailable")
        return items

    def list_namespaces(self) -> list[dict[str, Any]]:
        return self._list("namespaces", self.namespaces)

    def list_pods(self) -> list[dict[str, Any]]:
        return self._list("pods", self.pods)

    def list_quotas(self) -> list[dict[str, Any]]:
        return self._list("quotas", self.quotas)

    def list_nodes(self) -> list[dict[str, Any]]:
        return self._list("nodes", self.nodes)


@pytest.fixture
def reader() -> FakeClusterReader:
    return FakeClusterReader(
        namespaces=[raw_namespace("ns-a"), raw_namespace("ns-b")],
        pods=[raw_pod("p1", "ns-a"), raw_pod("p2", "ns-b")],
        quotas=[raw_quota("q1", "ns-a")],
        nodes=[raw_node("node-1")],
    )
