"""Assemble extracted inventory records into one snapshot."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from usagelog.domain.catalog_models import Namespace, Snapshot
from usagelog.domain.extract import (
    extract_namespace,
    extract_node,
    extract_pod,
    extract_quota,
)

logger = logging.getLogger(__name__)


def _missing_namespace(kind: str, namespace: str, name: str) -> str:
    return f"{kind} {namespace}/{name}: namespace {namespace} not found"


def build_snapshot(
    namespaces: Iterable[Mapping[str, Any]],
    pods: Iterable[Mapping[str, Any]],
    quotas: Iterable[Mapping[str, Any]],
    nodes: Iterable[Mapping[str, Any]],
) -> Snapshot:
    """Build a snapshot body from one tick's raw collections.

    Cluster id and timing fields are left for the caller. Pods and quotas
    whose namespace is unknown are skipped and reported in
    `aggregation_errors`.
    """
    snapshot = Snapshot()
    index: dict[str, Namespace] = {}

    # All namespaces must exist before children are attached.
    for item in namespaces:
        namespace = extract_namespace(item)
        if namespace.name in index:
            snapshot.aggregation_errors.append(
                f"namespace {namespace.name}: duplicate namespace record ignored"
            )
            continue
        index[namespace.name] = namespace
        snapshot.namespaces.append(namespace)

    for item in pods:
        pod = extract_pod(item)
        parent = index.get(pod.namespace)
        if parent is None:
            snapshot.aggregation_errors.append(
                _missing_namespace("pod", pod.namespace, pod.name)
            )
            continue
        parent.pods.append(pod)

    for item in quotas:
        quota = extract_quota(item)
        parent = index.get(quota.namespace)
        if parent is None:
            snapshot.aggregation_errors.append(
                _missing_namespace("resourcequota", quota.namespace, quota.name)
            )
            continue
        parent.resource_quotas.append(quota)

    snapshot.nodes.extend(extract_node(item) for item in nodes)

    for message in snapshot.aggregation_errors:
        logger.warning("Aggregation inconsistency: %s", message)
    return snapshot
