"""Fetch one tick of cluster inventory and aggregate it."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from usagelog.application.aggregator import build_snapshot
from usagelog.domain.catalog_models import Snapshot
from usagelog.infrastructure.cluster_reader import ClusterReader, ClusterReadError

logger = logging.getLogger(__name__)


def _fetch_order(
    reader: ClusterReader,
) -> tuple[tuple[str, Callable[[], list[dict[str, Any]]]], ...]:
    return (
        ("namespaces", reader.list_namespaces),
        ("pods", reader.list_pods),
        ("resource quotas", reader.list_quotas),
        ("nodes", reader.list_nodes),
    )


def audit_cluster(reader: ClusterReader, cluster_id: str) -> Snapshot:
    """Fetch namespaces, pods, quotas and nodes, then build a snapshot.

    The first failing fetch stops the tick; the returned snapshot is then
    empty apart from its error message.
    """
    collections: list[list[dict[str, Any]]] = []
    for kind, fetch in _fetch_order(reader):
        try:
            collections.append(fetch())
        except ClusterReadError as exc:
            message = f"Unable to return list of {kind}: {exc}"
            logger.warning(message)
            return Snapshot(cluster_id=cluster_id, success=False, error_message=message)

    snapshot = build_snapshot(*collections)
    snapshot.cluster_id = cluster_id
    if snapshot.aggregation_errors:
        snapshot.success = False
        snapshot.error_message = (
            f"{len(snapshot.aggregation_errors)} aggregation error(s) recorded"
        )
    else:
        snapshot.success = True
    return snapshot
