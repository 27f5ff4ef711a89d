"""Cluster inventory readers."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Protocol

from usagelog.config import SnapshotConfig
from usagelog.infrastructure.kubectl_client import KubectlError, kubectl_json

logger = logging.getLogger(__name__)

SERVICE_ACCOUNT_TOKEN = Path("/var/run/secrets/kubernetes.io/serviceaccount/token")


class ClusterReadError(RuntimeError):
    """Raised when a cluster inventory list cannot be fetched."""


class ClusterReader(Protocol):
    """Capability listing raw inventory objects of one cluster."""

    def list_namespaces(self) -> list[dict[str, Any]]: ...

    def list_pods(self) -> list[dict[str, Any]]: ...

    def list_quotas(self) -> list[dict[str, Any]]: ...

    def list_nodes(self) -> list[dict[str, Any]]: ...


class KubectlClusterReader:
    """Cluster reader backed by `kubectl get ... -o json`."""

    def __init__(
        self,
        kubeconfig: Path | None = None,
        *,
        timeout_seconds: float | None = 120.0,
    ) -> None:
        self.kubeconfig = kubeconfig
        self.timeout_seconds = timeout_seconds

    def _items(self, command: str) -> list[dict[str, Any]]:
        try:
            payload = kubectl_json(
                command,
                kubeconfig=self.kubeconfig,
                timeout_seconds=self.timeout_seconds,
            )
        except KubectlError as exc:
            raise ClusterReadError(str(exc)) from exc
        items = payload.get("items") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            raise ClusterReadError(f"unexpected kubectl payload for `{command}`")
        return items

    def list_namespaces(self) -> list[dict[str, Any]]:
        return self._items("get namespaces")

    def list_pods(self) -> list[dict[str, Any]]:
        return self._items("get pods -A")

    def list_quotas(self) -> list[dict[str, Any]]:
        return self._items("get resourcequotas -A")

    def list_nodes(self) -> list[dict[str, Any]]:
        return self._items("get nodes")


def resolve_cluster_reader(
    config: SnapshotConfig,
    *,
    token_path: Path = SERVICE_ACCOUNT_TOKEN,
) -> KubectlClusterReader:
    """Validate credential mode and return a reader.

    In-cluster mode relies on the pod service account that kubectl picks up
    on its own; external mode passes the configured kubeconfig.
    """
    if config.internal:
        if not os.getenv("KUBERNETES_SERVICE_HOST") or not token_path.exists():
            raise ValueError(
                "In-cluster credentials unavailable: "
                "KUBERNETES_SERVICE_HOST or service account token missing."
            )
        logger.info("Using in-cluster credentials")
        return KubectlClusterReader()

    if not config.kubeconfig.is_file():
        raise ValueError(f"Kubeconfig not found: {config.kubeconfig}")
    logger.info("Using kubeconfig %s", config.kubeconfig)
    return KubectlClusterReader(config.kubeconfig)
