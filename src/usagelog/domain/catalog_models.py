"""Data models for cluster inventory snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ResourceValues:
    """CPU/memory limit and request quadruple in native units."""

    name: str = ""
    cpu_limits: int = 0
    memory_limits: int = 0
    cpu_requests: int = 0
    memory_requests: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to serializable dict."""
        return {
            "name": self.name,
            "cpuLimits": self.cpu_limits,
            "memoryLimits": self.memory_limits,
            "cpuRequests": self.cpu_requests,
            "memoryRequests": self.memory_requests,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResourceValues:
        """Create from dict."""
        return cls(
            name=data.get("name", ""),
            cpu_limits=data.get("cpuLimits", 0),
            memory_limits=data.get("memoryLimits", 0),
            cpu_requests=data.get("cpuRequests", 0),
            memory_requests=data.get("memoryRequests", 0),
        )


@dataclass
class Owner:
    """Owner reference of a pod.

    ``controller`` and ``block_owner_deletion`` stay ``None`` when the
    inventory omits them.
    """

    api_version: str
    kind: str
    name: str
    controller: bool | None = None
    block_owner_deletion: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to serializable dict."""
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "name": self.name,
            "controller": self.controller,
            "blockOwnerDeletion": self.block_owner_deletion,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Owner:
        """Create from dict."""
        return cls(
            api_version=data.get("apiVersion", ""),
            kind=data.get("kind", ""),
            name=data.get("name", ""),
            controller=data.get("controller"),
            block_owner_deletion=data.get("blockOwnerDeletion"),
        )


@dataclass
class Container:
    """Container image and declared resources."""

    name: str
    image: str
    resources: ResourceValues
    owner_uid: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to serializable dict."""
        return {
            "name": self.name,
            "image": self.image,
            "resources": self.resources.to_dict(),
            "ownerUid": self.owner_uid,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Container:
        """Create from dict."""
        return cls(
            name=data.get("name", ""),
            image=data.get("image", ""),
            resources=ResourceValues.from_dict(data.get("resources", {})),
            owner_uid=data.get("ownerUid", ""),
        )


@dataclass
class Pod:
    """Pod with owners and containers."""

    name: str
    namespace: str
    node_name: str = ""
    uid: str = ""
    status: str = ""
    ip: str = ""
    annotations: dict[str, str] = field(default_factory=dict)
    labels: dict[str, str] = field(default_factory=dict)
    owners: list[Owner] = field(default_factory=list)
    containers: list[Container] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to serializable dict."""
        return {
            "name": self.name,
            "namespace": self.namespace,
            "nodeName": self.node_name,
            "uid": self.uid,
            "status": self.status,
            "ip": self.ip,
            "annotations": dict(self.annotations),
            "labels": dict(self.labels),
            "owners": [owner.to_dict() for owner in self.owners],
            "containers": [container.to_dict() for container in self.containers],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Pod:
        """Create from dict."""
        return cls(
            name=data.get("name", ""),
            namespace=data.get("namespace", ""),
            node_name=data.get("nodeName", ""),
            uid=data.get("uid", ""),
            status=data.get("status", ""),
            ip=data.get("ip", ""),
            annotations=dict(data.get("annotations") or {}),
            labels=dict(data.get("labels") or {}),
            owners=[Owner.from_dict(o) for o in data.get("owners") or []],
            containers=[Container.from_dict(c) for c in data.get("containers") or []],
        )


@dataclass
class ResourceQuota:
    """Namespace quota with spec and status resource groups."""

    name: str
    namespace: str
    spec_hard_resources: ResourceValues = field(default_factory=ResourceValues)
    status_hard_resources: ResourceValues = field(default_factory=ResourceValues)
    status_used_resources: ResourceValues = field(default_factory=ResourceValues)

    def to_dict(self) -> dict[str, Any]:
        """Convert to serializable dict."""
        return {
            "name": self.name,
            "namespace": self.namespace,
            "specHardResources": self.spec_hard_resources.to_dict(),
            "statusHardResources": self.status_hard_resources.to_dict(),
            "statusUsedResources": self.status_used_resources.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResourceQuota:
        """Create from dict."""
        return cls(
            name=data.get("name", ""),
            namespace=data.get("namespace", ""),
            spec_hard_resources=ResourceValues.from_dict(
                data.get("specHardResources", {})
            ),
            status_hard_resources=ResourceValues.from_dict(
                data.get("statusHardResources", {})
            ),
            status_used_resources=ResourceValues.from_dict(
                data.get("statusUsedResources", {})
            ),
        )


@dataclass
class Namespace:
    """Namespace owning its pods and quotas."""

    name: str
    annotations: dict[str, str] = field(default_factory=dict)
    labels: dict[str, str] = field(default_factory=dict)
    resource_quotas: list[ResourceQuota] = field(default_factory=list)
    pods: list[Pod] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to serializable dict."""
        return {
            "name": self.name,
            "annotations": dict(self.annotations),
            "labels": dict(self.labels),
            "resourceQuotas": [quota.to_dict() for quota in self.resource_quotas],
            "pods": [pod.to_dict() for pod in self.pods],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Namespace:
        """Create from dict."""
        return cls(
            name=data.get("name", ""),
            annotations=dict(data.get("annotations") or {}),
            labels=dict(data.get("labels") or {}),
            resource_quotas=[
                ResourceQuota.from_dict(q) for q in data.get("resourceQuotas") or []
            ],
            pods=[Pod.from_dict(p) for p in data.get("pods") or []],
        )


@dataclass
class Node:
    """Node addresses, capacity and readiness."""

    name: str
    external_id: str = ""
    internal_ip: str = ""
    external_ip: str = ""
    allocatable: ResourceValues = field(default_factory=ResourceValues)
    capacity: ResourceValues = field(default_factory=ResourceValues)
    status: str = ""
    labels: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to serializable dict."""
        return {
            "name": self.name,
            "externalId": self.external_id,
            "internalIp": self.internal_ip,
            "externalIp": self.external_ip,
            "allocatable": self.allocatable.to_dict(),
            "capacity": self.capacity.to_dict(),
            "status": self.status,
            "labels": dict(self.labels),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Node:
        """Create from dict."""
        return cls(
            name=data.get("name", ""),
            external_id=data.get("externalId", ""),
            internal_ip=data.get("internalIp", ""),
            external_ip=data.get("externalIp", ""),
            allocatable=ResourceValues.from_dict(data.get("allocatable", {})),
            capacity=ResourceValues.from_dict(data.get("capacity", {})),
            status=data.get("status", ""),
            labels=dict(data.get("labels") or {}),
        )


@dataclass
class Snapshot:
    """Complete cluster inventory produced by one scheduler tick."""

    cluster_id: str = ""
    time: str = ""
    duration: float = 0.0
    nodes: list[Node] = field(default_factory=list)
    namespaces: list[Namespace] = field(default_factory=list)
    success: bool = False
    error_message: str = ""
    aggregation_errors: list[str] = field(default_factory=list)

    @property
    def pod_count(self) -> int:
        """Return number of pods attached across namespaces."""
        return sum(len(ns.pods) for ns in self.namespaces)

    @property
    def quota_count(self) -> int:
        """Return number of quotas attached across namespaces."""
        return sum(len(ns.resource_quotas) for ns in self.namespaces)

    def to_dict(self) -> dict[str, Any]:
        """Convert to serializable dict."""
        return {
            "clusterId": self.cluster_id,
            "time": self.time,
            "duration": self.duration,
            "nodes": [node.to_dict() for node in self.nodes],
            "namespaces": [ns.to_dict() for ns in self.namespaces],
            "success": self.success,
            "errorMessage": self.error_message,
            "aggregationErrors": list(self.aggregation_errors),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Snapshot:
        """Create from dict."""
        return cls(
            cluster_id=data.get("clusterId", ""),
            time=data.get("time", ""),
            duration=float(data.get("duration", 0.0)),
            nodes=[Node.from_dict(n) for n in data.get("nodes") or []],
            namespaces=[Namespace.from_dict(ns) for ns in data.get("namespaces") or []],
            success=bool(data.get("success", False)),
            error_message=data.get("errorMessage", ""),
            aggregation_errors=list(data.get("aggregationErrors") or []),
        )
