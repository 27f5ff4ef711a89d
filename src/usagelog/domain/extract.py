"""Extract raw Kubernetes objects into normalized catalog records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from usagelog.domain.catalog_models import (
    Container,
    Namespace,
    Node,
    Owner,
    Pod,
    ResourceQuota,
    ResourceValues,
)
from usagelog.domain.quantity_parser import parse_quantity

QUOTA_GROUPS: tuple[tuple[str, str, str], ...] = (
    ("spec.hard", "spec", "hard"),
    ("status.hard", "status", "hard"),
    ("status.used", "status", "used"),
)


def extract_resource_value(resources: Mapping[str, Any] | None, name: str) -> int:
    """Return the value of `name` in a resource list, or 0 when absent."""
    if not resources or name not in resources:
        return 0
    return parse_quantity(resources[name])


def extract_resource_values(
    name: str,
    resources: Mapping[str, Any] | None,
    *,
    cpu_limits: str = "limits.cpu",
    memory_limits: str = "limits.memory",
    cpu_requests: str = "requests.cpu",
    memory_requests: str = "requests.memory",
) -> ResourceValues:
    """Build a named ResourceValues group from a flat resource list."""
    return ResourceValues(
        name=name,
        cpu_limits=extract_resource_value(resources, cpu_limits),
        memory_limits=extract_resource_value(resources, memory_limits),
        cpu_requests=extract_resource_value(resources, cpu_requests),
        memory_requests=extract_resource_value(resources, memory_requests),
    )


def _metadata(item: Mapping[str, Any]) -> Mapping[str, Any]:
    return item.get("metadata") or {}


def _string_map(raw: Mapping[str, Any] | None) -> dict[str, str]:
    return {str(k): str(v) for k, v in (raw or {}).items()}


def extract_namespace(item: Mapping[str, Any]) -> Namespace:
    """Extract namespace name, annotations and labels."""
    metadata = _metadata(item)
    return Namespace(
        name=metadata.get("name", ""),
        annotations=_string_map(metadata.get("annotations")),
        labels=_string_map(metadata.get("labels")),
    )


def extract_owner(ref: Mapping[str, Any]) -> Owner:
    """Extract an owner reference, keeping missing flags as None."""
    return Owner(
        api_version=ref.get("apiVersion", ""),
        kind=ref.get("kind", ""),
        name=ref.get("name", ""),
        controller=ref.get("controller"),
        block_owner_deletion=ref.get("blockOwnerDeletion"),
    )


def extract_container(container: Mapping[str, Any], owner_uid: str) -> Container:
    """Extract container image and its declared limits/requests."""
    resources = container.get("resources") or {}
    limits = resources.get("limits") or {}
    requests = resources.get("requests") or {}
    flat = {f"limits.{key}": value for key, value in limits.items()}
    flat.update({f"requests.{key}": value for key, value in requests.items()})
    return Container(
        name=container.get("name", ""),
        image=container.get("image", ""),
        resources=extract_resource_values("resources", flat),
        owner_uid=owner_uid,
    )


def extract_pod(item: Mapping[str, Any]) -> Pod:
    """Extract pod metadata, owners and containers."""
    metadata = _metadata(item)
    spec = item.get("spec") or {}
    status = item.get("status") or {}
    uid = str(metadata.get("uid", ""))
    return Pod(
        name=metadata.get("name", ""),
        namespace=metadata.get("namespace", ""),
        node_name=spec.get("nodeName", ""),
        uid=uid,
        status=status.get("phase", ""),
        ip=status.get("podIP", ""),
        annotations=_string_map(metadata.get("annotations")),
        labels=_string_map(metadata.get("labels")),
        owners=[extract_owner(ref) for ref in metadata.get("ownerReferences") or []],
        containers=[extract_container(c, uid) for c in spec.get("containers") or []],
    )


def extract_quota(item: Mapping[str, Any]) -> ResourceQuota:
    """Extract quota with its spec.hard, status.hard and status.used groups."""
    metadata = _metadata(item)
    groups = [
        extract_resource_values(name, (item.get(section) or {}).get(key))
        for name, section, key in QUOTA_GROUPS
    ]
    return ResourceQuota(
        name=metadata.get("name", ""),
        namespace=metadata.get("namespace", ""),
        spec_hard_resources=groups[0],
        status_hard_resources=groups[1],
        status_used_resources=groups[2],
    )


def _node_resources(name: str, resources: Mapping[str, Any] | None) -> ResourceValues:
    # Node status lists carry bare totals and no requests.
    resources = resources or {}
    return ResourceValues(
        name=name,
        cpu_limits=extract_resource_value(resources, "cpu"),
        memory_limits=extract_resource_value(resources, "memory"),
    )


def extract_node(item: Mapping[str, Any]) -> Node:
    """Extract node addresses, capacity and Ready condition."""
    metadata = _metadata(item)
    spec = item.get("spec") or {}
    status = item.get("status") or {}

    internal_ip = ""
    external_ip = ""
    for address in status.get("addresses") or []:
        kind = address.get("type")
        if kind == "InternalIP" and not internal_ip:
            internal_ip = address.get("address", "")
        elif kind == "ExternalIP" and not external_ip:
            external_ip = address.get("address", "")

    ready = next(
        (c for c in status.get("conditions") or [] if c.get("type") == "Ready"),
        None,
    )

    return Node(
        name=metadata.get("name", ""),
        external_id=spec.get("externalID", ""),
        internal_ip=internal_ip,
        external_ip=external_ip,
        allocatable=_node_resources("allocatable", status.get("allocatable")),
        capacity=_node_resources("capacity", status.get("capacity")),
        status=str(ready.get("status", "")) if ready else "",
        labels=_string_map(metadata.get("labels")),
    )
