"""Network parser - services, endpoints, ingresses and volume claims."""

from __future__ import annotations

from typing import Any

from kubesnap.controllers.cluster.parsers.common import (
    as_list,
    created_at,
    metadata_of,
    resource_id,
    section,
    string_map,
)
from kubesnap.models.core.network_info import (
    IngressSummary,
    PersistentVolumeClaimSummary,
    ServiceSummary,
)
from kubesnap.utils.resource_parser import memory_str_to_bytes


class NetworkParser:
    """Parses namespaced network and storage resources."""

    def __init__(self, context: str, namespace: str) -> None:
        self.context = context
        self.namespace = namespace

    def parse_service(
        self,
        item: dict[str, Any],
        endpoints: dict[str, list[str]] | None = None,
    ) -> ServiceSummary:
        metadata = metadata_of(item)
        spec = section(item, "spec")
        name = str(metadata.get("name", ""))

        ports: list[str] = []
        for port in as_list(spec.get("ports")):
            if not isinstance(port, dict):
                continue
            number = "" if port.get("port") is None else str(port["port"])
            proto = port.get("protocol") or ""
            ports.append(f"{number}/{proto}" if proto else number)

        target_pods = list((endpoints or {}).get(name, []))
        return ServiceSummary(
            id=resource_id(item, self.context, self.namespace, "Service"),
            name=name,
            type=str(spec.get("type") or "ClusterIP"),
            cluster_ip=spec.get("clusterIP"),
            ports=ports,
            created_at=created_at(item),
            selector=string_map(spec.get("selector")),
            target_pods=target_pods,
            endpoint_count=len(set(target_pods)),
        )

    @staticmethod
    def parse_endpoints(items: list[dict[str, Any]]) -> dict[str, list[str]]:
        """Map service name to the sorted, distinct pods behind its endpoints."""
        mapping: dict[str, list[str]] = {}
        for item in items:
            pods: set[str] = set()
            for subset in as_list(item.get("subsets")):
                if not isinstance(subset, dict):
                    continue
                for address in as_list(subset.get("addresses")):
                    if not isinstance(address, dict):
                        continue
                    target = section(address, "targetRef")
                    if str(target.get("kind", "")).lower() == "pod" and target.get("name"):
                        pods.add(str(target["name"]))
            if pods:
                mapping[str(metadata_of(item).get("name", ""))] = sorted(pods)
        return mapping

    def parse_ingress(self, item: dict[str, Any]) -> IngressSummary:
        spec = section(item, "spec")
        host_rules: list[str] = []
        targets: list[str] = []
        for rule in as_list(spec.get("rules")):
            if not isinstance(rule, dict):
                continue
            host = rule.get("host") or "*"
            paths = [p for p in as_list(section(rule, "http").get("paths")) if isinstance(p, dict)]
            path_names = [str(p.get("path") or "/") for p in paths] or ["/"]
            host_rules.append(f"{host} -> {', '.join(path_names)}")
            for path in paths:
                service = section(section(path, "backend"), "service")
                if not service.get("name"):
                    continue
                port = section(service, "port")
                if port.get("number") is not None:
                    targets.append(f"{service['name']}:{port['number']}")
                elif port.get("name"):
                    targets.append(f"{service['name']}:{port['name']}")
                else:
                    targets.append(str(service["name"]))

        return IngressSummary(
            id=resource_id(item, self.context, self.namespace, "Ingress"),
            name=str(metadata_of(item).get("name", "")),
            class_name=spec.get("ingressClassName"),
            host_rules=host_rules,
            service_targets=targets,
            tls=bool(as_list(spec.get("tls"))),
            created_at=created_at(item),
        )

    def parse_pvc(self, item: dict[str, Any]) -> PersistentVolumeClaimSummary:
        spec = section(item, "spec")
        status = section(item, "status")
        return PersistentVolumeClaimSummary(
            id=resource_id(item, self.context, self.namespace, "PersistentVolumeClaim"),
            name=str(metadata_of(item).get("name", "")),
            status=str(status.get("phase") or "Unknown"),
            capacity_bytes=memory_str_to_bytes(section(status, "capacity").get("storage")),
            storage_class=spec.get("storageClassName"),
            volume_name=spec.get("volumeName"),
            created_at=created_at(item),
        )
