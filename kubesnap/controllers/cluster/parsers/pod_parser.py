"""Pod parser - builds PodSummary rows and PodDetail views."""

from __future__ import annotations

from typing import Any

from kubesnap.constants.enums import ContainerState, PodPhase
from kubesnap.controllers.cluster.parsers.common import (
    as_int,
    as_list,
    created_at,
    metadata_of,
    optional_int,
    owner_description,
    resource_id,
    section,
    string_map,
)
from kubesnap.models.core.pod_info import (
    ContainerDetail,
    PodCondition,
    PodDetail,
    PodSummary,
    PodToleration,
    PodVolume,
    ProbeDetail,
)
from kubesnap.utils.resource_parser import (
    ResourceUsage,
    aggregate_container_resources,
    usage_ratio,
)

# Checked in order; the first key present on the volume names its type.
_VOLUME_TYPES: tuple[tuple[str, str], ...] = (
    ("projected", "Projected"),
    ("configMap", "ConfigMap"),
    ("secret", "Secret"),
    ("persistentVolumeClaim", "PVC"),
    ("emptyDir", "EmptyDir"),
    ("downwardAPI", "DownwardAPI"),
    ("hostPath", "HostPath"),
)


def pod_key(namespace: str, name: str) -> str:
    """Key used to join pods with kubelet stats."""
    return f"{namespace}/{name}"


def _phase(raw: Any) -> PodPhase:
    try:
        return PodPhase(str(raw or "unknown").lower())
    except ValueError:
        return PodPhase.UNKNOWN


class PodParser:
    """Parses pod items for one context."""

    def __init__(self, context: str) -> None:
        self.context = context

    def parse_summary(
        self,
        item: dict[str, Any],
        namespace: str,
        usage: ResourceUsage | None = None,
        disk_usage_bytes: float | None = None,
    ) -> PodSummary:
        """Parse one pod list item.

        Args:
            item: Raw pod item.
            namespace: Namespace the list was queried in.
            usage: Metrics-API usage for this pod, when available.
            disk_usage_bytes: Kubelet-reported disk usage, when available.
        """
        metadata = metadata_of(item)
        spec = section(item, "spec")
        status = section(item, "status")
        namespace_name = str(metadata.get("namespace") or namespace)

        containers = [c for c in as_list(spec.get("containers")) if isinstance(c, dict)]
        container_names = [str(c.get("name", "")) for c in containers]
        statuses = [s for s in as_list(status.get("containerStatuses")) if isinstance(s, dict)]
        ready_count = sum(1 for s in statuses if s.get("ready") is True)
        restarts = sum(as_int(s.get("restartCount")) for s in statuses)
        warnings = sum(
            1
            for s in statuses
            if s.get("ready") is not True or as_int(s.get("restartCount")) > 0
        )

        totals = aggregate_container_resources(containers)
        usage = usage or ResourceUsage()

        return PodSummary(
            id=resource_id(item, self.context, namespace_name, "Pod"),
            name=str(metadata.get("name", "")),
            namespace=namespace_name,
            phase=_phase(status.get("phase")),
            ready_containers=ready_count,
            total_containers=len(containers),
            restarts=restarts,
            node_name=str(spec.get("nodeName") or ""),
            container_names=container_names,
            warning_count=warnings,
            controlled_by=owner_description(metadata),
            qos_class=status.get("qosClass"),
            created_at=created_at(item),
            cpu_usage_cores=usage.cpu_cores,
            memory_usage_bytes=usage.memory_bytes,
            disk_usage_bytes=disk_usage_bytes,
            cpu_request=totals.cpu_request,
            cpu_limit=totals.cpu_limit,
            memory_request=totals.memory_request,
            memory_limit=totals.memory_limit,
            storage_request=totals.storage_request,
            storage_limit=totals.storage_limit,
            cpu_usage_ratio=usage_ratio(usage.cpu_cores, totals.cpu_request, totals.cpu_limit),
            memory_usage_ratio=usage_ratio(
                usage.memory_bytes, totals.memory_request, totals.memory_limit
            ),
            disk_usage_ratio=usage_ratio(
                disk_usage_bytes, totals.storage_request, totals.storage_limit
            ),
        )

    def parse_detail(self, item: dict[str, Any]) -> PodDetail:
        """Parse a single ``get pod -o json`` object."""
        metadata = metadata_of(item)
        spec = section(item, "spec")
        status = section(item, "status")

        statuses = {
            str(s.get("name")): s
            for s in as_list(status.get("containerStatuses"))
            if isinstance(s, dict)
        }
        init_statuses = {
            str(s.get("name")): s
            for s in as_list(status.get("initContainerStatuses"))
            if isinstance(s, dict)
        }

        return PodDetail(
            name=str(metadata.get("name", "")),
            namespace=str(metadata.get("namespace") or ""),
            created_at=created_at(item),
            labels=string_map(metadata.get("labels")),
            annotations=string_map(metadata.get("annotations")),
            controlled_by=owner_description(metadata),
            status=str(status.get("phase") or "Unknown"),
            node_name=str(spec.get("nodeName") or ""),
            pod_ip=status.get("podIP"),
            pod_ips=[
                str(entry["ip"])
                for entry in as_list(status.get("podIPs"))
                if isinstance(entry, dict) and entry.get("ip")
            ],
            service_account=spec.get("serviceAccountName") or spec.get("serviceAccount"),
            qos_class=status.get("qosClass"),
            conditions=[
                PodCondition(
                    type=str(c.get("type", "")),
                    status=str(c.get("status", "")),
                    reason=c.get("reason"),
                    message=c.get("message"),
                )
                for c in as_list(status.get("conditions"))
                if isinstance(c, dict)
            ],
            tolerations=[
                PodToleration(
                    key=t.get("key"),
                    operator=t.get("operator"),
                    value=t.get("value"),
                    effect=t.get("effect"),
                    toleration_seconds=optional_int(t.get("tolerationSeconds")),
                )
                for t in as_list(spec.get("tolerations"))
                if isinstance(t, dict)
            ],
            volumes=[
                self._parse_volume(v) for v in as_list(spec.get("volumes")) if isinstance(v, dict)
            ],
            init_containers=[
                self._parse_container(c, init_statuses.get(str(c.get("name"))))
                for c in as_list(spec.get("initContainers"))
                if isinstance(c, dict)
            ],
            containers=[
                self._parse_container(c, statuses.get(str(c.get("name"))))
                for c in as_list(spec.get("containers"))
                if isinstance(c, dict)
            ],
        )

    @staticmethod
    def _parse_volume(volume: dict[str, Any]) -> PodVolume:
        volume_type = next(
            (label for key, label in _VOLUME_TYPES if volume.get(key) is not None),
            "Volume",
        )
        return PodVolume(name=str(volume.get("name", "")), type=volume_type)

    @classmethod
    def _parse_container(
        cls,
        container: dict[str, Any],
        status: dict[str, Any] | None,
    ) -> ContainerDetail:
        resources = section(container, "resources")
        return ContainerDetail(
            name=str(container.get("name", "")),
            image=str(container.get("image") or ""),
            state=cls._container_state(status),
            ready=bool(status and status.get("ready") is True),
            ports=cls._format_ports(as_list(container.get("ports"))),
            env_count=len(as_list(container.get("env"))),
            mount_count=len(as_list(container.get("volumeMounts"))),
            args=[str(arg) for arg in as_list(container.get("args"))],
            command=[str(arg) for arg in as_list(container.get("command"))],
            requests=string_map(resources.get("requests")),
            limits=string_map(resources.get("limits")),
            liveness_probe=cls._parse_probe(container.get("livenessProbe")),
            readiness_probe=cls._parse_probe(container.get("readinessProbe")),
            startup_probe=cls._parse_probe(container.get("startupProbe")),
        )

    @staticmethod
    def _container_state(status: dict[str, Any] | None) -> ContainerState:
        if not status:
            return ContainerState.UNKNOWN
        state = section(status, "state")
        if state.get("running") is not None:
            return ContainerState.RUNNING
        if state.get("waiting") is not None:
            return ContainerState.WAITING
        if state.get("terminated") is not None:
            return ContainerState.TERMINATED
        return ContainerState.UNKNOWN

    @staticmethod
    def _format_ports(ports: list[Any]) -> list[str]:
        formatted: list[str] = []
        for port in ports:
            if not isinstance(port, dict) or port.get("containerPort") is None:
                continue
            value = port["containerPort"]
            proto = port.get("protocol") or "TCP"
            name = port.get("name")
            formatted.append(f"{name}: {value}/{proto}" if name else f"{value}/{proto}")
        return formatted

    @staticmethod
    def _parse_probe(probe: Any) -> ProbeDetail | None:
        if not isinstance(probe, dict):
            return None
        http = probe.get("httpGet")
        if isinstance(http, dict):
            scheme = str(http.get("scheme") or "http").lower()
            port = http.get("port", "")
            path = http.get("path") or "/"
            return ProbeDetail(type="HTTP GET", detail=f"{scheme}://:{port}{path}")
        exec_probe = probe.get("exec")
        if isinstance(exec_probe, dict):
            command = " ".join(str(part) for part in as_list(exec_probe.get("command")))
            return ProbeDetail(type="Exec", detail=command)
        tcp = probe.get("tcpSocket")
        if isinstance(tcp, dict):
            return ProbeDetail(type="TCP", detail=f":{tcp.get('port', '')}")
        return ProbeDetail(type="Probe", detail="Configured")
