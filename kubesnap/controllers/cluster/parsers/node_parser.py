"""Node parser - parses node data into structured formats."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from kubesnap.controllers.cluster.parsers.common import (
    as_list,
    created_at,
    metadata_of,
    resource_id,
    section,
)
from kubesnap.controllers.cluster.parsers.pod_parser import pod_key
from kubesnap.models.core.node_info import (
    NodeCondition,
    NodeInfo,
    NodeStatsSummary,
    NodeSummary,
)
from kubesnap.utils.resource_parser import (
    ResourceUsage,
    capacity_ratio,
    clamp_ratio,
    memory_str_to_bytes,
    parse_cpu,
)


def _float_or_none(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class NodeParser:
    """Parses node data into structured formats."""

    def __init__(self, context: str) -> None:
        self.context = context

    @staticmethod
    def _format_taint(taint: dict[str, Any]) -> str:
        result = str(taint.get("key", ""))
        if taint.get("value"):
            result += f"={taint['value']}"
        if taint.get("effect"):
            result += f":{taint['effect']}"
        return result

    def parse_node_info(
        self,
        node: dict[str, Any],
        usage: ResourceUsage | None = None,
        stats: NodeStatsSummary | None = None,
    ) -> NodeInfo:
        """Parse a single node.

        Args:
            node: Raw node dictionary from API
            usage: Metrics-API usage for this node, when available
            stats: Kubelet stats summary for this node, when available

        Returns:
            NodeInfo object.
        """
        metadata = metadata_of(node)
        status = section(node, "status")
        spec = section(node, "spec")
        capacity = section(status, "capacity")
        usage = usage or ResourceUsage()

        cpu_capacity = parse_cpu(capacity.get("cpu"))
        memory_capacity = memory_str_to_bytes(capacity.get("memory"))
        disk_capacity = memory_str_to_bytes(capacity.get("ephemeral-storage"))

        conditions = [
            NodeCondition(
                type=str(c.get("type", "")),
                status=str(c.get("status", "")),
                reason=c.get("reason"),
                message=c.get("message"),
            )
            for c in as_list(status.get("conditions"))
            if isinstance(c, dict)
        ]
        warnings = sum(1 for c in conditions if c.status.lower() != "true")
        is_ready = any(c.type == "Ready" and c.status == "True" for c in conditions)

        disk_used: float | None = None
        disk_ratio: float | None = None
        if (
            stats is not None
            and stats.fs_used_bytes is not None
            and stats.fs_capacity_bytes is not None
            and stats.fs_capacity_bytes > 0
        ):
            disk_used = stats.fs_used_bytes
            disk_capacity = stats.fs_capacity_bytes
            disk_ratio = clamp_ratio(disk_used / disk_capacity)

        node_info = section(status, "nodeInfo")
        name = str(metadata.get("name", ""))
        return NodeInfo(
            id=resource_id(node, self.context, None, "Node"),
            name=name,
            warning_count=warnings,
            cpu_usage_cores=usage.cpu_cores,
            cpu_capacity_cores=cpu_capacity,
            cpu_usage_ratio=capacity_ratio(usage.cpu_cores, cpu_capacity),
            memory_usage_bytes=usage.memory_bytes,
            memory_capacity_bytes=memory_capacity,
            memory_usage_ratio=capacity_ratio(usage.memory_bytes, memory_capacity),
            disk_used_bytes=disk_used,
            disk_capacity_bytes=disk_capacity,
            disk_ratio=disk_ratio,
            network_receive_bytes=stats.network_rx_bytes if stats else None,
            network_transmit_bytes=stats.network_tx_bytes if stats else None,
            taints=[
                self._format_taint(t) for t in as_list(spec.get("taints")) if isinstance(t, dict)
            ],
            kubelet_version=node_info.get("kubeletVersion"),
            created_at=created_at(node),
            conditions=conditions,
            is_ready=is_ready,
        )

    @staticmethod
    def summarize(nodes: Sequence[NodeInfo]) -> NodeSummary:
        """Aggregate ready count, mean ratios and summed network counters."""

        def _mean(values: list[float]) -> float | None:
            if not values:
                return None
            return clamp_ratio(sum(values) / len(values))

        cpu = [n.cpu_usage_ratio for n in nodes if n.cpu_usage_ratio is not None]
        memory = [n.memory_usage_ratio for n in nodes if n.memory_usage_ratio is not None]
        disk = [n.disk_ratio for n in nodes if n.disk_ratio is not None]
        rx = [n.network_receive_bytes for n in nodes if n.network_receive_bytes is not None]
        tx = [n.network_transmit_bytes for n in nodes if n.network_transmit_bytes is not None]

        return NodeSummary(
            total=len(nodes),
            ready=sum(1 for n in nodes if n.is_ready),
            cpu_usage=_mean(cpu),
            memory_usage=_mean(memory),
            disk_usage=_mean(disk),
            network_receive_bytes=sum(rx) if rx else None,
            network_transmit_bytes=sum(tx) if tx else None,
        )

    @staticmethod
    def parse_stats_summary(payload: Any) -> NodeStatsSummary:
        """Reduce a kubelet ``/stats/summary`` payload.

        Pod disk usage sums container rootfs, container logs and volume
        ``usedBytes``; pods whose total is zero are left out.
        """
        if not isinstance(payload, dict):
            return NodeStatsSummary()
        node = section(payload, "node")
        fs = section(node, "fs")
        network = section(node, "network")

        pod_usage: dict[str, float] = {}
        for pod in as_list(payload.get("pods")):
            if not isinstance(pod, dict):
                continue
            ref = section(pod, "podRef")
            if not ref.get("name") or not ref.get("namespace"):
                continue
            total = 0.0
            for container in as_list(pod.get("containers")):
                if not isinstance(container, dict):
                    continue
                for key in ("rootfs", "logs"):
                    total += _float_or_none(section(container, key).get("usedBytes")) or 0.0
            for volume in as_list(pod.get("volumeStats")):
                if isinstance(volume, dict):
                    total += _float_or_none(volume.get("usedBytes")) or 0.0
            if total > 0:
                pod_usage[pod_key(str(ref["namespace"]), str(ref["name"]))] = total

        return NodeStatsSummary(
            fs_used_bytes=_float_or_none(fs.get("usedBytes")),
            fs_capacity_bytes=_float_or_none(fs.get("capacityBytes")),
            network_rx_bytes=_float_or_none(network.get("rxBytes")),
            network_tx_bytes=_float_or_none(network.get("txBytes")),
            pod_disk_usage=pod_usage,
        )
