"""Node inventory models."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class NodeCondition(BaseModel):
    """One entry of ``status.conditions`` on a node."""

    type: str
    status: str
    reason: str | None = None
    message: str | None = None


class NodeStatsSummary(BaseModel):
    """Kubelet stats summary reduced to what the snapshot uses."""

    fs_used_bytes: float | None = None
    fs_capacity_bytes: float | None = None
    network_rx_bytes: float | None = None
    network_tx_bytes: float | None = None
    # "namespace/name" -> rootfs + logs + volume bytes, zero totals omitted
    pod_disk_usage: dict[str, float] = Field(default_factory=dict)


class NodeInfo(BaseModel):
    """Node row with usage ratios against capacity."""

    id: UUID
    name: str
    warning_count: int = 0
    cpu_usage_cores: float | None = None
    cpu_capacity_cores: float | None = None
    cpu_usage_ratio: float | None = None
    memory_usage_bytes: float | None = None
    memory_capacity_bytes: float | None = None
    memory_usage_ratio: float | None = None
    disk_used_bytes: float | None = None
    disk_capacity_bytes: float | None = None
    disk_ratio: float | None = None
    network_receive_bytes: float | None = None
    network_transmit_bytes: float | None = None
    taints: list[str] = Field(default_factory=list)
    kubelet_version: str | None = None
    created_at: datetime | None = None
    conditions: list[NodeCondition] = Field(default_factory=list)
    is_ready: bool = False


class NodeSummary(BaseModel):
    """Cluster-wide aggregate of the node inventory."""

    total: int = 0
    ready: int = 0
    cpu_usage: float | None = None
    memory_usage: float | None = None
    disk_usage: float | None = None
    network_receive_bytes: float | None = None
    network_transmit_bytes: float | None = None

    @property
    def ready_ratio(self) -> float:
        if self.total <= 0:
            return 0.0
        return self.ready / self.total


class NodeData(BaseModel):
    """Node inventory plus its summary."""

    summary: NodeSummary = Field(default_factory=NodeSummary)
    nodes: list[NodeInfo] = Field(default_factory=list)
