"""Cluster and namespace snapshot models."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from kubesnap.constants.enums import ClusterHealth, WorkloadStatus
from kubesnap.models.charts.helm_release import HelmRelease
from kubesnap.models.core.access_info import (
    RoleBindingSummary,
    RoleSummary,
    ServiceAccountSummary,
)
from kubesnap.models.core.config_info import ConfigResourceSummary
from kubesnap.models.core.event_info import EventSummary
from kubesnap.models.core.network_info import (
    IngressSummary,
    PersistentVolumeClaimSummary,
    ServiceSummary,
)
from kubesnap.models.core.node_info import NodeInfo, NodeSummary
from kubesnap.models.core.pod_info import PodSummary
from kubesnap.models.core.workload_info import WorkloadSummary


class CustomResourceDefinitionSummary(BaseModel):
    id: UUID
    name: str
    group: str = ""
    version: str = ""
    kind: str = ""
    scope: str = ""
    short_names: list[str] = Field(default_factory=list)
    created_at: datetime | None = None


class NamespaceSnapshot(BaseModel):
    """Composite result of one namespace fetch."""

    name: str
    workloads: list[WorkloadSummary] = Field(default_factory=list)
    pods: list[PodSummary] = Field(default_factory=list)
    events: list[EventSummary] = Field(default_factory=list)
    alerts: list[str] = Field(default_factory=list)
    config_resources: list[ConfigResourceSummary] = Field(default_factory=list)
    services: list[ServiceSummary] = Field(default_factory=list)
    ingresses: list[IngressSummary] = Field(default_factory=list)
    persistent_volume_claims: list[PersistentVolumeClaimSummary] = Field(
        default_factory=list
    )
    service_accounts: list[ServiceAccountSummary] = Field(default_factory=list)
    roles: list[RoleSummary] = Field(default_factory=list)
    role_bindings: list[RoleBindingSummary] = Field(default_factory=list)
    is_loaded: bool = False
    # Sub-queries that degraded, name -> message.
    warnings: dict[str, str] = Field(default_factory=dict)

    @property
    def has_unhealthy_workloads(self) -> bool:
        return any(w.status is not WorkloadStatus.HEALTHY for w in self.workloads)


class Cluster(BaseModel):
    """One kubeconfig context and, once loaded, its snapshot."""

    id: UUID
    name: str
    context_name: str
    server: str = ""
    health: ClusterHealth = ClusterHealth.HEALTHY
    kubernetes_version: str = ""
    node_summary: NodeSummary = Field(default_factory=NodeSummary)
    nodes: list[NodeInfo] = Field(default_factory=list)
    namespaces: list[NamespaceSnapshot] = Field(default_factory=list)
    last_synced: datetime | None = None
    notes: str | None = None
    is_connected: bool = False
    helm_releases: list[HelmRelease] = Field(default_factory=list)
    custom_resources: list[CustomResourceDefinitionSummary] = Field(default_factory=list)

    @property
    def unhealthy_workload_count(self) -> int:
        return sum(
            1
            for namespace in self.namespaces
            for workload in namespace.workloads
            if workload.status is not WorkloadStatus.HEALTHY
        )
