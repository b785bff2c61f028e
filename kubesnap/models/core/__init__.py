"""Core snapshot models."""

from kubesnap.models.core.access_info import (
    RoleBindingSummary,
    RoleSummary,
    ServiceAccountSummary,
)
from kubesnap.models.core.cluster_info import (
    Cluster,
    CustomResourceDefinitionSummary,
    NamespaceSnapshot,
)
from kubesnap.models.core.config_info import (
    ConfigResourcePermissions,
    ConfigResourceSummary,
    SecretDataEntry,
)
from kubesnap.models.core.event_info import EventSummary
from kubesnap.models.core.network_info import (
    IngressSummary,
    PersistentVolumeClaimSummary,
    ServiceSummary,
)
from kubesnap.models.core.node_info import (
    NodeCondition,
    NodeData,
    NodeInfo,
    NodeStatsSummary,
    NodeSummary,
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
from kubesnap.models.core.workload_info import WorkloadSummary

__all__ = [
    "Cluster",
    "ConfigResourcePermissions",
    "ConfigResourceSummary",
    "ContainerDetail",
    "CustomResourceDefinitionSummary",
    "EventSummary",
    "IngressSummary",
    "NamespaceSnapshot",
    "NodeCondition",
    "NodeData",
    "NodeInfo",
    "NodeStatsSummary",
    "NodeSummary",
    "PersistentVolumeClaimSummary",
    "PodCondition",
    "PodDetail",
    "PodSummary",
    "PodToleration",
    "PodVolume",
    "ProbeDetail",
    "RoleBindingSummary",
    "RoleSummary",
    "SecretDataEntry",
    "ServiceAccountSummary",
    "ServiceSummary",
    "WorkloadSummary",
]
