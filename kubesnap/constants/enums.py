"""All enum definitions for kubesnap.

This module consolidates all enumerations used throughout the package.
"""

from enum import Enum

# =============================================================================
# Process Enums
# =============================================================================

class TerminationReason(Enum):
    """How a subprocess ended."""

    EXIT = "exit"
    SIGNAL = "signal"


# =============================================================================
# Status Enums
# =============================================================================

class FetchState(Enum):
    """Data fetch state values."""

    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class ClusterHealth(Enum):
    """Overall cluster health derived from a snapshot."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNREACHABLE = "unreachable"


class WorkloadKind(Enum):
    """Workload resource kinds queried per namespace."""

    DEPLOYMENT = "Deployment"
    STATEFUL_SET = "StatefulSet"
    DAEMON_SET = "DaemonSet"
    CRON_JOB = "CronJob"
    REPLICA_SET = "ReplicaSet"
    REPLICATION_CONTROLLER = "ReplicationController"
    JOB = "Job"


class WorkloadStatus(Enum):
    """Workload rollout status."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    PROGRESSING = "progressing"
    FAILED = "failed"

    @classmethod
    def from_ready(cls, total: int, ready: int) -> "WorkloadStatus":
        """Derive status from desired and ready replica counts."""
        if total <= 0:
            return cls.HEALTHY
        if ready == total:
            return cls.HEALTHY
        if ready == 0:
            return cls.FAILED
        return cls.DEGRADED


class PodPhase(Enum):
    """Pod lifecycle phase values."""

    RUNNING = "running"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    UNKNOWN = "unknown"


class ContainerState(Enum):
    """Current state of one container."""

    RUNNING = "running"
    WAITING = "waiting"
    TERMINATED = "terminated"
    UNKNOWN = "unknown"


class EventType(Enum):
    """Kubernetes event type values."""

    NORMAL = "normal"
    WARNING = "warning"
    ERROR = "error"


class ConfigResourceKind(Enum):
    """Namespaced configuration resource kinds."""

    CONFIG_MAP = "ConfigMap"
    SECRET = "Secret"
    RESOURCE_QUOTA = "ResourceQuota"
    LIMIT_RANGE = "LimitRange"


__all__ = [
    "ClusterHealth",
    "ConfigResourceKind",
    "ContainerState",
    "EventType",
    "FetchState",
    "PodPhase",
    "TerminationReason",
    "WorkloadKind",
    "WorkloadStatus",
]
