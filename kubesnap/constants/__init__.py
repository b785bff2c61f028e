"""Constants module for kubesnap.

Centralized constants organized by domain:
- enums.py: All Enum class definitions
- timeouts.py: Timeout values (seconds and kubectl request strings)
- defaults.py: Default values for settings, retry policy and caches
"""

from kubesnap.constants.defaults import (
    MAX_ATTEMPTS_DEFAULT,
    NODE_STATS_CACHE_TTL_DEFAULT,
    RETRY_DELAY_DEFAULT,
    SECRET_PERMISSION_CACHE_TTL_DEFAULT,
)
from kubesnap.constants.enums import (
    ClusterHealth,
    ConfigResourceKind,
    ContainerState,
    EventType,
    FetchState,
    PodPhase,
    TerminationReason,
    WorkloadKind,
    WorkloadStatus,
)
from kubesnap.constants.timeouts import (
    CLUSTER_REQUEST_TIMEOUT,
    COMMAND_TIMEOUT,
    NODE_REQUEST_TIMEOUT,
)

__all__ = [
    "CLUSTER_REQUEST_TIMEOUT",
    "COMMAND_TIMEOUT",
    "MAX_ATTEMPTS_DEFAULT",
    "NODE_REQUEST_TIMEOUT",
    "NODE_STATS_CACHE_TTL_DEFAULT",
    "RETRY_DELAY_DEFAULT",
    "SECRET_PERMISSION_CACHE_TTL_DEFAULT",
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
