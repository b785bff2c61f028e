"""Parsers turning kubectl JSON items into snapshot models."""

from kubesnap.controllers.cluster.parsers.access_parser import AccessParser
from kubesnap.controllers.cluster.parsers.config_parser import ConfigParser
from kubesnap.controllers.cluster.parsers.network_parser import NetworkParser
from kubesnap.controllers.cluster.parsers.node_parser import NodeParser
from kubesnap.controllers.cluster.parsers.pod_parser import PodParser, pod_key
from kubesnap.controllers.cluster.parsers.workload_parser import (
    WORKLOAD_RESOURCES,
    WorkloadParser,
)

__all__ = [
    "WORKLOAD_RESOURCES",
    "AccessParser",
    "ConfigParser",
    "NetworkParser",
    "NodeParser",
    "PodParser",
    "WorkloadParser",
    "pod_key",
]
