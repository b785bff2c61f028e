"""Controllers module for kubesnap.

This module provides the controllers that shell out to kubectl and helm and
assemble their output into cluster, namespace and node snapshots.
"""

from __future__ import annotations

# Base classes
from kubesnap.controllers.base import (
    BaseController,
    FetchPlan,
    FetchStatus,
    ProcessRunner,
)

# Cluster domain
from kubesnap.controllers.cluster.controller import ClusterController

# Helm domain
from kubesnap.controllers.helm import HelmController

__all__ = [
    # Base
    "BaseController",
    "FetchPlan",
    "FetchStatus",
    "ProcessRunner",
    # Domain Controllers
    "ClusterController",
    "HelmController",
]
