"""Service, ingress and storage claim models."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class ServiceSummary(BaseModel):
    """Service with endpoint-derived targets and estimated latency."""

    id: UUID
    name: str
    type: str = "ClusterIP"
    cluster_ip: str | None = None
    ports: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    selector: dict[str, str] = Field(default_factory=dict)
    target_pods: list[str] = Field(default_factory=list)
    endpoint_count: int = 0
    # Heuristic estimates, not measured latency.
    latency_p50: float | None = None
    latency_p95: float | None = None


class IngressSummary(BaseModel):
    id: UUID
    name: str
    class_name: str | None = None
    host_rules: list[str] = Field(default_factory=list)
    service_targets: list[str] = Field(default_factory=list)
    tls: bool = False
    created_at: datetime | None = None


class PersistentVolumeClaimSummary(BaseModel):
    id: UUID
    name: str
    status: str = "Unknown"
    capacity_bytes: float | None = None
    storage_class: str | None = None
    volume_name: str | None = None
    created_at: datetime | None = None
