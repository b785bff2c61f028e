"""Pod summary and detail models."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from kubesnap.constants.enums import ContainerState, PodPhase


class PodSummary(BaseModel):
    """Pod row with aggregated resources and usage ratios."""

    id: UUID
    name: str
    namespace: str
    phase: PodPhase = PodPhase.UNKNOWN
    ready_containers: int = 0
    total_containers: int = 0
    restarts: int = 0
    node_name: str = ""
    container_names: list[str] = Field(default_factory=list)
    warning_count: int = 0
    controlled_by: str | None = None
    qos_class: str | None = None
    created_at: datetime | None = None

    cpu_usage_cores: float | None = None
    memory_usage_bytes: float | None = None
    disk_usage_bytes: float | None = None
    cpu_request: float | None = None
    cpu_limit: float | None = None
    memory_request: float | None = None
    memory_limit: float | None = None
    storage_request: float | None = None
    storage_limit: float | None = None
    cpu_usage_ratio: float | None = None
    memory_usage_ratio: float | None = None
    disk_usage_ratio: float | None = None

    @property
    def pressures(self) -> list[float | None]:
        return [self.cpu_usage_ratio, self.memory_usage_ratio, self.disk_usage_ratio]


class PodCondition(BaseModel):
    type: str
    status: str
    reason: str | None = None
    message: str | None = None


class PodToleration(BaseModel):
    key: str | None = None
    operator: str | None = None
    value: str | None = None
    effect: str | None = None
    toleration_seconds: int | None = None


class PodVolume(BaseModel):
    name: str
    type: str
    detail: str | None = None


class ProbeDetail(BaseModel):
    type: str
    detail: str


class ContainerDetail(BaseModel):
    """Container spec joined with its status."""

    name: str
    image: str = ""
    state: ContainerState = ContainerState.UNKNOWN
    ready: bool = False
    ports: list[str] = Field(default_factory=list)
    env_count: int = 0
    mount_count: int = 0
    args: list[str] = Field(default_factory=list)
    command: list[str] = Field(default_factory=list)
    requests: dict[str, str] = Field(default_factory=dict)
    limits: dict[str, str] = Field(default_factory=dict)
    liveness_probe: ProbeDetail | None = None
    readiness_probe: ProbeDetail | None = None
    startup_probe: ProbeDetail | None = None


class PodDetail(BaseModel):
    """Full detail of one pod."""

    name: str
    namespace: str
    created_at: datetime | None = None
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    controlled_by: str | None = None
    status: str = "Unknown"
    node_name: str = ""
    pod_ip: str | None = None
    pod_ips: list[str] = Field(default_factory=list)
    service_account: str | None = None
    qos_class: str | None = None
    conditions: list[PodCondition] = Field(default_factory=list)
    tolerations: list[PodToleration] = Field(default_factory=list)
    volumes: list[PodVolume] = Field(default_factory=list)
    init_containers: list[ContainerDetail] = Field(default_factory=list)
    containers: list[ContainerDetail] = Field(default_factory=list)
