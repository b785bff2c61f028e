"""Workload models."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from kubesnap.constants.enums import WorkloadKind, WorkloadStatus


class WorkloadSummary(BaseModel):
    """One workload of any supported kind."""

    id: UUID
    name: str
    namespace: str
    kind: WorkloadKind
    replicas: int = 0
    ready_replicas: int = 0
    status: WorkloadStatus = WorkloadStatus.HEALTHY
    updated_replicas: int | None = None
    available_replicas: int | None = None
    created_at: datetime | None = None
    active_count: int | None = None
    succeeded_count: int | None = None
    failed_count: int | None = None
    schedule: str | None = None
    is_suspended: bool | None = None

    @property
    def alert_message(self) -> str | None:
        """Alert text for a non-healthy workload."""
        if self.status is WorkloadStatus.HEALTHY:
            return None
        return f"{self.name} is {self.status.value.capitalize()}"
