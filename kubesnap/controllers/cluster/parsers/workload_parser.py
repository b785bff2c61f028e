"""Workload parser - turns workload list items into WorkloadSummary rows."""

from __future__ import annotations

from typing import Any

from kubesnap.constants.enums import WorkloadKind, WorkloadStatus
from kubesnap.controllers.cluster.parsers.common import (
    as_int,
    created_at,
    metadata_of,
    optional_int,
    resource_id,
    section,
)
from kubesnap.models.core.workload_info import WorkloadSummary

# kubectl resource name queried for each workload kind
WORKLOAD_RESOURCES: dict[WorkloadKind, str] = {
    WorkloadKind.DEPLOYMENT: "deployments",
    WorkloadKind.STATEFUL_SET: "statefulsets",
    WorkloadKind.DAEMON_SET: "daemonsets",
    WorkloadKind.CRON_JOB: "cronjobs",
    WorkloadKind.REPLICA_SET: "replicasets",
    WorkloadKind.REPLICATION_CONTROLLER: "replicationcontrollers",
    WorkloadKind.JOB: "jobs",
}


class WorkloadParser:
    """Parses workload items of every supported kind."""

    def __init__(self, context: str, namespace: str) -> None:
        self.context = context
        self.namespace = namespace

    def parse(self, kind: WorkloadKind, item: dict[str, Any]) -> WorkloadSummary:
        if kind is WorkloadKind.DAEMON_SET:
            return self._parse_daemon_set(item)
        if kind is WorkloadKind.CRON_JOB:
            return self._parse_cron_job(item)
        if kind is WorkloadKind.JOB:
            return self._parse_job(item)
        return self._parse_replicated(kind, item)

    def _base(self, kind: WorkloadKind, item: dict[str, Any]) -> dict[str, Any]:
        metadata = metadata_of(item)
        return {
            "id": resource_id(item, self.context, self.namespace, kind.value),
            "name": str(metadata.get("name", "")),
            "namespace": str(metadata.get("namespace") or self.namespace),
            "kind": kind,
            "created_at": created_at(item),
        }

    def _parse_replicated(self, kind: WorkloadKind, item: dict[str, Any]) -> WorkloadSummary:
        spec = section(item, "spec")
        status = section(item, "status")
        desired_raw = spec.get("replicas")
        if desired_raw is None:
            desired_raw = status.get("replicas")
        desired = as_int(desired_raw)
        ready = as_int(status.get("readyReplicas"))
        if kind is WorkloadKind.REPLICA_SET:
            updated = optional_int(status.get("fullyLabeledReplicas"))
        elif kind is WorkloadKind.REPLICATION_CONTROLLER:
            updated = None
        else:
            updated = optional_int(status.get("updatedReplicas"))
        return WorkloadSummary(
            **self._base(kind, item),
            replicas=desired,
            ready_replicas=ready,
            status=WorkloadStatus.from_ready(desired, ready),
            updated_replicas=updated,
            available_replicas=optional_int(status.get("availableReplicas")),
        )

    def _parse_daemon_set(self, item: dict[str, Any]) -> WorkloadSummary:
        status = section(item, "status")
        desired = as_int(status.get("desiredNumberScheduled"))
        ready = as_int(status.get("numberReady"))
        return WorkloadSummary(
            **self._base(WorkloadKind.DAEMON_SET, item),
            replicas=desired,
            ready_replicas=ready,
            status=WorkloadStatus.from_ready(desired, ready),
            updated_replicas=optional_int(status.get("updatedNumberScheduled")),
            available_replicas=optional_int(status.get("numberAvailable")),
        )

    def _parse_cron_job(self, item: dict[str, Any]) -> WorkloadSummary:
        spec = section(item, "spec")
        suspend = spec.get("suspend")
        is_suspended = bool(suspend) if suspend is not None else None
        return WorkloadSummary(
            **self._base(WorkloadKind.CRON_JOB, item),
            status=WorkloadStatus.DEGRADED if is_suspended else WorkloadStatus.HEALTHY,
            schedule=spec.get("schedule"),
            is_suspended=is_suspended,
        )

    def _parse_job(self, item: dict[str, Any]) -> WorkloadSummary:
        status = section(item, "status")
        active = as_int(status.get("active"))
        succeeded = as_int(status.get("succeeded"))
        failed = as_int(status.get("failed"))

        if failed > 0:
            job_status = WorkloadStatus.FAILED
        elif active > 0:
            job_status = WorkloadStatus.PROGRESSING
        elif succeeded > 0:
            job_status = WorkloadStatus.HEALTHY
        else:
            job_status = WorkloadStatus.DEGRADED

        return WorkloadSummary(
            **self._base(WorkloadKind.JOB, item),
            replicas=succeeded + active,
            ready_replicas=succeeded,
            status=job_status,
            active_count=active,
            succeeded_count=succeeded,
            failed_count=failed,
        )
