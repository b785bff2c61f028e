"""Tests for WorkloadParser."""

from __future__ import annotations

import pytest

from kubesnap.constants.enums import WorkloadKind, WorkloadStatus
from kubesnap.controllers.cluster.parsers.workload_parser import WorkloadParser


@pytest.fixture
def parser() -> WorkloadParser:
    return WorkloadParser("dev", "default")


def _item(name: str, spec: dict | None = None, status: dict | None = None) -> dict:
    return {
        "metadata": {"name": name, "creationTimestamp": "2024-03-01T10:00:00Z"},
        "spec": spec or {},
        "status": status or {},
    }


class TestReplicatedWorkloads:
    """Deployments, stateful sets, replica sets and replication controllers."""

    def test_deployment_all_ready(self, parser: WorkloadParser) -> None:
        """A fully ready deployment is healthy."""
        item = _item(
            "api",
            spec={"replicas": 3},
            status={"readyReplicas": 3, "updatedReplicas": 3, "availableReplicas": 3},
        )
        workload = parser.parse(WorkloadKind.DEPLOYMENT, item)
        assert workload.name == "api"
        assert workload.namespace == "default"
        assert workload.replicas == 3
        assert workload.ready_replicas == 3
        assert workload.updated_replicas == 3
        assert workload.status is WorkloadStatus.HEALTHY
        assert workload.alert_message is None
        assert workload.created_at is not None

    def test_partially_ready_is_degraded(self, parser: WorkloadParser) -> None:
        """Some but not all replicas ready means degraded."""
        item = _item("web", spec={"replicas": 4}, status={"readyReplicas": 1})
        workload = parser.parse(WorkloadKind.STATEFUL_SET, item)
        assert workload.status is WorkloadStatus.DEGRADED
        assert workload.alert_message == "web is Degraded"

    def test_none_ready_is_failed(self, parser: WorkloadParser) -> None:
        """No ready replicas out of a positive desired count means failed."""
        item = _item("db", spec={"replicas": 2}, status={})
        assert parser.parse(WorkloadKind.DEPLOYMENT, item).status is WorkloadStatus.FAILED

    def test_scaled_to_zero_is_healthy(self, parser: WorkloadParser) -> None:
        """A workload with zero desired replicas is healthy."""
        item = _item("idle", spec={"replicas": 0})
        assert parser.parse(WorkloadKind.DEPLOYMENT, item).status is WorkloadStatus.HEALTHY

    def test_desired_falls_back_to_status(self, parser: WorkloadParser) -> None:
        """Without spec.replicas the status count is used."""
        item = _item("rs", status={"replicas": 2, "readyReplicas": 2, "fullyLabeledReplicas": 2})
        workload = parser.parse(WorkloadKind.REPLICA_SET, item)
        assert workload.replicas == 2
        assert workload.updated_replicas == 2

    def test_replication_controller_has_no_updated_count(
        self, parser: WorkloadParser
    ) -> None:
        """Replication controllers do not report updated replicas."""
        item = _item("rc", spec={"replicas": 1}, status={"readyReplicas": 1, "updatedReplicas": 1})
        assert parser.parse(WorkloadKind.REPLICATION_CONTROLLER, item).updated_replicas is None

    def test_ids_are_stable(self, parser: WorkloadParser) -> None:
        """The same item parses to the same identifier every time."""
        item = _item("api", spec={"replicas": 1})
        first = parser.parse(WorkloadKind.DEPLOYMENT, item)
        second = parser.parse(WorkloadKind.DEPLOYMENT, item)
        assert first.id == second.id


class TestOtherWorkloads:
    """Daemon sets, cron jobs and jobs."""

    def test_daemon_set(self, parser: WorkloadParser) -> None:
        """Daemon set counts come from the scheduling status."""
        item = _item(
            "agent",
            status={"desiredNumberScheduled": 5, "numberReady": 4, "numberAvailable": 4},
        )
        workload = parser.parse(WorkloadKind.DAEMON_SET, item)
        assert workload.replicas == 5
        assert workload.ready_replicas == 4
        assert workload.available_replicas == 4
        assert workload.status is WorkloadStatus.DEGRADED

    def test_suspended_cron_job(self, parser: WorkloadParser) -> None:
        """A suspended cron job is flagged as degraded."""
        item = _item("backup", spec={"schedule": "0 3 * * *", "suspend": True})
        workload = parser.parse(WorkloadKind.CRON_JOB, item)
        assert workload.schedule == "0 3 * * *"
        assert workload.is_suspended is True
        assert workload.status is WorkloadStatus.DEGRADED

    def test_active_cron_job(self, parser: WorkloadParser) -> None:
        """An unsuspended cron job is healthy."""
        item = _item("report", spec={"schedule": "@daily", "suspend": False})
        assert parser.parse(WorkloadKind.CRON_JOB, item).status is WorkloadStatus.HEALTHY

    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            ({"failed": 1, "active": 1}, WorkloadStatus.FAILED),
            ({"active": 2}, WorkloadStatus.PROGRESSING),
            ({"succeeded": 1}, WorkloadStatus.HEALTHY),
            ({}, WorkloadStatus.DEGRADED),
        ],
    )
    def test_job_status(
        self, parser: WorkloadParser, status: dict, expected: WorkloadStatus
    ) -> None:
        """Job status follows failed, active, then succeeded counts."""
        workload = parser.parse(WorkloadKind.JOB, _item("migrate", status=status))
        assert workload.status is expected

    def test_job_counts(self, parser: WorkloadParser) -> None:
        """Job replicas are succeeded plus active."""
        item = _item("migrate", status={"active": 1, "succeeded": 2})
        workload = parser.parse(WorkloadKind.JOB, item)
        assert workload.replicas == 3
        assert workload.ready_replicas == 2
        assert workload.active_count == 1
        assert workload.succeeded_count == 2
        assert workload.failed_count == 0
