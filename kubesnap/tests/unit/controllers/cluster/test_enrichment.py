"""Tests for service enrichment."""

from __future__ import annotations

import uuid

import pytest

from kubesnap.controllers.cluster.enrichment import enrich_services, latency_samples
from kubesnap.models.core.event_info import EventSummary
from kubesnap.models.core.network_info import ServiceSummary
from kubesnap.models.core.pod_info import PodSummary


def _pod(name: str, cpu_ratio: float | None = None) -> PodSummary:
    return PodSummary(id=uuid.uuid4(), name=name, namespace="shop", cpu_usage_ratio=cpu_ratio)


def _service(name: str, *targets: str) -> ServiceSummary:
    return ServiceSummary(id=uuid.uuid4(), name=name, target_pods=list(targets))


def _event(message: str) -> EventSummary:
    return EventSummary(id=uuid.uuid4(), message=message)


class TestLatencySamples:
    """Tests for latency_samples."""

    def test_pods_and_events_pooled(self) -> None:
        """Pod estimates and durations from matching events are pooled and sorted."""
        service = _service("api", "api-1", "missing")
        pods = {"api-1": _pod("api-1", cpu_ratio=0.4)}
        events = [
            _event("API upstream took 250ms"),
            _event("web upstream took 900ms"),
            _event("api restarted"),
        ]
        assert latency_samples(service, pods, events) == pytest.approx([0.145, 0.25])

    def test_pods_without_pressure_contribute_nothing(self) -> None:
        """A pod with no known ratio yields no sample."""
        service = _service("api", "api-1")
        assert latency_samples(service, {"api-1": _pod("api-1")}, []) == []


class TestEnrichServices:
    """Tests for enrich_services."""

    def test_percentiles(self) -> None:
        """p50 and p95 interpolate over the pooled samples."""
        services = [_service("api", "api-1", "api-1")]
        pods = [_pod("api-1", cpu_ratio=0.4)]
        events = [_event("api: request took 250 ms")]

        (service,) = enrich_services(services, pods, events)

        assert service.endpoint_count == 1
        assert service.latency_p50 == pytest.approx(0.1975)
        assert service.latency_p95 == pytest.approx(0.24475)

    def test_no_samples(self) -> None:
        """Without samples both percentiles stay unknown."""
        (service,) = enrich_services([_service("api")], [], [])
        assert service.latency_p50 is None
        assert service.latency_p95 is None
        assert service.endpoint_count == 0

    def test_inputs_untouched(self) -> None:
        """Enrichment returns copies."""
        original = _service("api", "api-1")
        enrich_services([original], [_pod("api-1", cpu_ratio=1.0)], [])
        assert original.latency_p50 is None
