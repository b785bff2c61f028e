"""Cross-referencing of already-fetched namespace resources.

Runs after every sub-query of a namespace fetch has resolved. Nothing in
this module performs I/O; the same inputs always produce the same output.

Latency figures are heuristic estimates derived from pod resource pressure
and durations quoted in event messages. They are not measurements.
"""

from __future__ import annotations

from collections.abc import Sequence

from kubesnap.models.core.event_info import EventSummary
from kubesnap.models.core.network_info import ServiceSummary
from kubesnap.models.core.pod_info import PodSummary
from kubesnap.utils.metrics import estimate_pod_latency, parse_latency, percentile


def latency_samples(
    service: ServiceSummary,
    pods_by_name: dict[str, PodSummary],
    events: Sequence[EventSummary],
) -> list[float]:
    """Pooled, sorted latency samples for one service."""
    samples: list[float] = []
    for pod_name in service.target_pods:
        pod = pods_by_name.get(pod_name)
        if pod is None:
            continue
        estimate = estimate_pod_latency(pod.pressures, pod.warning_count, pod.restarts)
        if estimate is not None:
            samples.append(estimate)

    needle = service.name.lower()
    if needle:
        for event in events:
            if needle not in event.message.lower():
                continue
            duration = parse_latency(event.message)
            if duration is not None:
                samples.append(duration)

    samples.sort()
    return samples


def enrich_services(
    services: Sequence[ServiceSummary],
    pods: Sequence[PodSummary],
    events: Sequence[EventSummary],
) -> list[ServiceSummary]:
    """Attach endpoint counts and p50/p95 latency estimates to services.

    Returns new models; the inputs are left untouched.
    """
    pods_by_name = {pod.name: pod for pod in pods}
    enriched: list[ServiceSummary] = []
    for service in services:
        samples = latency_samples(service, pods_by_name, events)
        enriched.append(
            service.model_copy(
                update={
                    "endpoint_count": len(set(service.target_pods)),
                    "latency_p50": percentile(samples, 0.5) if samples else None,
                    "latency_p95": percentile(samples, 0.95) if samples else None,
                }
            )
        )
    return enriched


__all__ = ["enrich_services", "latency_samples"]
