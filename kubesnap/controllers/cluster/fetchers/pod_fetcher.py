"""Pod fetcher for cluster controller - fetches pod data from Kubernetes cluster."""

from __future__ import annotations

import logging
from typing import Any

from kubesnap.controllers.cluster.fetchers.resource_fetcher import (
    ResourceFetcher,
    decode_items,
)
from kubesnap.controllers.cluster.parsers.common import metadata_of
from kubesnap.utils.resource_parser import ResourceUsage, sum_container_usage

logger = logging.getLogger(__name__)


def pod_metrics_path(namespace: str) -> str:
    return f"/apis/metrics.k8s.io/v1beta1/namespaces/{namespace}/pods"


class PodFetcher:
    """Fetches pods, pod metrics and single pod objects."""

    def __init__(self, resources: ResourceFetcher) -> None:
        self._resources = resources

    async def fetch_pods(self, context: str, namespace: str) -> list[dict[str, Any]]:
        """Raw pod items of one namespace."""
        return await self._resources.fetch_items(context, "pods", namespace=namespace)

    async def fetch_pod_metrics(self, context: str, namespace: str) -> dict[str, ResourceUsage]:
        """Pod name -> summed container usage."""
        payload = await self._resources.fetch_raw(context, pod_metrics_path(namespace))
        return {
            str(metadata_of(item).get("name", "")): sum_container_usage(
                [c for c in item.get("containers") or [] if isinstance(c, dict)]
            )
            for item in decode_items(payload)
        }

    async def fetch_pod(self, context: str, namespace: str, name: str) -> dict[str, Any]:
        """One pod object."""
        return await self._resources.fetch_object(context, "pod", name, namespace=namespace)
