"""Node fetcher for cluster controller - fetches node data from Kubernetes cluster."""

from __future__ import annotations

import logging
from typing import Any

from kubesnap.constants.timeouts import NODE_REQUEST_TIMEOUT
from kubesnap.controllers.cluster.fetchers.resource_fetcher import (
    ResourceFetcher,
    decode_items,
)
from kubesnap.controllers.cluster.parsers.common import metadata_of
from kubesnap.controllers.cluster.parsers.node_parser import NodeParser
from kubesnap.models.core.node_info import NodeStatsSummary
from kubesnap.utils.resource_parser import ResourceUsage, parse_usage

logger = logging.getLogger(__name__)

NODE_METRICS_PATH = "/apis/metrics.k8s.io/v1beta1/nodes"


def node_stats_path(node_name: str) -> str:
    return f"/api/v1/nodes/{node_name}/proxy/stats/summary"


class NodeFetcher:
    """Fetches node inventory, node metrics and kubelet stats."""

    def __init__(
        self,
        resources: ResourceFetcher,
        request_timeout: str = NODE_REQUEST_TIMEOUT,
    ) -> None:
        self._resources = resources
        self.request_timeout = request_timeout

    async def fetch_nodes(self, context: str) -> list[dict[str, Any]]:
        """Raw node items."""
        return await self._resources.fetch_items(
            context, "nodes", request_timeout=self.request_timeout
        )

    async def fetch_node_metrics(self, context: str) -> dict[str, ResourceUsage]:
        """Node name -> metrics-API usage."""
        payload = await self._resources.fetch_raw(context, NODE_METRICS_PATH)
        return {
            str(metadata_of(item).get("name", "")): parse_usage(item.get("usage"))
            for item in decode_items(payload)
        }

    async def fetch_stats_summary(self, context: str, node_name: str) -> NodeStatsSummary:
        """Kubelet stats summary for one node."""
        payload = await self._resources.fetch_raw(context, node_stats_path(node_name))
        return NodeParser.parse_stats_summary(payload)
