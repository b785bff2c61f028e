"""Fetchers for the cluster controller."""

from kubesnap.controllers.cluster.fetchers.config_fetcher import ConfigFetcher
from kubesnap.controllers.cluster.fetchers.event_fetcher import EventFetcher
from kubesnap.controllers.cluster.fetchers.node_fetcher import NodeFetcher
from kubesnap.controllers.cluster.fetchers.pod_fetcher import PodFetcher
from kubesnap.controllers.cluster.fetchers.resource_fetcher import (
    ResourceFetcher,
    decode_items,
    sort_by_name,
)

__all__ = [
    "ConfigFetcher",
    "EventFetcher",
    "NodeFetcher",
    "PodFetcher",
    "ResourceFetcher",
    "decode_items",
    "sort_by_name",
]
