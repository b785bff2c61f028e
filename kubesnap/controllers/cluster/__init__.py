"""Init file for cluster module."""

from kubesnap.controllers.cluster.enrichment import enrich_services
from kubesnap.controllers.cluster.fetchers import (
    ConfigFetcher,
    EventFetcher,
    NodeFetcher,
    PodFetcher,
    ResourceFetcher,
)
from kubesnap.controllers.cluster.parsers import NodeParser, PodParser

__all__ = [
    "ConfigFetcher",
    "EventFetcher",
    "NodeFetcher",
    "NodeParser",
    "PodFetcher",
    "PodParser",
    "ResourceFetcher",
    "enrich_services",
]
