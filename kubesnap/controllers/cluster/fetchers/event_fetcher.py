"""Event fetcher for cluster controller - fetches event data from Kubernetes cluster."""

from __future__ import annotations

import logging
from contextlib import suppress
from typing import Any

from kubesnap.constants.enums import EventType
from kubesnap.constants.timeouts import CLUSTER_REQUEST_TIMEOUT
from kubesnap.controllers.cluster.fetchers.resource_fetcher import ResourceFetcher
from kubesnap.controllers.cluster.parsers.common import (
    metadata_of,
    parse_iso_timestamp,
    resource_id,
    section,
)
from kubesnap.models.command.errors import CommandError
from kubesnap.models.core.event_info import EventSummary

logger = logging.getLogger(__name__)


class EventFetcher:
    """Fetches event data from Kubernetes cluster."""

    _EVENT_QUERY_TIMEOUT = CLUSTER_REQUEST_TIMEOUT
    _TIMEOUT_ERROR_TOKENS = (
        "timed out",
        "timeout",
        "deadline exceeded",
        "i/o timeout",
        "context deadline exceeded",
    )

    def __init__(self, resources: ResourceFetcher, context: str) -> None:
        """Initialize with the shared resource fetcher.

        Args:
            resources: Generic kubectl list fetcher
            context: Kubeconfig context the events belong to
        """
        self._resources = resources
        self.context = context

    @staticmethod
    def _parse_event_count(event: dict[str, Any]) -> int:
        """Parse event count across core/events.k8s.io shapes."""
        raw_value = (
            event.get("count")
            or event.get("deprecatedCount")
            or section(event, "series").get("count")
            or 1
        )
        with suppress(ValueError, TypeError):
            return max(1, int(raw_value))
        return 1

    @staticmethod
    def _parse_event_type(raw: Any) -> EventType:
        with suppress(ValueError):
            return EventType(str(raw or "").lower())
        return EventType.NORMAL

    @classmethod
    def _is_timeout_error(cls, error: Exception) -> bool:
        """Return True when error indicates timeout-like failure."""
        message = str(error).lower()
        return any(token in message for token in cls._TIMEOUT_ERROR_TOKENS)

    def parse_event(self, event: dict[str, Any], namespace: str) -> EventSummary:
        """Parse one event item."""
        metadata = metadata_of(event)
        involved = section(event, "involvedObject") or section(event, "regarding")
        timestamp = (
            parse_iso_timestamp(event.get("eventTime"))
            or parse_iso_timestamp(event.get("lastTimestamp"))
            or parse_iso_timestamp(event.get("firstTimestamp"))
        )
        return EventSummary(
            id=resource_id(event, self.context, namespace, "Event"),
            message=str(event.get("message") or event.get("note") or ""),
            type=self._parse_event_type(event.get("type")),
            reason=event.get("reason"),
            object_kind=involved.get("kind"),
            object_name=involved.get("name"),
            count=self._parse_event_count(event),
            timestamp=timestamp,
        )

    async def fetch_events_raw(self, namespace: str) -> list[dict[str, Any]]:
        """Fetch namespace events, narrowing to warnings when the full list times out."""
        try:
            return await self._resources.fetch_items(
                self.context,
                "events",
                namespace=namespace,
                request_timeout=self._EVENT_QUERY_TIMEOUT,
            )
        except CommandError as exc:
            if not self._is_timeout_error(exc):
                raise
            logger.warning(
                "Event fetch timed out (namespace=%s), retrying with warning events only",
                namespace,
            )
        return await self._resources.fetch_items(
            self.context,
            "events",
            namespace=namespace,
            request_timeout=self._EVENT_QUERY_TIMEOUT,
            extra_args=("--field-selector=type=Warning",),
        )

    async def fetch_events(self, namespace: str) -> list[EventSummary]:
        """Parsed events, most repeated first."""
        items = await self.fetch_events_raw(namespace)
        events = [self.parse_event(item, namespace) for item in items]
        events.sort(key=lambda event: event.count, reverse=True)
        return events
