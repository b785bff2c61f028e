"""Tests for EventFetcher."""

from __future__ import annotations

import pytest

from kubesnap.constants.enums import EventType
from kubesnap.controllers.cluster.fetchers.event_fetcher import EventFetcher
from kubesnap.controllers.cluster.fetchers.resource_fetcher import ResourceFetcher
from kubesnap.models.command.errors import CommandError, CommandTimeoutError

WARNING_ONLY = "--field-selector=type=Warning"


def _event(message: str, count: int | None = None, **extra) -> dict:
    event = {"metadata": {"name": message[:8]}, "message": message, **extra}
    if count is not None:
        event["count"] = count
    return event


@pytest.fixture
def fetcher(fake_kubectl) -> EventFetcher:
    return EventFetcher(ResourceFetcher(fake_kubectl), "dev")


class TestParseEvent:
    """Tests for EventFetcher.parse_event."""

    def test_core_event(self, fetcher: EventFetcher) -> None:
        """core/v1 events use involvedObject and lastTimestamp."""
        event = fetcher.parse_event(
            {
                "metadata": {"name": "e1"},
                "type": "Warning",
                "reason": "BackOff",
                "message": "Back-off restarting failed container",
                "involvedObject": {"kind": "Pod", "name": "api-1"},
                "count": 7,
                "lastTimestamp": "2024-03-01T10:00:00Z",
            },
            "shop",
        )
        assert event.type is EventType.WARNING
        assert event.object_kind == "Pod"
        assert event.object_name == "api-1"
        assert event.count == 7
        assert event.timestamp is not None

    def test_events_k8s_io_shape(self, fetcher: EventFetcher) -> None:
        """events.k8s.io events use regarding, note and series.count."""
        event = fetcher.parse_event(
            {
                "metadata": {"name": "e2"},
                "type": "Normal",
                "note": "Scaled up",
                "regarding": {"kind": "Deployment", "name": "api"},
                "series": {"count": 3},
                "eventTime": "2024-03-01T10:00:00.000000Z",
            },
            "shop",
        )
        assert event.message == "Scaled up"
        assert event.object_kind == "Deployment"
        assert event.count == 3

    def test_defaults(self, fetcher: EventFetcher) -> None:
        """Unknown types are normal and counts default to one."""
        event = fetcher.parse_event({"type": "Strange", "count": "x"}, "shop")
        assert event.type is EventType.NORMAL
        assert event.count == 1
        assert event.timestamp is None


class TestFetchEvents:
    """Tests for event fetching and the warning-only fallback."""

    @pytest.mark.asyncio
    async def test_sorted_by_count(self, fake_kubectl, fetcher: EventFetcher) -> None:
        """Events come back most repeated first."""
        fake_kubectl.on(
            "get",
            "events",
            returns={"items": [_event("once", 1), _event("often", 9), _event("twice", 2)]},
        )
        events = await fetcher.fetch_events("shop")
        assert [e.message for e in events] == ["often", "twice", "once"]

    @pytest.mark.asyncio
    async def test_timeout_retries_with_warnings_only(
        self, fake_kubectl, fetcher: EventFetcher
    ) -> None:
        """A timed-out full listing is retried narrowed to warning events."""
        fake_kubectl.on("get", "events", raises=CommandTimeoutError("kubectl timed out after 12s"))
        fake_kubectl.on(
            "get",
            "events",
            WARNING_ONLY,
            returns={"items": [_event("Readiness probe failed", type="Warning")]},
        )

        events = await fetcher.fetch_events("shop")

        assert [e.message for e in events] == ["Readiness probe failed"]
        assert fake_kubectl.count("events", WARNING_ONLY) == 1

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, fake_kubectl, fetcher: EventFetcher) -> None:
        """Non-timeout failures are not retried."""
        fake_kubectl.on("get", "events", raises=CommandError("events is forbidden"))
        with pytest.raises(CommandError, match="forbidden"):
            await fetcher.fetch_events("shop")
        assert fake_kubectl.count("events", WARNING_ONLY) == 0
