"""Tests for FetchPlan fan-out / fan-in."""

from __future__ import annotations

import asyncio
import logging

import pytest

from kubesnap.controllers.base.fetch_plan import FetchPlan, describe_error
from kubesnap.models.command.errors import CommandError


def returning(value, delay: float = 0.0):
    async def query():
        await asyncio.sleep(delay)
        return value

    return query


def failing(message: str, delay: float = 0.0):
    async def query():
        await asyncio.sleep(delay)
        raise CommandError(message)

    return query


class TestFetchPlanExecute:
    """Tests for FetchPlan.execute."""

    @pytest.mark.asyncio
    async def test_all_succeed(self) -> None:
        """Every sub-query value lands under its name."""
        plan = FetchPlan("ns").add("pods", returning([1])).add("events", returning([2]))
        outcome = await plan.execute()
        assert outcome["pods"] == [1]
        assert outcome["events"] == [2]
        assert outcome.failures == {}

    @pytest.mark.asyncio
    async def test_one_of_seven_fails(self, caplog: pytest.LogCaptureFixture) -> None:
        """A failing optional sub-query degrades to its default and is logged."""
        plan = FetchPlan("namespace default")
        for index in range(6):
            plan.add(f"kind{index}", returning([index]))
        plan.add("ingresses", failing("the server doesn't have a resource type \"ingresses\""))

        with caplog.at_level(logging.WARNING):
            outcome = await plan.execute()

        for index in range(6):
            assert outcome[f"kind{index}"] == [index]
        assert outcome["ingresses"] == []
        assert set(outcome.failures) == {"ingresses"}
        assert "ingresses unavailable" in caplog.text
        assert outcome.warnings["ingresses"].startswith("the server doesn't have")

    @pytest.mark.asyncio
    async def test_custom_default(self) -> None:
        """The default factory decides the degraded value."""
        plan = FetchPlan("nodes").add("metrics", failing("no metrics"), default=dict)
        outcome = await plan.execute()
        assert outcome["metrics"] == {}

    @pytest.mark.asyncio
    async def test_load_bearing_failure_propagates(self) -> None:
        """A load-bearing failure fails the plan."""
        plan = (
            FetchPlan("pod detail", load_bearing=("pods",))
            .add("pods", failing("pods are gone"))
            .add("events", returning([]))
        )
        with pytest.raises(CommandError, match="pods are gone"):
            await plan.execute()

    @pytest.mark.asyncio
    async def test_load_bearing_flag_on_add(self) -> None:
        """load_bearing may also be set per sub-query."""
        plan = FetchPlan("x").add("nodes", failing("down"), load_bearing=True)
        with pytest.raises(CommandError):
            await plan.execute()

    @pytest.mark.asyncio
    async def test_load_bearing_waits_for_siblings(self) -> None:
        """Siblings finish before the load-bearing error surfaces."""
        finished: list[str] = []

        async def slow_sibling():
            await asyncio.sleep(0.05)
            finished.append("events")
            return []

        plan = (
            FetchPlan("x", load_bearing=("pods",))
            .add("pods", failing("boom"))
            .add("events", slow_sibling)
        )
        with pytest.raises(CommandError):
            await plan.execute()
        assert finished == ["events"]

    @pytest.mark.asyncio
    async def test_first_load_bearing_in_plan_order(self) -> None:
        """With several load-bearing failures the first in plan order wins."""
        plan = (
            FetchPlan("x", load_bearing=("a", "b"))
            .add("a", failing("first", delay=0.05))
            .add("b", failing("second"))
        )
        with pytest.raises(CommandError, match="first"):
            await plan.execute()

    @pytest.mark.asyncio
    async def test_sub_queries_run_concurrently(self) -> None:
        """Total time tracks the slowest sub-query, not the sum."""
        plan = FetchPlan("x")
        for index in range(5):
            plan.add(f"q{index}", returning(index, delay=0.2))
        loop = asyncio.get_running_loop()
        started = loop.time()
        await plan.execute()
        assert loop.time() - started < 0.8

    def test_duplicate_names_rejected(self) -> None:
        """Names identify sub-queries and must be unique."""
        plan = FetchPlan("x").add("pods", returning([]))
        with pytest.raises(ValueError):
            plan.add("pods", returning([]))

    def test_names_in_order(self) -> None:
        """names lists sub-queries in registration order."""
        plan = FetchPlan("x").add("b", returning(1)).add("a", returning(2))
        assert plan.names == ["b", "a"]


class TestDescribeError:
    """Tests for describe_error."""

    def test_command_error_message(self) -> None:
        """Structured errors use their message."""
        assert describe_error(CommandError("kubectl failed", output="raw")) == "kubectl failed"

    def test_empty_message_falls_back_to_type(self) -> None:
        """An exception without text is named by its type."""
        assert describe_error(RuntimeError()) == "RuntimeError"
