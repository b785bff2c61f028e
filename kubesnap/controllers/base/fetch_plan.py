"""Fan-out / fan-in of independent sub-queries.

A ``FetchPlan`` groups the sub-queries behind one logical fetch (a
namespace snapshot, a node inventory). All of them start together and the
plan resolves only after every one has finished. A failing sub-query
degrades to its default unless it is load-bearing.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from kubesnap.models.command.errors import CommandError

logger = logging.getLogger(__name__)


def describe_error(error: BaseException) -> str:
    """Single human-readable line for an exception."""
    if isinstance(error, CommandError):
        return error.message
    text = str(error).strip()
    return text or type(error).__name__


@dataclass
class SubQuery:
    """One independent query inside a plan."""

    name: str
    factory: Callable[[], Awaitable[Any]]
    default: Callable[[], Any] = list
    load_bearing: bool = False


@dataclass
class FetchOutcome:
    """Merged values of a finished plan plus the degraded sub-queries."""

    values: dict[str, Any] = field(default_factory=dict)
    failures: dict[str, BaseException] = field(default_factory=dict)

    def __getitem__(self, name: str) -> Any:
        return self.values[name]

    @property
    def warnings(self) -> dict[str, str]:
        return {name: describe_error(error) for name, error in self.failures.items()}


class FetchPlan:
    """Fixed set of sub-queries executed concurrently."""

    def __init__(self, name: str, load_bearing: Iterable[str] = ()) -> None:
        self.name = name
        self._load_bearing = set(load_bearing)
        self._queries: list[SubQuery] = []

    def add(
        self,
        name: str,
        factory: Callable[[], Awaitable[Any]],
        default: Callable[[], Any] = list,
        load_bearing: bool = False,
    ) -> FetchPlan:
        """Register a sub-query; returns the plan for chaining."""
        if any(query.name == name for query in self._queries):
            raise ValueError(f"Duplicate sub-query {name!r} in plan {self.name!r}")
        self._queries.append(
            SubQuery(
                name=name,
                factory=factory,
                default=default,
                load_bearing=load_bearing or name in self._load_bearing,
            )
        )
        return self

    @property
    def names(self) -> list[str]:
        return [query.name for query in self._queries]

    async def execute(self) -> FetchOutcome:
        """Run every sub-query and wait for all of them.

        Raises:
            Exception: the first failed load-bearing sub-query in plan order,
                after all siblings have resolved.
        """
        tasks = [asyncio.create_task(query.factory()) for query in self._queries]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        outcome = FetchOutcome()
        fatal: BaseException | None = None
        for query, result in zip(self._queries, results, strict=True):
            if not isinstance(result, BaseException):
                outcome.values[query.name] = result
                continue
            if not isinstance(result, Exception):
                raise result
            if query.load_bearing:
                if fatal is None:
                    fatal = result
                continue
            logger.warning(
                "%s: %s unavailable: %s", self.name, query.name, describe_error(result)
            )
            outcome.failures[query.name] = result
            outcome.values[query.name] = query.default()

        if fatal is not None:
            raise fatal
        return outcome


__all__ = [
    "FetchOutcome",
    "FetchPlan",
    "SubQuery",
    "describe_error",
]
