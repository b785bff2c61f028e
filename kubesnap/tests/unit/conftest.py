"""Shared fixtures for unit tests."""

from __future__ import annotations

import copy
import json
from typing import Any

import pytest

from kubesnap.models.command.errors import CommandError
from kubesnap.models.command.invocation import CommandInvocation

_MISSING = object()


class FakeExecutor:
    """In-memory stand-in for a ProcessRunner.

    Responses are registered against argument tokens. A call matches every
    rule whose tokens all appear in its arguments; the rule with the most
    tokens wins, later registrations breaking ties. Unmatched
    ``get ... -o json`` listings return an empty list; anything else
    unmatched fails like a missing resource.
    """

    def __init__(self) -> None:
        self.rules: list[tuple[frozenset[str], Any, BaseException | None]] = []
        self.calls: list[tuple[str, ...]] = []
        self.invocations: list[CommandInvocation] = []

    def on(
        self,
        *tokens: str,
        returns: Any = _MISSING,
        raises: BaseException | None = None,
    ) -> FakeExecutor:
        self.rules.append((frozenset(tokens), returns, raises))
        return self

    def count(self, *tokens: str) -> int:
        """Number of recorded calls containing every token."""
        wanted = set(tokens)
        return sum(1 for call in self.calls if wanted <= set(call))

    def _respond(self, invocation: CommandInvocation) -> Any:
        self.invocations.append(invocation)
        arguments = tuple(invocation.arguments)
        self.calls.append(arguments)
        present = set(arguments)
        matches = [rule for rule in self.rules if rule[0] <= present]
        if not matches:
            if {"get", "json"} <= present and "--raw" not in present:
                return {"items": []}
            raise CommandError(f"Error from server (NotFound): {' '.join(arguments)}")
        _, returns, raises = max(reversed(matches), key=lambda rule: len(rule[0]))
        if raises is not None:
            raise raises
        return None if returns is _MISSING else copy.deepcopy(returns)

    async def run(self, invocation: CommandInvocation, cancel_event: Any = None) -> str:
        response = self._respond(invocation)
        if isinstance(response, str):
            return response
        return json.dumps(response)

    async def run_json(self, invocation: CommandInvocation, cancel_event: Any = None) -> Any:
        response = self._respond(invocation)
        if isinstance(response, str):
            return json.loads(response)
        return response


@pytest.fixture
def fake_kubectl() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def fake_helm() -> FakeExecutor:
    return FakeExecutor()
