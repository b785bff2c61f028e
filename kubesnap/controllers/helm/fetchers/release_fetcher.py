"""Release fetcher for helm controller - fetches Helm release data from cluster."""

from __future__ import annotations

import logging
from typing import Any

import yaml

from kubesnap.controllers.base.process_runner import CommandExecutor
from kubesnap.models.command.errors import CommandDecodeError
from kubesnap.models.command.invocation import CommandInvocation

logger = logging.getLogger(__name__)


class ReleaseFetcher:
    """Fetches Helm release data from Kubernetes cluster."""

    def __init__(self, executor: CommandExecutor) -> None:
        """Initialize release fetcher.

        Args:
            executor: Runner for helm commands
        """
        self._executor = executor

    @staticmethod
    def _context_args(context: str | None) -> tuple[str, ...]:
        return ("--kube-context", context) if context else ()

    async def fetch_releases(self, context: str | None = None) -> list[dict[str, Any]]:
        """Fetch release rows across all namespaces.

        Returns:
            Raw release dictionaries as printed by ``helm list -o json``.
        """
        payload = await self._executor.run_json(
            CommandInvocation(
                arguments=(
                    "list",
                    "--all-namespaces",
                    *self._context_args(context),
                    "--output",
                    "json",
                )
            )
        )
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise CommandDecodeError("Unexpected helm response: expected a list of releases")
        return [
            release
            for release in payload
            if isinstance(release, dict) and "name" in release and "namespace" in release
        ]

    async def fetch_release_values(
        self,
        release: str,
        namespace: str,
        context: str | None = None,
    ) -> dict[str, Any]:
        """Fetch computed values for a specific release.

        Args:
            release: Release name
            namespace: Release namespace
            context: Kubernetes context to use

        Returns:
            Parsed values mapping; empty when helm prints nothing or
            something other than a YAML mapping.
        """
        output = await self._executor.run(
            CommandInvocation(
                arguments=(
                    "get",
                    "values",
                    "--all",
                    release,
                    "-n",
                    namespace,
                    *self._context_args(context),
                    "-o",
                    "yaml",
                )
            )
        )
        if not output.strip():
            return {}
        try:
            values = yaml.safe_load(output)
        except yaml.YAMLError:
            logger.exception("Error parsing live values for %s", release)
            return {}
        return values if isinstance(values, dict) else {}
