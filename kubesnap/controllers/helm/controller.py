"""Helm controller - release listing and values through the helm CLI."""

from __future__ import annotations

import logging
import re
from contextlib import suppress
from datetime import datetime
from typing import Any

from kubesnap.controllers.base.base_controller import BaseController
from kubesnap.controllers.base.process_runner import CommandExecutor
from kubesnap.controllers.helm.fetchers.release_fetcher import ReleaseFetcher
from kubesnap.models.charts.helm_release import HelmRelease
from kubesnap.models.command.errors import CommandError
from kubesnap.models.command.invocation import CommandInvocation
from kubesnap.utils.stable_identifier import stable_uuid

logger = logging.getLogger(__name__)

# Go prints nanoseconds; strptime's %f accepts at most six digits.
_FRACTION_PATTERN = re.compile(r"(\.\d{6})\d+")
_UPDATED_FORMATS = (
    "%Y-%m-%d %H:%M:%S.%f %z",
    "%Y-%m-%d %H:%M:%S %z",
)


def _revision(value: Any) -> int:
    with suppress(ValueError, TypeError):
        return int(value)
    return 0


def parse_helm_timestamp(value: Any) -> datetime | None:
    """Parse ``2024-01-02 03:04:05.123456789 +0000 UTC`` style timestamps."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip().removesuffix(" UTC")
    text = _FRACTION_PATTERN.sub(r"\1", text)
    for fmt in _UPDATED_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


class HelmController(BaseController):
    """Lists releases and fetches their values."""

    def __init__(self, executor: CommandExecutor) -> None:
        """Initialize the helm controller.

        Args:
            executor: Runner for the helm executable.
        """
        super().__init__()
        self._executor = executor
        self._release_fetcher = ReleaseFetcher(executor)

    async def check_connection(self) -> bool:
        """True when ``helm version`` runs."""
        try:
            await self._executor.run(CommandInvocation(arguments=("version", "--short")))
        except CommandError as exc:
            logger.debug("helm unavailable: %s", exc.message)
            return False
        return True

    def parse_release(self, raw: dict[str, Any], context: str | None = None) -> HelmRelease:
        name = str(raw.get("name", ""))
        namespace = str(raw.get("namespace", ""))
        return HelmRelease(
            id=stable_uuid(None, context or "", namespace, "HelmRelease", name),
            name=name,
            namespace=namespace,
            revision=_revision(raw.get("revision")),
            status=str(raw.get("status") or "unknown"),
            chart=str(raw.get("chart") or ""),
            app_version=raw.get("app_version") or None,
            updated=parse_helm_timestamp(raw.get("updated")),
        )

    async def list_releases(self, context: str | None = None) -> list[HelmRelease]:
        """Releases across all namespaces, sorted by namespace then name."""
        raw_releases = await self._release_fetcher.fetch_releases(context)
        releases = [self.parse_release(raw, context) for raw in raw_releases]
        releases.sort(key=lambda r: (r.namespace.casefold(), r.name.casefold()))
        return releases

    async def get_release_values(
        self,
        release: str,
        namespace: str,
        context: str | None = None,
    ) -> dict[str, Any]:
        """Computed values of one release."""
        return await self._release_fetcher.fetch_release_values(release, namespace, context)


__all__ = ["HelmController", "parse_helm_timestamp"]
