"""Resource fetcher - one generic "list kind K, decode items at path P" helper.

Every namespaced and cluster-scoped listing in the cluster controller goes
through ``fetch_list``; only the per-item parser differs between kinds.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from kubesnap.constants.timeouts import CLUSTER_REQUEST_TIMEOUT
from kubesnap.controllers.base.process_runner import CommandExecutor
from kubesnap.models.command.errors import CommandDecodeError
from kubesnap.models.command.invocation import CommandInvocation
from kubesnap.models.command.retry_policy import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")


def decode_items(payload: Any, path: Sequence[str] = ("items",)) -> list[dict[str, Any]]:
    """Return the list of mappings found at ``path`` inside ``payload``.

    A missing or null list decodes as empty. Any other shape raises
    CommandDecodeError.
    """
    node = payload
    for key in path:
        if not isinstance(node, dict):
            raise CommandDecodeError(f"Unexpected kubectl response: expected object at {key!r}")
        node = node.get(key)
    if node is None:
        return []
    if not isinstance(node, list):
        raise CommandDecodeError(
            f"Unexpected kubectl response: expected list at {'.'.join(path)!r}"
        )
    return [item for item in node if isinstance(item, dict)]


def sort_by_name(values: list[T], key: Callable[[T], str] | None = None) -> list[T]:
    """Stable ascending sort on the case-folded name."""
    name_of = key or (lambda value: getattr(value, "name", ""))
    return sorted(values, key=lambda value: name_of(value).casefold())


class ResourceFetcher:
    """Builds kubectl arguments and decodes list responses."""

    def __init__(
        self,
        executor: CommandExecutor,
        request_timeout: str = CLUSTER_REQUEST_TIMEOUT,
    ) -> None:
        """Initialize with the kubectl executor.

        Args:
            executor: Process runner (or test double) used for kubectl calls
            request_timeout: Default ``--request-timeout`` value
        """
        self._executor = executor
        self.request_timeout = request_timeout

    def build_args(
        self,
        context: str,
        *args: str,
        namespace: str | None = None,
        request_timeout: str | None = None,
    ) -> tuple[str, ...]:
        """``--context C [-n NS] <args> -o json --request-timeout=T``."""
        built: list[str] = ["--context", context]
        if namespace:
            built.extend(["-n", namespace])
        built.extend(args)
        built.extend(["-o", "json", f"--request-timeout={request_timeout or self.request_timeout}"])
        return tuple(built)

    async def run_json(self, arguments: Sequence[str]) -> Any:
        return await self._executor.run_json(CommandInvocation(arguments=tuple(arguments)))

    async def run(self, arguments: Sequence[str], policy: RetryPolicy | None = None) -> str:
        return await self._executor.run(
            CommandInvocation(arguments=tuple(arguments), policy=policy)
        )

    async def fetch_items(
        self,
        context: str,
        kind: str,
        namespace: str | None = None,
        request_timeout: str | None = None,
        extra_args: Sequence[str] = (),
        path: Sequence[str] = ("items",),
    ) -> list[dict[str, Any]]:
        """Raw items of ``kubectl get <kind>``."""
        payload = await self.run_json(
            self.build_args(
                context,
                "get",
                kind,
                *extra_args,
                namespace=namespace,
                request_timeout=request_timeout,
            )
        )
        return decode_items(payload, path)

    async def fetch_list(
        self,
        context: str,
        kind: str,
        parse: Callable[[dict[str, Any]], T],
        namespace: str | None = None,
        request_timeout: str | None = None,
    ) -> list[T]:
        """Fetch ``kind`` and parse every item, sorted by name."""
        items = await self.fetch_items(
            context, kind, namespace=namespace, request_timeout=request_timeout
        )
        parsed = [parse(item) for item in items]
        logger.debug("Fetched %d %s in %s/%s", len(parsed), kind, context, namespace or "-")
        return sort_by_name(parsed)

    async def fetch_object(
        self,
        context: str,
        kind: str,
        name: str,
        namespace: str | None = None,
        request_timeout: str | None = None,
    ) -> dict[str, Any]:
        """Single object as a mapping."""
        payload = await self.run_json(
            self.build_args(
                context,
                "get",
                kind,
                name,
                namespace=namespace,
                request_timeout=request_timeout,
            )
        )
        if not isinstance(payload, dict):
            raise CommandDecodeError(f"Unexpected kubectl response for {kind}/{name}")
        return payload

    async def fetch_raw(self, context: str, api_path: str) -> Any:
        """``kubectl get --raw <path>`` decoded as JSON."""
        return await self.run_json(("--context", context, "get", "--raw", api_path))
