"""Config fetcher - secret permission checks via ``kubectl auth can-i``."""

from __future__ import annotations

import asyncio
import logging

from kubesnap.controllers.cluster.fetchers.resource_fetcher import ResourceFetcher
from kubesnap.models.command.errors import CommandError
from kubesnap.models.command.retry_policy import RetryPolicy
from kubesnap.models.core.config_info import ConfigResourcePermissions

logger = logging.getLogger(__name__)

# ``auth can-i`` answers a denial with "no" and exit status 1.
_DENIED_EXIT_CODE = 1
_CAN_I_POLICY = RetryPolicy(max_attempts=1)


def is_affirmative(reply: str) -> bool:
    """``auth can-i`` prints ``yes``/``no``; anything starting with y is allowed."""
    return reply.strip().lower().startswith("y")


def is_denial(error: CommandError) -> bool:
    """Whether ``error`` is ``auth can-i`` answering "no" rather than failing."""
    if error.exit_code != _DENIED_EXIT_CODE:
        return False
    reply = (error.output or "").strip().lower()
    return reply.startswith("no")


class ConfigFetcher:
    """Checks what the current identity may do with secrets."""

    def __init__(self, resources: ResourceFetcher) -> None:
        self._resources = resources

    async def can_i(self, context: str, namespace: str, verb: str, resource: str) -> bool:
        """Ask the API server whether ``verb`` on ``resource`` is allowed.

        A denial is an answer, not a failure: it returns False. Any other
        error propagates without being retried.
        """
        try:
            reply = await self._resources.run(
                ("--context", context, "-n", namespace, "auth", "can-i", verb, resource),
                policy=_CAN_I_POLICY,
            )
        except CommandError as exc:
            if is_denial(exc):
                return False
            raise
        return is_affirmative(reply)

    async def fetch_secret_permissions(
        self, context: str, namespace: str, secret_name: str
    ) -> ConfigResourcePermissions:
        """Reveal (get) and edit (update) permission for one secret.

        Either check failing raises, so the caller can leave the secret
        uncached.
        """
        resource = f"secret/{secret_name}"
        can_reveal, can_edit = await asyncio.gather(
            self.can_i(context, namespace, "get", resource),
            self.can_i(context, namespace, "update", resource),
        )
        logger.debug(
            "Permissions for %s/%s: reveal=%s edit=%s",
            namespace,
            secret_name,
            can_reveal,
            can_edit,
        )
        return ConfigResourcePermissions(can_reveal=can_reveal, can_edit=can_edit)
