"""Process runner for kubectl and helm invocations.

One ``ProcessRunner`` owns one resolved executable. Each call launches a
fresh subprocess, drains stdout and stderr while it runs, enforces the
policy timeout, honours an optional cancel event, and retries failed
attempts with exponential backoff.

Timeout and cancellation race with the process's own exit. Whichever of the
two forced paths fires first records its error in a write-once cell; the
natural completion path consults that cell before trusting the exit code.
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
import os
import shlex
from collections.abc import Awaitable, Callable, Iterable, Mapping
from contextlib import suppress
from typing import TYPE_CHECKING, Any, Protocol

from kubesnap.constants.defaults import (
    HELM_ENV_VAR,
    HELM_EXECUTABLE,
    KUBECONFIG_ENV_VAR,
    KUBECTL_ENV_VAR,
    KUBECTL_EXECUTABLE,
)
from kubesnap.constants.enums import TerminationReason
from kubesnap.constants.timeouts import OUTPUT_DRAIN_TIMEOUT, TERMINATE_GRACE_PERIOD
from kubesnap.controllers.base.executable import ResolvedExecutable, resolve_executable
from kubesnap.models.command.errors import (
    CommandCancelledError,
    CommandDecodeError,
    CommandError,
    CommandTimeoutError,
    ExecutableNotFoundError,
)
from kubesnap.models.command.invocation import CommandInvocation, ProcessResult
from kubesnap.models.command.retry_policy import DEFAULT_RETRY_POLICY, RetryPolicy

if TYPE_CHECKING:
    from kubesnap.models.state.app_settings import ClientSettings

logger = logging.getLogger(__name__)

_READ_CHUNK_SIZE = 64 * 1024


class CommandExecutor(Protocol):
    """What fetchers need from a runner."""

    async def run(
        self,
        invocation: CommandInvocation,
        cancel_event: asyncio.Event | None = None,
    ) -> str: ...

    async def run_json(
        self,
        invocation: CommandInvocation,
        cancel_event: asyncio.Event | None = None,
    ) -> Any: ...


class ForcedErrorCell:
    """Write-once holder for the error that ends an attempt early.

    The first ``set`` wins; later writes are ignored and report False.
    """

    __slots__ = ("_error",)

    def __init__(self) -> None:
        self._error: CommandError | None = None

    def set(self, error: CommandError) -> bool:
        if self._error is not None:
            return False
        self._error = error
        return True

    @property
    def error(self) -> CommandError | None:
        return self._error


class ProcessRunner:
    """Runs one CLI tool with timeout, cancellation and retry."""

    def __init__(
        self,
        tool: str,
        *,
        explicit_path: str | None = None,
        env_var: str | None = None,
        extra_search_directories: Iterable[str] = (),
        policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        env: Mapping[str, str] | None = None,
        environ: Mapping[str, str] | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.tool = tool
        self.policy = policy
        self._env_var = env_var
        self._base_env = dict(env or {})
        self._environ = dict(os.environ if environ is None else environ)
        self._sleep = sleep

        self._resolved: ResolvedExecutable | None = None
        self._resolution_error: ExecutableNotFoundError | None = None
        try:
            self._resolved = resolve_executable(
                tool,
                explicit_path=explicit_path,
                env_var=env_var,
                extra_directories=extra_search_directories,
                environ=self._environ,
            )
        except ExecutableNotFoundError as exc:
            self._resolution_error = exc
        else:
            logger.debug("Resolved %s at %s", tool, self._resolved.path)

    @classmethod
    def for_kubectl(cls, settings: ClientSettings, **kwargs: Any) -> ProcessRunner:
        """Runner for kubectl configured from client settings."""
        return cls(
            KUBECTL_EXECUTABLE,
            explicit_path=settings.kubectl_path,
            env_var=KUBECTL_ENV_VAR,
            extra_search_directories=settings.extra_search_directories,
            policy=settings.retry_policy(),
            env=_kubeconfig_env(settings),
            **kwargs,
        )

    @classmethod
    def for_helm(cls, settings: ClientSettings, **kwargs: Any) -> ProcessRunner:
        """Runner for helm configured from client settings."""
        return cls(
            HELM_EXECUTABLE,
            explicit_path=settings.helm_path,
            env_var=HELM_ENV_VAR,
            extra_search_directories=settings.extra_search_directories,
            policy=settings.helm_retry_policy(),
            env=_kubeconfig_env(settings),
            **kwargs,
        )

    @property
    def executable(self) -> str | None:
        """Resolved executable path, or None when resolution failed."""
        return self._resolved.path if self._resolved is not None else None

    # =========================================================================
    # Public API
    # =========================================================================

    async def run(
        self,
        invocation: CommandInvocation,
        cancel_event: asyncio.Event | None = None,
    ) -> str:
        """Run the invocation and return its stdout as text.

        Raises:
            ExecutableNotFoundError: the tool could not be resolved.
            CommandTimeoutError: the final attempt timed out.
            CommandCancelledError: ``cancel_event`` fired.
            CommandError: the final attempt exited unsuccessfully.
        """
        result = await self.run_process(invocation, cancel_event)
        return result.stdout_text

    async def run_json(
        self,
        invocation: CommandInvocation,
        cancel_event: asyncio.Event | None = None,
    ) -> Any:
        """Run the invocation and decode stdout as JSON.

        A decode failure raises CommandDecodeError and is never retried.
        """
        stdout = await self.run(invocation, cancel_event)
        try:
            return json.loads(stdout)
        except ValueError as exc:
            raise CommandDecodeError(
                f"Failed to decode {self.tool} response", output=stdout
            ) from exc

    async def run_process(
        self,
        invocation: CommandInvocation,
        cancel_event: asyncio.Event | None = None,
    ) -> ProcessResult:
        """Retry loop around single attempts; returns the successful result."""
        resolved = self._require_executable()
        policy = invocation.policy or self.policy

        attempt = 0
        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise CommandCancelledError(f"{self.tool} command cancelled")
            try:
                return await self._run_attempt(resolved, invocation, policy, cancel_event)
            except CommandError as error:
                if not policy.should_retry(error, attempt):
                    raise
                delay = policy.backoff_delay(attempt)
                logger.debug(
                    "Retrying %s (attempt %d of %d) after %.1fs: %s",
                    self.tool,
                    attempt + 2,
                    policy.max_attempts,
                    delay,
                    error.message,
                )
                await self._sleep(delay)
                attempt += 1

    # =========================================================================
    # Single attempt
    # =========================================================================

    def _require_executable(self) -> ResolvedExecutable:
        if self._resolved is None:
            assert self._resolution_error is not None
            raise ExecutableNotFoundError(self._resolution_error.message)
        return self._resolved

    def _child_env(
        self, resolved: ResolvedExecutable, invocation: CommandInvocation
    ) -> dict[str, str]:
        env = dict(self._environ)
        env["PATH"] = resolved.search_path
        if self._env_var:
            env[self._env_var] = resolved.path
        env.update(self._base_env)
        env.update(invocation.env)
        return env

    async def _run_attempt(
        self,
        resolved: ResolvedExecutable,
        invocation: CommandInvocation,
        policy: RetryPolicy,
        cancel_event: asyncio.Event | None,
    ) -> ProcessResult:
        argv = [resolved.path, *invocation.arguments]
        logger.debug("Run: %s", shlex.join(argv))
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self._child_env(resolved, invocation),
                cwd=invocation.cwd,
            )
        except OSError as exc:
            raise CommandError(f"Failed to launch {self.tool}: {exc}") from exc

        stdout = bytearray()
        stderr = bytearray()
        forced = ForcedErrorCell()
        drains = [
            asyncio.create_task(_drain(process.stdout, stdout)),
            asyncio.create_task(_drain(process.stderr, stderr)),
        ]
        watchers: list[asyncio.Task[None]] = []
        if policy.timeout is not None:
            watchers.append(
                asyncio.create_task(self._expire(process, forced, policy.timeout))
            )
        if cancel_event is not None:
            watchers.append(
                asyncio.create_task(self._watch_cancel(process, forced, cancel_event))
            )

        try:
            returncode = await process.wait()
            await asyncio.wait(drains, timeout=OUTPUT_DRAIN_TIMEOUT)
        except asyncio.CancelledError:
            logger.debug("%s attempt cancelled by caller; killing pid %s", self.tool, process.pid)
            await _reap(process)
            raise
        finally:
            for task in (*watchers, *drains):
                if not task.done():
                    task.cancel()

        reason = TerminationReason.SIGNAL if returncode < 0 else TerminationReason.EXIT
        result = ProcessResult(bytes(stdout), bytes(stderr), returncode, reason)
        logger.debug("%s exited with %d (%s)", self.tool, returncode, reason.value)

        forced_error = forced.error
        if forced_error is not None:
            raise forced_error.with_payload(
                result.stderr_text or result.stdout_text or None, returncode
            )
        if not result.succeeded:
            raise CommandError(
                result.failure_message(f"{self.tool} command failed"),
                output=result.failure_payload(),
                exit_code=returncode,
            )
        return result

    async def _expire(
        self,
        process: asyncio.subprocess.Process,
        forced: ForcedErrorCell,
        timeout: float,
    ) -> None:
        await asyncio.sleep(timeout)
        if process.returncode is not None:
            return
        message = f"{self.tool} command timed out after {math.ceil(timeout)}s"
        if forced.set(CommandTimeoutError(message)):
            logger.debug("%s (pid %s)", message, process.pid)
            await _terminate(process)

    async def _watch_cancel(
        self,
        process: asyncio.subprocess.Process,
        forced: ForcedErrorCell,
        cancel_event: asyncio.Event,
    ) -> None:
        await cancel_event.wait()
        if process.returncode is not None:
            return
        if forced.set(CommandCancelledError(f"{self.tool} command cancelled")):
            logger.debug("%s cancelled (pid %s)", self.tool, process.pid)
            await _terminate(process)


async def _drain(stream: asyncio.StreamReader | None, buffer: bytearray) -> None:
    if stream is None:
        return
    while True:
        chunk = await stream.read(_READ_CHUNK_SIZE)
        if not chunk:
            return
        buffer.extend(chunk)


async def _terminate(process: asyncio.subprocess.Process) -> None:
    """SIGTERM, then SIGKILL after the grace period."""
    if process.returncode is not None:
        return
    with suppress(ProcessLookupError):
        process.terminate()
    try:
        await asyncio.wait_for(process.wait(), timeout=TERMINATE_GRACE_PERIOD)
    except asyncio.TimeoutError:
        _kill(process)


def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    with suppress(ProcessLookupError):
        process.kill()


async def _reap(process: asyncio.subprocess.Process) -> None:
    """SIGKILL and wait up to the grace period for the exit status.

    The wait is shielded so a second cancellation of the caller still
    leaves the child reaped.
    """
    _kill(process)
    with suppress(asyncio.TimeoutError):
        await asyncio.shield(
            asyncio.wait_for(process.wait(), timeout=TERMINATE_GRACE_PERIOD)
        )


def _kubeconfig_env(settings: ClientSettings) -> dict[str, str]:
    if not settings.kubeconfig:
        return {}
    return {KUBECONFIG_ENV_VAR: os.path.expanduser(settings.kubeconfig)}


__all__ = [
    "CommandExecutor",
    "ForcedErrorCell",
    "ProcessRunner",
]
