"""Command invocation and process result value types."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING

from kubesnap.constants.enums import TerminationReason

if TYPE_CHECKING:
    from kubesnap.models.command.retry_policy import RetryPolicy


@dataclass(frozen=True, slots=True)
class CommandInvocation:
    """One request to run the runner's executable.

    The executable itself is resolved once by the runner; an invocation only
    carries what varies per call.
    """

    arguments: tuple[str, ...]
    env: Mapping[str, str] = field(default_factory=dict)
    cwd: Path | None = None
    policy: RetryPolicy | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", tuple(self.arguments))
        object.__setattr__(self, "env", MappingProxyType(dict(self.env)))

    def describe(self) -> str:
        """Argument list joined for logs."""
        return " ".join(self.arguments)


@dataclass(frozen=True, slots=True)
class ProcessResult:
    """Captured outcome of a single process attempt."""

    stdout: bytes
    stderr: bytes
    exit_code: int
    termination_reason: TerminationReason = TerminationReason.EXIT

    @property
    def succeeded(self) -> bool:
        """Zero exit through a normal exit is the only success."""
        return self.exit_code == 0 and self.termination_reason is TerminationReason.EXIT

    @property
    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")

    def failure_message(self, default: str) -> str:
        """stderr if non-empty, else stdout, else ``default``."""
        stderr = self.stderr_text.strip()
        if stderr:
            return stderr
        stdout = self.stdout_text.strip()
        if stdout:
            return stdout
        return default

    def failure_payload(self) -> str | None:
        """Raw output to attach to an error: stdout, else stderr, else None."""
        if self.stdout:
            return self.stdout_text
        if self.stderr:
            return self.stderr_text
        return None
