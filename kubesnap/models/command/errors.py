"""Structured errors raised by the process runner.

Every error carries one human-readable message, the raw process output when
there was any, and the exit code when the process got far enough to have
one. The ``retryable`` class attribute tells the retry policy whether the
failure class may be retried at all.
"""

from __future__ import annotations


class CommandError(Exception):
    """A kubectl/helm invocation failed (non-zero exit, signal, launch error)."""

    retryable: bool = True

    def __init__(
        self,
        message: str,
        output: str | None = None,
        exit_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.output = output
        self.exit_code = exit_code

    def with_payload(self, output: str | None, exit_code: int | None) -> CommandError:
        """Copy of this error with the attempt's output and exit code attached."""
        return type(self)(
            self.message,
            output=self.output if self.output is not None else output,
            exit_code=self.exit_code if self.exit_code is not None else exit_code,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"exit_code={self.exit_code!r})"
        )


class ExecutableNotFoundError(CommandError):
    """The executable could not be resolved; nothing was launched."""

    retryable = False


class CommandTimeoutError(CommandError):
    """The process outlived its wall-clock timeout and was terminated."""


class CommandCancelledError(CommandError):
    """The caller's cancel signal fired and the process was terminated."""

    retryable = False


class CommandDecodeError(CommandError):
    """The process succeeded but its output could not be decoded."""

    retryable = False


__all__ = [
    "CommandCancelledError",
    "CommandDecodeError",
    "CommandError",
    "CommandTimeoutError",
    "ExecutableNotFoundError",
]
