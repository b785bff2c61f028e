"""Command execution models: invocations, results, retry policy, errors."""

from kubesnap.models.command.errors import (
    CommandCancelledError,
    CommandDecodeError,
    CommandError,
    CommandTimeoutError,
    ExecutableNotFoundError,
)
from kubesnap.models.command.invocation import CommandInvocation, ProcessResult
from kubesnap.models.command.retry_policy import DEFAULT_RETRY_POLICY, RetryPolicy

__all__ = [
    "DEFAULT_RETRY_POLICY",
    "CommandCancelledError",
    "CommandDecodeError",
    "CommandError",
    "CommandInvocation",
    "CommandTimeoutError",
    "ExecutableNotFoundError",
    "ProcessResult",
    "RetryPolicy",
]
