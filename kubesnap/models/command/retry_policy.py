"""Retry policy shared by every invocation of a runner."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from kubesnap.constants.defaults import (
    MAX_ATTEMPTS_DEFAULT,
    RETRY_DELAY_DEFAULT,
    RETRYABLE_ERROR_SUBSTRINGS_DEFAULT,
    RETRYABLE_EXIT_CODES_DEFAULT,
)
from kubesnap.constants.timeouts import COMMAND_TIMEOUT
from kubesnap.models.command.errors import CommandError


class RetryPolicy(BaseModel):
    """Timeout, attempt bound and backoff for process invocations.

    ``max_attempts`` counts every attempt including the first one, so a
    permanently failing command runs exactly ``max_attempts`` times.
    A ``timeout`` of None disables the wall-clock timeout.
    """

    model_config = ConfigDict(frozen=True)

    timeout: float | None = Field(default=COMMAND_TIMEOUT, gt=0)
    max_attempts: int = Field(default=MAX_ATTEMPTS_DEFAULT, ge=1)
    retry_delay: float = Field(default=RETRY_DELAY_DEFAULT, ge=0)
    retryable_exit_codes: frozenset[int] = RETRYABLE_EXIT_CODES_DEFAULT
    retryable_error_substrings: tuple[str, ...] = RETRYABLE_ERROR_SUBSTRINGS_DEFAULT

    def should_retry(self, error: CommandError, attempt: int) -> bool:
        """Decide whether the failed zero-based ``attempt`` gets another try."""
        if attempt + 1 >= self.max_attempts:
            return False
        if not error.retryable:
            return False
        if error.exit_code is not None and error.exit_code in self.retryable_exit_codes:
            return True
        haystack = f"{error.message} {error.output or ''}".lower()
        return any(
            token.lower() in haystack for token in self.retryable_error_substrings
        )

    def backoff_delay(self, attempt: int) -> float:
        """Delay before the retry following zero-based ``attempt``."""
        return max(0.0, self.retry_delay * (2 ** max(attempt, 0)))


DEFAULT_RETRY_POLICY = RetryPolicy()
