"""Base controller shared by the kubectl and helm controllers.

Tracks per-source fetch state and the best-effort warnings collected from
sub-queries that degraded instead of failing the whole fetch.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from kubesnap.constants.enums import FetchState
from kubesnap.controllers.base.fetch_plan import FetchOutcome, FetchPlan, describe_error

logger = logging.getLogger(__name__)

_PREFERRED_ERROR_TOKENS = (
    "unable to connect to the server",
    "you must be logged in",
    "context deadline exceeded",
    "timed out",
    "certificate",
    "no such host",
    "forbidden",
    "unauthorized",
)
_SUMMARY_LIMIT = 160


@dataclass
class FetchStatus:
    """Last known outcome of one named sub-query."""

    source_name: str
    state: FetchState = FetchState.SUCCESS
    error_message: str | None = None
    last_updated: datetime | None = None

    def mark(self, state: FetchState, error_message: str | None = None) -> None:
        """Move to ``state``; only a success refreshes ``last_updated``."""
        self.state = state
        self.error_message = error_message
        if state is FetchState.SUCCESS:
            self.last_updated = datetime.now(timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        stamp = self.last_updated.isoformat() if self.last_updated else None
        return {
            "source_name": self.source_name,
            "state": self.state.value,
            "error_message": self.error_message,
            "last_updated": stamp,
        }


class BaseController(ABC):
    """Common bookkeeping for controllers that run fetch plans.

    Subclasses implement ``check_connection`` and build their composite
    fetches out of ``FetchPlan`` instances run through ``_run_plan``.
    """

    def __init__(self) -> None:
        self._fetch_states: dict[str, FetchStatus] = {}
        self._nonfatal_warnings: dict[str, str] = {}

    @abstractmethod
    async def check_connection(self) -> bool:
        """Check that the backing CLI answers.

        Returns:
            True when the CLI answered, False otherwise.
        """
        ...

    # -- fetch state -----------------------------------------------------

    def _update_fetch_state(
        self,
        source: str,
        state: FetchState,
        error_message: str | None = None,
    ) -> None:
        status = self._fetch_states.setdefault(source, FetchStatus(source_name=source))
        status.mark(state, error_message)

    def get_fetch_state(self, source: str) -> FetchStatus | None:
        """Status of one sub-query, or None if it never ran."""
        return self._fetch_states.get(source)

    def get_error_sources(self) -> list[str]:
        """Names of sub-queries whose last run failed."""
        return [
            name for name, status in self._fetch_states.items()
            if status.state is FetchState.ERROR
        ]

    def get_last_nonfatal_warnings(self) -> dict[str, str]:
        """Degraded sub-queries keyed ``"<plan>:<sub-query>"``."""
        return dict(self._nonfatal_warnings)

    def _record_nonfatal_warning(self, key: str, error: BaseException | str) -> None:
        message = error if isinstance(error, str) else describe_error(error)
        self._nonfatal_warnings[str(key)] = message.strip() or "Unknown warning"

    async def _run_plan(self, plan: FetchPlan) -> FetchOutcome:
        """Execute a plan, recording per-source state and degraded warnings."""
        for name in plan.names:
            self._update_fetch_state(name, FetchState.LOADING)
        try:
            outcome = await plan.execute()
        except Exception as exc:
            message = describe_error(exc)
            for name in plan.names:
                status = self._fetch_states.get(name)
                if status is not None and status.state == FetchState.LOADING:
                    self._update_fetch_state(name, FetchState.ERROR, message)
            raise

        for name in plan.names:
            error = outcome.failures.get(name)
            if error is None:
                self._update_fetch_state(name, FetchState.SUCCESS)
                continue
            self._update_fetch_state(name, FetchState.ERROR, describe_error(error))
            self._record_nonfatal_warning(f"{plan.name}:{name}", error)
        return outcome

    @staticmethod
    def _summarize_error(error: BaseException, fallback: str = "Request failed") -> str:
        """Pick the most telling line of multi-line CLI output.

        The last ``error:`` line, or the last line naming a known failure,
        wins over plain trailing output. Results longer than 160 characters
        are cut to 157 plus ``...``.
        """
        candidates = [
            line.strip() for line in describe_error(error).splitlines() if line.strip()
        ]
        if not candidates:
            return fallback

        def telling(line: str) -> bool:
            lowered = line.lower()
            return line.startswith("error:") or any(
                token in lowered for token in _PREFERRED_ERROR_TOKENS
            )

        chosen = next((line for line in reversed(candidates) if telling(line)), candidates[-1])
        summary = chosen.removeprefix("error:").strip()
        if len(summary) > _SUMMARY_LIMIT:
            return summary[: _SUMMARY_LIMIT - 3].rstrip() + "..."
        return summary or fallback


__all__ = [
    "BaseController",
    "FetchStatus",
]
