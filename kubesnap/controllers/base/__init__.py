"""Base controller, process runner and fan-out primitives."""

from kubesnap.controllers.base.base_controller import BaseController, FetchStatus
from kubesnap.controllers.base.executable import (
    ResolvedExecutable,
    build_search_directories,
    resolve_executable,
)
from kubesnap.controllers.base.fetch_plan import (
    FetchOutcome,
    FetchPlan,
    SubQuery,
    describe_error,
)
from kubesnap.controllers.base.process_runner import (
    CommandExecutor,
    ForcedErrorCell,
    ProcessRunner,
)

__all__ = [
    "BaseController",
    "CommandExecutor",
    "FetchOutcome",
    "FetchPlan",
    "FetchStatus",
    "ForcedErrorCell",
    "ProcessRunner",
    "ResolvedExecutable",
    "SubQuery",
    "build_search_directories",
    "describe_error",
    "resolve_executable",
]
