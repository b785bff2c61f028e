"""Executable discovery for kubectl and helm.

Tools installed by package managers or cloud SDKs are often missing from
the PATH a process inherits, so resolution scans an enhanced search path.
The same search path is exported to the child process so credential
plugins (``gke-gcloud-auth-plugin`` and friends) resolve too.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from kubesnap.constants.defaults import DEFAULT_SEARCH_DIRECTORIES
from kubesnap.models.command.errors import ExecutableNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedExecutable:
    """An executable path plus the search path it was found on."""

    tool: str
    path: str
    search_path: str


def build_search_directories(
    extra_directories: Iterable[str] = (),
    environ: Mapping[str, str] | None = None,
) -> list[str]:
    """Inherited PATH, then extra directories, then well-known defaults.

    Entries are ``~``-expanded and de-duplicated, keeping first occurrence.
    """
    env = os.environ if environ is None else environ
    inherited = [part for part in env.get("PATH", "").split(os.pathsep) if part]

    directories: list[str] = []
    seen: set[str] = set()
    for candidate in (*inherited, *extra_directories, *DEFAULT_SEARCH_DIRECTORIES):
        expanded = os.path.expanduser(candidate.strip())
        if not expanded or expanded in seen:
            continue
        seen.add(expanded)
        directories.append(expanded)
    return directories


def _is_executable_file(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)


def resolve_executable(
    tool: str,
    explicit_path: str | None = None,
    env_var: str | None = None,
    extra_directories: Iterable[str] = (),
    environ: Mapping[str, str] | None = None,
) -> ResolvedExecutable:
    """Locate ``tool`` or raise ExecutableNotFoundError.

    Candidates are tried in order: the explicit path, the tool's
    environment variable, the bare tool name.
    """
    env = os.environ if environ is None else environ
    directories = build_search_directories(extra_directories, env)
    search_path = os.pathsep.join(directories)

    candidates: list[str] = []
    if explicit_path and explicit_path.strip():
        candidates.append(os.path.expanduser(explicit_path.strip()))
    if env_var:
        from_env = env.get(env_var, "").strip()
        if from_env:
            candidates.append(os.path.expanduser(from_env))
    candidates.append(tool)

    for candidate in candidates:
        if os.sep in candidate:
            if _is_executable_file(candidate):
                return ResolvedExecutable(tool, candidate, search_path)
            continue
        for directory in directories:
            path = os.path.join(directory, candidate)
            if _is_executable_file(path):
                return ResolvedExecutable(tool, path, search_path)
        found = shutil.which(candidate, path=search_path)
        if found:
            return ResolvedExecutable(tool, found, search_path)

    explicit = next((candidate for candidate in candidates if os.sep in candidate), None)
    if explicit is not None:
        message = (
            f"{tool} executable not found at {explicit}. "
            f"Install {tool} or update preferences."
        )
    else:
        message = (
            f"{tool} executable not found in PATH. "
            f"Install {tool} or add it to your PATH."
        )
    logger.debug("Executable resolution failed: %s", message)
    raise ExecutableNotFoundError(message)


__all__ = [
    "ResolvedExecutable",
    "build_search_directories",
    "resolve_executable",
]
