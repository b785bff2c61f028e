"""Tests for executable resolution."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from kubesnap.controllers.base.executable import build_search_directories, resolve_executable
from kubesnap.models.command.errors import ExecutableNotFoundError


def _make_executable(directory: Path, name: str) -> Path:
    path = directory / name
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


class TestBuildSearchDirectories:
    """Tests for build_search_directories."""

    def test_order_and_dedup(self, tmp_path: Path) -> None:
        """Inherited PATH first, then extras, then defaults, without duplicates."""
        inherited = str(tmp_path / "inherited")
        extra = str(tmp_path / "extra")
        directories = build_search_directories(
            [extra, inherited, "/usr/local/bin"],
            {"PATH": os.pathsep.join([inherited, "/usr/local/bin"])},
        )
        assert directories[:3] == [inherited, "/usr/local/bin", extra]
        assert directories.count("/usr/local/bin") == 1
        assert "/opt/homebrew/bin" in directories

    def test_tilde_expanded(self) -> None:
        """Home-relative entries are expanded."""
        directories = build_search_directories(["~/tools"], {"PATH": ""})
        assert os.path.expanduser("~/tools") in directories


class TestResolveExecutable:
    """Tests for resolve_executable."""

    def test_explicit_path(self, tmp_path: Path) -> None:
        """An explicit executable path wins."""
        tool = _make_executable(tmp_path, "kubectl")
        resolved = resolve_executable("kubectl", explicit_path=str(tool), environ={"PATH": ""})
        assert resolved.path == str(tool)

    def test_env_var_path(self, tmp_path: Path) -> None:
        """The tool's environment variable is consulted after the explicit path."""
        tool = _make_executable(tmp_path, "helm")
        resolved = resolve_executable(
            "helm", env_var="HELM_EXE", environ={"PATH": "", "HELM_EXE": str(tool)}
        )
        assert resolved.path == str(tool)

    def test_found_in_extra_directory(self, tmp_path: Path) -> None:
        """The bare name is searched in extra directories."""
        tool = _make_executable(tmp_path, "kubesnap-test-tool")
        resolved = resolve_executable(
            "kubesnap-test-tool", extra_directories=[str(tmp_path)], environ={"PATH": ""}
        )
        assert resolved.path == str(tool)
        assert str(tmp_path) in resolved.search_path.split(os.pathsep)

    def test_non_executable_file_skipped(self, tmp_path: Path) -> None:
        """A plain file with the right name is not an executable."""
        (tmp_path / "kubesnap-test-tool").write_text("")
        with pytest.raises(ExecutableNotFoundError):
            resolve_executable(
                "kubesnap-test-tool", extra_directories=[str(tmp_path)], environ={"PATH": ""}
            )

    def test_missing_explicit_path_message(self, tmp_path: Path) -> None:
        """A bad explicit path names the path in the error."""
        missing = tmp_path / "nope" / "kubectl"
        with pytest.raises(ExecutableNotFoundError) as excinfo:
            resolve_executable(
                "kubesnap-missing-tool", explicit_path=str(missing), environ={"PATH": ""}
            )
        assert str(missing) in excinfo.value.message
        assert "update preferences" in excinfo.value.message

    def test_missing_from_path_message(self) -> None:
        """A bare-name miss points at PATH."""
        with pytest.raises(ExecutableNotFoundError) as excinfo:
            resolve_executable("kubesnap-missing-tool", environ={"PATH": ""})
        assert "not found in PATH" in excinfo.value.message
