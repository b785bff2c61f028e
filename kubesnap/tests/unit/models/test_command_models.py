"""Tests for command invocation, process result and structured errors."""

from __future__ import annotations

import pytest

from kubesnap.constants.enums import TerminationReason
from kubesnap.models.command.errors import CommandError, CommandTimeoutError
from kubesnap.models.command.invocation import CommandInvocation, ProcessResult


class TestCommandInvocation:
    """Tests for CommandInvocation."""

    def test_arguments_normalised_to_tuple(self) -> None:
        """Lists are stored as tuples."""
        invocation = CommandInvocation(arguments=["get", "pods"])  # type: ignore[arg-type]
        assert invocation.arguments == ("get", "pods")
        assert invocation.describe() == "get pods"

    def test_env_is_read_only(self) -> None:
        """The env mapping cannot be mutated after construction."""
        invocation = CommandInvocation(arguments=("version",), env={"KUBECONFIG": "/tmp/k"})
        with pytest.raises(TypeError):
            invocation.env["KUBECONFIG"] = "/other"  # type: ignore[index]


class TestProcessResult:
    """Tests for ProcessResult."""

    def test_success(self) -> None:
        """Exit zero through a normal exit succeeds."""
        result = ProcessResult(b"ok", b"", 0)
        assert result.succeeded
        assert result.stdout_text == "ok"

    def test_signal_is_not_success(self) -> None:
        """A signalled process never counts as succeeded."""
        assert not ProcessResult(b"", b"", 0, TerminationReason.SIGNAL).succeeded

    def test_failure_message_prefers_stderr(self) -> None:
        """stderr, else stdout, else the default."""
        assert ProcessResult(b"out", b" err \n", 1).failure_message("dflt") == "err"
        assert ProcessResult(b"out\n", b"", 1).failure_message("dflt") == "out"
        assert ProcessResult(b"", b"  ", 1).failure_message("dflt") == "dflt"

    def test_failure_payload(self) -> None:
        """The raw payload is stdout when present."""
        assert ProcessResult(b"out", b"err", 1).failure_payload() == "out"
        assert ProcessResult(b"", b"err", 1).failure_payload() == "err"
        assert ProcessResult(b"", b"", 1).failure_payload() is None


class TestCommandError:
    """Tests for the structured error hierarchy."""

    def test_str_is_message(self) -> None:
        """str() is the single human-readable message."""
        error = CommandError("boom", output="raw", exit_code=3)
        assert str(error) == "boom"
        assert error.output == "raw"
        assert error.exit_code == 3

    def test_with_payload_keeps_type_and_message(self) -> None:
        """Attaching output keeps the subclass and message."""
        error = CommandTimeoutError("kubectl command timed out after 1s")
        enriched = error.with_payload("partial", -15)
        assert isinstance(enriched, CommandTimeoutError)
        assert enriched.message == error.message
        assert enriched.output == "partial"
        assert enriched.exit_code == -15

    def test_with_payload_does_not_overwrite(self) -> None:
        """Values already on the error win."""
        error = CommandError("x", output="mine", exit_code=2)
        enriched = error.with_payload("theirs", 9)
        assert enriched.output == "mine"
        assert enriched.exit_code == 2
