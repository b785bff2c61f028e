"""Tests for metric derivation helpers.

The latency figures exercised here come from a heuristic over resource
pressure and event text; they are estimates, not measured latency.
"""

from __future__ import annotations

import pytest

from kubesnap.utils.metrics import (
    estimate_pod_latency,
    format_bytes,
    format_cpu,
    format_percent,
    format_rate,
    parse_latency,
    percentile,
)


class TestPercentile:
    """Tests for linear-interpolated percentiles."""

    def test_median_interpolates(self) -> None:
        """Position 1.5 falls halfway between 0.2 and 0.3."""
        assert percentile([0.1, 0.2, 0.3, 0.4], 0.5) == pytest.approx(0.25)

    def test_maximum(self) -> None:
        """The 100th percentile is the last value."""
        assert percentile([0.1, 0.2, 0.3, 0.4], 1.0) == pytest.approx(0.4)

    def test_p95(self) -> None:
        """p95 of four samples sits near the top rank."""
        assert percentile([0.1, 0.2, 0.3, 0.4], 0.95) == pytest.approx(0.385)

    def test_exact_rank(self) -> None:
        """An integral position returns that rank's value."""
        assert percentile([1.0, 2.0, 3.0], 0.5) == 2.0

    def test_single_and_empty(self) -> None:
        """One sample is every percentile; no samples is zero."""
        assert percentile([0.7], 0.95) == 0.7
        assert percentile([], 0.5) == 0.0


class TestEstimatePodLatency:
    """Tests for the heuristic pod latency estimate."""

    def test_formula(self) -> None:
        """0.045 + 0.25*avg + 0.01*warnings + 0.004*restarts."""
        estimate = estimate_pod_latency([0.4, 0.6, None], warning_count=2, restarts=5)
        assert estimate == pytest.approx(0.045 + 0.25 * 0.5 + 0.02 + 0.02)

    def test_penalties_are_capped(self) -> None:
        """Warnings cap at 12 and restarts at 20."""
        capped = estimate_pod_latency([0.0], warning_count=12, restarts=20)
        excessive = estimate_pod_latency([0.0], warning_count=50, restarts=500)
        assert capped == excessive == pytest.approx(0.045 + 0.12 + 0.08)

    def test_floor(self) -> None:
        """Idle pods sit at the 45ms floor."""
        assert estimate_pod_latency([0.0, 0.0]) == pytest.approx(0.045)

    def test_no_pressure_samples(self) -> None:
        """Unknown pressure gives no estimate."""
        assert estimate_pod_latency([None, None], warning_count=3) is None


class TestParseLatency:
    """Tests for duration extraction from event text."""

    def test_milliseconds(self) -> None:
        """Millisecond values are converted to seconds."""
        assert parse_latency("probe took 250ms") == pytest.approx(0.25)
        assert parse_latency("slow: 120 milliseconds") == pytest.approx(0.12)

    def test_seconds(self) -> None:
        """Second values are taken literally."""
        assert parse_latency("readiness timeout 1.2 s") == pytest.approx(1.2)
        assert parse_latency("waited 3 seconds") == pytest.approx(3.0)

    def test_no_duration(self) -> None:
        """Text without a duration yields None."""
        assert parse_latency("Back-off restarting failed container") is None
        assert parse_latency("") is None


class TestFormatting:
    """Tests for display-agnostic formatting helpers."""

    def test_format_bytes(self) -> None:
        """Binary units are chosen adaptively."""
        assert format_bytes(0) == "0 B"
        assert format_bytes(512) == "512 B"
        assert format_bytes(1536) == "1.5 KiB"
        assert format_bytes(2 * 1024**3) == "2.0 GiB"

    def test_format_rate(self) -> None:
        """Rates append a per-second suffix."""
        assert format_rate(1024**2) == "1.0 MiB/s"

    def test_format_cpu(self) -> None:
        """Millicores below one core, cores above."""
        assert format_cpu(0.25) == "250m"
        assert format_cpu(1.5) == "1.5 cores"
        assert format_cpu(2) == "2 cores"

    def test_format_percent(self) -> None:
        """Ratios are clamped and rounded."""
        assert format_percent(0.256) == "26%"
        assert format_percent(1.7) == "100%"
