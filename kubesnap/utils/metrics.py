"""Metric derivation helpers: percentiles, latency heuristics, formatting.

Pure functions with no I/O. Formatting helpers are display-agnostic
building blocks; they do not decide what a screen shows.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Sequence

# Latency heuristic constants (seconds unless noted).
LATENCY_BASE_SECONDS = 0.045
LATENCY_CEILING_SECONDS = 1.5
LATENCY_PRESSURE_WEIGHT = 0.25
LATENCY_WARNING_PENALTY = 0.01
LATENCY_WARNING_CAP = 12
LATENCY_RESTART_PENALTY = 0.004
LATENCY_RESTART_CAP = 20

_LATENCY_PATTERN = re.compile(
    r"(\d+(?:\.\d+)?)\s*(ms|milliseconds|msec|s|sec|secs|seconds)",
    re.IGNORECASE,
)

_BINARY_UNITS: tuple[tuple[str, float], ...] = (
    ("TiB", 1024.0**4),
    ("GiB", 1024.0**3),
    ("MiB", 1024.0**2),
    ("KiB", 1024.0),
)


def percentile(values: Sequence[float], quantile: float) -> float:
    """Linear-interpolated percentile of already-sorted values.

    ``position = q * (n - 1)``; when the position falls between two ranks
    the result is interpolated fractionally between them. Empty input
    yields 0.0.
    """
    if not values:
        return 0.0
    q = min(max(quantile, 0.0), 1.0)
    if len(values) == 1:
        return float(values[0])

    position = q * (len(values) - 1)
    lower_index = math.floor(position)
    upper_index = math.ceil(position)
    if lower_index == upper_index:
        return float(values[lower_index])

    lower_value = values[lower_index]
    upper_value = values[upper_index]
    fraction = position - lower_index
    return lower_value + (upper_value - lower_value) * fraction


def estimate_pod_latency(
    pressures: Iterable[float | None],
    warning_count: int = 0,
    restarts: int = 0,
) -> float | None:
    """Heuristic latency estimate (seconds) from pod resource pressure.

    Averages the known usage ratios, then applies
    ``clamp(0.045 + 0.25*avg + 0.01*min(warnings, 12)
    + 0.004*min(restarts, 20), 0.045, 1.5)``.
    Returns None when no pressure sample is known.
    """
    samples = [value for value in pressures if value is not None]
    if not samples:
        return None

    average = sum(samples) / len(samples)
    warning_penalty = min(warning_count, LATENCY_WARNING_CAP) * LATENCY_WARNING_PENALTY
    restart_penalty = min(restarts, LATENCY_RESTART_CAP) * LATENCY_RESTART_PENALTY
    estimate = (
        LATENCY_BASE_SECONDS
        + average * LATENCY_PRESSURE_WEIGHT
        + warning_penalty
        + restart_penalty
    )
    return min(max(estimate, LATENCY_BASE_SECONDS), LATENCY_CEILING_SECONDS)


def parse_latency(message: str) -> float | None:
    """Extract the first duration mentioned in free text, in seconds.

    ``"took 250ms"`` -> 0.25, ``"slow response 1.2 s"`` -> 1.2.
    """
    if not message:
        return None
    match = _LATENCY_PATTERN.search(message)
    if match is None:
        return None
    try:
        value = float(match.group(1))
    except ValueError:
        return None
    unit = match.group(2).lower()
    if unit.startswith("ms") or "millisecond" in unit:
        return value / 1000
    return value


def format_bytes(value: float) -> str:
    """Format bytes to human-readable IEC units."""
    if value <= 0:
        return "0 B"
    for suffix, size in _BINARY_UNITS:
        if value >= size:
            return f"{value / size:.1f} {suffix}"
    return f"{value:.0f} B"


def format_rate(bytes_per_second: float) -> str:
    """Format a byte rate, e.g. ``"1.5 MiB/s"``."""
    return f"{format_bytes(bytes_per_second)}/s"


def format_cpu(cores: float) -> str:
    """Format CPU cores; millicores below one core."""
    if cores < 1:
        return f"{round(cores * 1000)}m"
    formatted = f"{cores:.2f}".rstrip("0").rstrip(".")
    return f"{formatted} cores"


def format_percent(ratio: float) -> str:
    """Format a [0, 1] ratio as a whole percentage."""
    return f"{round(min(max(ratio, 0.0), 1.0) * 100)}%"
