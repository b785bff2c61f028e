"""Resource parsing utilities for CPU and memory quantities.

Parses Kubernetes quantity strings into normalized numbers:
- CPU: parsed to cores (float)
- Memory / storage: parsed to bytes (float)

Every parser returns ``None`` for values it cannot read. Callers treat
``None`` as "unknown", never as zero.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

# CPU suffix divisors, matched case-insensitively.
_CPU_SUFFIX_DIVISORS: tuple[tuple[str, float], ...] = (
    ("n", 1_000_000_000),
    ("u", 1_000_000),
    ("m", 1000),
)

# Memory suffix multipliers, longest suffix first so "Mi" wins over "M".
_MEMORY_BYTES_MULTIPLIERS: tuple[tuple[str, float], ...] = (
    ("EI", 1024.0**6),
    ("PI", 1024.0**5),
    ("TI", 1024.0**4),
    ("GI", 1024.0**3),
    ("MI", 1024.0**2),
    ("KI", 1024.0),
    ("E", 1000.0**6),
    ("P", 1000.0**5),
    ("T", 1000.0**4),
    ("G", 1000.0**3),
    ("M", 1000.0**2),
    ("K", 1000.0),
)


def _to_float(text: str) -> float | None:
    try:
        value = float(text)
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def parse_cpu(cpu_str: Any) -> float | None:
    """Parse CPU string to cores (float).

    Handles various CPU resource formats:
    - Nanocores: "500000000n" -> 0.5 cores
    - Microcores: "500000u" -> 0.5 cores
    - Millicores: "100m" -> 0.1 cores
    - Decimal: "1.5" -> 1.5 cores
    - Integer: "2" -> 2.0 cores

    Args:
        cpu_str: CPU value as string (e.g., "100m", "1.5", "500")

    Returns:
        CPU value in cores, or None on parse error or empty input.
    """
    if cpu_str is None:
        return None
    text = str(cpu_str).strip()
    if not text:
        return None

    lowered = text.lower()
    for suffix, divisor in _CPU_SUFFIX_DIVISORS:
        if lowered.endswith(suffix):
            base = _to_float(lowered[: -len(suffix)])
            return None if base is None else base / divisor

    return _to_float(lowered)


def memory_str_to_bytes(memory_str: Any) -> float | None:
    """Convert memory or storage string to bytes.

    Handles binary suffixes (Ki, Mi, Gi, Ti, Pi, Ei) as powers of 1024 and
    decimal suffixes (K, M, G, T, P, E) as powers of 1000. Suffixes are
    matched case-insensitively, longest first. Unsuffixed values are a
    plain byte count.

    Args:
        memory_str: Memory value as string (e.g., "512Mi", "1Gi", "1G")

    Returns:
        Value in bytes, or None on parse error or empty input.
    """
    if memory_str is None:
        return None
    text = str(memory_str).strip()
    if not text:
        return None

    upper = text.upper()
    for suffix, mult in _MEMORY_BYTES_MULTIPLIERS:
        if upper.endswith(suffix):
            base = _to_float(text[: -len(suffix)])
            return None if base is None else base * mult

    return _to_float(text)


def clamp_ratio(value: float) -> float:
    """Clamp a ratio into [0, 1]."""
    return min(max(value, 0.0), 1.0)


def usage_ratio(
    usage: float | None,
    request: float | None = None,
    limit: float | None = None,
) -> float | None:
    """Derive a usage ratio against the limit, falling back to the request.

    Returns None when usage is unknown or neither limit nor request is a
    positive finite number. The result is always clamped to [0, 1].
    """
    if usage is None:
        return None
    if limit is not None and math.isfinite(limit) and limit > 0:
        return clamp_ratio(usage / limit)
    if request is not None and math.isfinite(request) and request > 0:
        return clamp_ratio(usage / request)
    return None


def capacity_ratio(usage: float | None, capacity: float | None) -> float | None:
    """Ratio of usage to a node capacity, clamped to [0, 1]."""
    return usage_ratio(usage, limit=capacity)


@dataclass(frozen=True)
class ResourceTotals:
    """Summed container requests and limits for one pod.

    A field is None when no container declares that resource.
    """

    cpu_request: float | None = None
    cpu_limit: float | None = None
    memory_request: float | None = None
    memory_limit: float | None = None
    storage_request: float | None = None
    storage_limit: float | None = None


_RESOURCE_FIELDS: tuple[tuple[str, str, str, Any], ...] = (
    ("cpu_request", "requests", "cpu", parse_cpu),
    ("cpu_limit", "limits", "cpu", parse_cpu),
    ("memory_request", "requests", "memory", memory_str_to_bytes),
    ("memory_limit", "limits", "memory", memory_str_to_bytes),
    ("storage_request", "requests", "ephemeral-storage", memory_str_to_bytes),
    ("storage_limit", "limits", "ephemeral-storage", memory_str_to_bytes),
)


def aggregate_container_resources(
    containers: Iterable[Mapping[str, Any]],
) -> ResourceTotals:
    """Sum requests and limits across pod containers.

    Args:
        containers: Raw container specs from a pod spec.

    Returns:
        ResourceTotals with cores for CPU and bytes for memory/storage.
    """
    totals: dict[str, float] = {}
    for container in containers:
        if not isinstance(container, Mapping):
            continue
        resources = container.get("resources") or {}
        if not isinstance(resources, Mapping):
            continue
        for field_name, section, resource, parser in _RESOURCE_FIELDS:
            values = resources.get(section) or {}
            if not isinstance(values, Mapping) or resource not in values:
                continue
            parsed = parser(values[resource])
            if parsed is None:
                continue
            totals[field_name] = totals.get(field_name, 0.0) + parsed
    return ResourceTotals(**totals)


@dataclass(frozen=True)
class ResourceUsage:
    """Observed CPU (cores) and memory (bytes) from the metrics API."""

    cpu_cores: float | None = None
    memory_bytes: float | None = None


def parse_usage(usage: Mapping[str, Any] | None) -> ResourceUsage:
    """Parse one metrics-API ``usage`` mapping."""
    if not isinstance(usage, Mapping):
        return ResourceUsage()
    return ResourceUsage(
        cpu_cores=parse_cpu(usage.get("cpu")),
        memory_bytes=memory_str_to_bytes(usage.get("memory")),
    )


def sum_container_usage(containers: Iterable[Mapping[str, Any]]) -> ResourceUsage:
    """Sum per-container metrics; a field stays None when no container reports it."""
    cpu_total: float | None = None
    memory_total: float | None = None
    for container in containers:
        if not isinstance(container, Mapping):
            continue
        usage = parse_usage(container.get("usage"))
        if usage.cpu_cores is not None:
            cpu_total = (cpu_total or 0.0) + usage.cpu_cores
        if usage.memory_bytes is not None:
            memory_total = (memory_total or 0.0) + usage.memory_bytes
    return ResourceUsage(cpu_cores=cpu_total, memory_bytes=memory_total)
