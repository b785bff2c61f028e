"""Tests for resource parser utilities."""

from __future__ import annotations

import pytest

from kubesnap.utils.resource_parser import (
    ResourceUsage,
    aggregate_container_resources,
    capacity_ratio,
    memory_str_to_bytes,
    parse_cpu,
    parse_usage,
    sum_container_usage,
    usage_ratio,
)


class TestParseCpu:
    """Tests for parse_cpu function."""

    def test_parse_cpu_millicores(self) -> None:
        """Test parsing CPU in millicores."""
        assert parse_cpu("100m") == 0.1
        assert parse_cpu("500m") == 0.5
        assert parse_cpu("1000m") == 1.0

    def test_parse_cpu_micro_and_nano_cores(self) -> None:
        """Test parsing CPU in microcore/nanocore units."""
        assert parse_cpu("500000u") == 0.5
        assert parse_cpu("500000000n") == 0.5

    def test_parse_cpu_suffix_is_case_insensitive(self) -> None:
        """Uppercase suffixes parse the same as lowercase ones."""
        assert parse_cpu("250M") == 0.25
        assert parse_cpu("1000000N") == pytest.approx(0.001)

    def test_parse_cpu_decimal(self) -> None:
        """Test parsing CPU in decimal."""
        assert parse_cpu("1.5") == 1.5
        assert parse_cpu("2") == 2.0
        assert parse_cpu(4) == 4.0

    def test_parse_cpu_empty_is_unknown(self) -> None:
        """Empty input is unknown, not zero."""
        assert parse_cpu("") is None
        assert parse_cpu(None) is None

    def test_parse_cpu_invalid(self) -> None:
        """Unparsable strings yield None instead of raising."""
        assert parse_cpu("invalid") is None
        assert parse_cpu("m") is None
        assert parse_cpu("nan") is None

    def test_parse_cpu_with_whitespace(self) -> None:
        """Test parsing CPU string with whitespace."""
        assert parse_cpu(" 100m ") == 0.1


class TestMemoryStrToBytes:
    """Tests for memory_str_to_bytes function."""

    def test_binary_suffixes(self) -> None:
        """Binary suffixes are powers of 1024."""
        assert memory_str_to_bytes("512Mi") == 512 * 1024**2
        assert memory_str_to_bytes("2Gi") == 2 * 1024**3
        assert memory_str_to_bytes("1024Ki") == 1024**2
        assert memory_str_to_bytes("1Ti") == 1024**4

    def test_decimal_suffixes(self) -> None:
        """Decimal suffixes are powers of 1000."""
        assert memory_str_to_bytes("1G") == 1000**3
        assert memory_str_to_bytes("5M") == 5 * 1000**2
        assert memory_str_to_bytes("3k") == 3000

    def test_binary_suffix_wins_over_decimal(self) -> None:
        """"Mi" is matched before "M"."""
        assert memory_str_to_bytes("1Mi") == 1024**2
        assert memory_str_to_bytes("1mi") == 1024**2

    def test_plain_bytes(self) -> None:
        """Unsuffixed strings are a byte count."""
        assert memory_str_to_bytes("2048") == 2048.0
        assert memory_str_to_bytes("1.5") == 1.5

    def test_invalid_is_unknown(self) -> None:
        """Empty or garbage strings are unknown."""
        assert memory_str_to_bytes("") is None
        assert memory_str_to_bytes(None) is None
        assert memory_str_to_bytes("lots") is None
        assert memory_str_to_bytes("Gi") is None


class TestUsageRatio:
    """Tests for usage_ratio and capacity_ratio."""

    def test_limit_preferred_over_request(self) -> None:
        """The limit is the denominator when it is positive."""
        assert usage_ratio(0.5, request=0.25, limit=1.0) == 0.5

    def test_request_fallback(self) -> None:
        """The request is used when there is no positive limit."""
        assert usage_ratio(0.5, request=2.0, limit=0.0) == 0.25
        assert usage_ratio(0.5, request=2.0) == 0.25

    def test_clamped_to_unit_interval(self) -> None:
        """Ratios never exceed one or drop below zero."""
        assert usage_ratio(3.0, limit=1.0) == 1.0
        assert usage_ratio(-1.0, limit=1.0) == 0.0

    def test_undefined_without_denominator(self) -> None:
        """No positive request or limit means no ratio."""
        assert usage_ratio(0.5) is None
        assert usage_ratio(0.5, request=0.0, limit=0.0) is None
        assert usage_ratio(None, request=1.0, limit=1.0) is None

    def test_capacity_ratio(self) -> None:
        """Capacity ratios use the same clamping rule."""
        assert capacity_ratio(2.0, 4.0) == 0.5
        assert capacity_ratio(2.0, None) is None


class TestAggregateContainerResources:
    """Tests for aggregate_container_resources."""

    def test_sums_across_containers(self) -> None:
        """Requests and limits are summed per resource."""
        containers = [
            {"resources": {"requests": {"cpu": "100m", "memory": "64Mi"}, "limits": {"cpu": "1"}}},
            {"resources": {"requests": {"cpu": "150m"}, "limits": {"memory": "1Gi"}}},
        ]
        totals = aggregate_container_resources(containers)
        assert totals.cpu_request == pytest.approx(0.25)
        assert totals.cpu_limit == 1.0
        assert totals.memory_request == 64 * 1024**2
        assert totals.memory_limit == 1024**3

    def test_undeclared_resources_are_absent(self) -> None:
        """A resource nobody declares stays None rather than zero."""
        totals = aggregate_container_resources([{"name": "app"}])
        assert totals.cpu_request is None
        assert totals.storage_limit is None

    def test_ephemeral_storage(self) -> None:
        """ephemeral-storage maps to the storage fields."""
        totals = aggregate_container_resources(
            [{"resources": {"requests": {"ephemeral-storage": "1G"}}}]
        )
        assert totals.storage_request == 1000**3


class TestUsageParsing:
    """Tests for metrics-API usage helpers."""

    def test_parse_usage(self) -> None:
        """A usage mapping parses to cores and bytes."""
        usage = parse_usage({"cpu": "250m", "memory": "128Mi"})
        assert usage == ResourceUsage(cpu_cores=0.25, memory_bytes=128 * 1024**2)

    def test_parse_usage_not_a_mapping(self) -> None:
        """Missing usage is fully unknown."""
        assert parse_usage(None) == ResourceUsage()

    def test_sum_container_usage(self) -> None:
        """Per-container usage is summed; unreported fields stay None."""
        usage = sum_container_usage(
            [{"usage": {"cpu": "100m"}}, {"usage": {"cpu": "200m"}}]
        )
        assert usage.cpu_cores == pytest.approx(0.3)
        assert usage.memory_bytes is None
