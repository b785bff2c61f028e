"""Config parser - ConfigMaps, Secrets, ResourceQuotas and LimitRanges."""

from __future__ import annotations

from typing import Any

from kubesnap.constants.enums import ConfigResourceKind
from kubesnap.controllers.cluster.parsers.common import (
    as_list,
    created_at,
    format_key_value_summary,
    metadata_of,
    resource_id,
    section,
    string_map,
)
from kubesnap.models.core.config_info import (
    ConfigResourcePermissions,
    ConfigResourceSummary,
    SecretDataEntry,
)

_SUMMARY_SEPARATOR = " · "


class ConfigParser:
    """Parses namespaced configuration resources."""

    def __init__(self, context: str, namespace: str) -> None:
        self.context = context
        self.namespace = namespace

    def _base(self, item: dict[str, Any], kind: ConfigResourceKind) -> dict[str, Any]:
        return {
            "id": resource_id(item, self.context, self.namespace, kind.value),
            "name": str(metadata_of(item).get("name", "")),
            "kind": kind,
            "created_at": created_at(item),
        }

    def parse_config_map(self, item: dict[str, Any]) -> ConfigResourceSummary:
        binary_count = len(string_map(item.get("binaryData")))
        total = len(string_map(item.get("data"))) + binary_count
        parts: list[str] = []
        if item.get("immutable") is True:
            parts.append("Immutable")
        if binary_count:
            parts.append(f"Binary: {binary_count}")
        return ConfigResourceSummary(
            **self._base(item, ConfigResourceKind.CONFIG_MAP),
            type_description="ConfigMap",
            data_count=total or None,
            summary=_SUMMARY_SEPARATOR.join(parts) or None,
        )

    def parse_secret(
        self,
        item: dict[str, Any],
        permissions: ConfigResourcePermissions,
    ) -> ConfigResourceSummary:
        raw_data = item.get("data")
        data = string_map(raw_data)
        entries = (
            [SecretDataEntry(key=key, encoded_value=data[key]) for key in sorted(data)]
            if isinstance(raw_data, dict)
            else None
        )
        return ConfigResourceSummary(
            **self._base(item, ConfigResourceKind.SECRET),
            type_description=str(item.get("type") or "Opaque"),
            data_count=len(data) or None,
            summary="Immutable" if item.get("immutable") is True else None,
            secret_entries=entries,
            permissions=permissions,
        )

    def parse_resource_quota(self, item: dict[str, Any]) -> ConfigResourceSummary:
        hard = string_map(section(item, "status").get("hard"))
        return ConfigResourceSummary(
            **self._base(item, ConfigResourceKind.RESOURCE_QUOTA),
            type_description="ResourceQuota",
            data_count=len(hard) or None,
            summary=format_key_value_summary(hard),
        )

    def parse_limit_range(self, item: dict[str, Any]) -> ConfigResourceSummary:
        limits = [
            entry
            for entry in as_list(section(item, "spec").get("limits"))
            if isinstance(entry, dict)
        ]
        types = ", ".join(str(entry["type"]) for entry in limits if entry.get("type"))
        details: str | None = None
        if limits:
            first = limits[0]
            defaults = string_map(first.get("default"))
            if defaults:
                prefix = f"{first['type']}: " if first.get("type") else ""
                details = prefix + ", ".join(f"{k}={v}" for k, v in defaults.items())
        return ConfigResourceSummary(
            **self._base(item, ConfigResourceKind.LIMIT_RANGE),
            type_description=types or "LimitRange",
            data_count=len(limits) or None,
            summary=details,
        )
