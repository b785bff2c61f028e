"""Helpers shared by the cluster parsers."""

from __future__ import annotations

from contextlib import suppress
from datetime import datetime
from typing import Any
from uuid import UUID

from kubesnap.utils.stable_identifier import stable_uuid


def parse_iso_timestamp(timestamp: Any) -> datetime | None:
    """Parse kubernetes timestamp strings into aware datetimes."""
    if not isinstance(timestamp, str) or not timestamp:
        return None
    with suppress(ValueError, TypeError):
        return datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    return None


def metadata_of(item: dict[str, Any]) -> dict[str, Any]:
    metadata = item.get("metadata")
    return metadata if isinstance(metadata, dict) else {}


def section(item: dict[str, Any], key: str) -> dict[str, Any]:
    """``item[key]`` when it is a mapping, else an empty dict."""
    value = item.get(key)
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    with suppress(ValueError, TypeError):
        return int(value)
    return default


def optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    with suppress(ValueError, TypeError):
        return int(value)
    return None


def string_map(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(key): str(val) for key, val in value.items()}


def created_at(item: dict[str, Any]) -> datetime | None:
    return parse_iso_timestamp(metadata_of(item).get("creationTimestamp"))


def resource_id(
    item: dict[str, Any],
    context: str,
    namespace: str | None,
    kind: str,
) -> UUID:
    metadata = metadata_of(item)
    return stable_uuid(
        metadata.get("uid"),
        context,
        namespace,
        kind,
        str(metadata.get("name", "")),
    )


def owner_description(metadata: dict[str, Any]) -> str | None:
    """``Kind/Name`` of the first owner reference."""
    owners = as_list(metadata.get("ownerReferences"))
    if not owners or not isinstance(owners[0], dict):
        return None
    kind = owners[0].get("kind") or None
    name = owners[0].get("name") or None
    if kind and name:
        return f"{kind}/{name}"
    return kind or name


def format_key_value_summary(values: dict[str, str], limit: int = 3) -> str | None:
    """First ``limit`` sorted ``key=value`` pairs plus a "+N more" tail."""
    if not values:
        return None
    ordered = sorted(values.items())
    parts = [f"{key}={value}" for key, value in ordered[:limit]]
    if len(ordered) > limit:
        parts.append(f"+{len(ordered) - limit} more")
    return ", ".join(parts)
