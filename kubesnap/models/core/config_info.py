"""Configuration resource models (ConfigMaps, Secrets, quotas, limit ranges)."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from kubesnap.constants.enums import ConfigResourceKind


class ConfigResourcePermissions(BaseModel):
    """What the current identity may do with a resource."""

    model_config = ConfigDict(frozen=True)

    can_reveal: bool = True
    can_edit: bool = True

    @classmethod
    def full_access(cls) -> ConfigResourcePermissions:
        return cls(can_reveal=True, can_edit=True)

    @classmethod
    def no_access(cls) -> ConfigResourcePermissions:
        return cls(can_reveal=False, can_edit=False)


class SecretDataEntry(BaseModel):
    key: str
    encoded_value: str


class ConfigResourceSummary(BaseModel):
    """One configuration resource."""

    id: UUID
    name: str
    kind: ConfigResourceKind
    type_description: str | None = None
    data_count: int | None = None
    summary: str | None = None
    created_at: datetime | None = None
    secret_entries: list[SecretDataEntry] | None = None
    permissions: ConfigResourcePermissions = ConfigResourcePermissions()
