"""RBAC models."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class ServiceAccountSummary(BaseModel):
    id: UUID
    name: str
    secret_count: int = 0
    created_at: datetime | None = None


class RoleSummary(BaseModel):
    id: UUID
    name: str
    rule_count: int = 0
    created_at: datetime | None = None


class RoleBindingSummary(BaseModel):
    id: UUID
    name: str
    subject_count: int = 0
    role_ref: str = ""
    created_at: datetime | None = None
