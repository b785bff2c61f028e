"""Helm release models."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class HelmRelease(BaseModel):
    """Release row from ``helm list``."""

    id: UUID
    name: str
    namespace: str
    revision: int = 0
    status: str = "unknown"
    chart: str = ""
    app_version: str | None = None
    updated: datetime | None = None
