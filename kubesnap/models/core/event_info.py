"""Event models."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from kubesnap.constants.enums import EventType


class EventSummary(BaseModel):
    """Namespace event."""

    id: UUID
    message: str
    type: EventType = EventType.NORMAL
    reason: str | None = None
    object_kind: str | None = None
    object_name: str | None = None
    count: int = 1
    timestamp: datetime | None = None
