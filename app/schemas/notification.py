"""
Pydantic v2 schemas for the in-app notification inbox.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NotificationResponse(BaseModel):
    id: str
    type: str
    title: str
    message: str
    link: str | None = None
    is_read: bool
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UnreadCountResponse(BaseModel):
    unread: int = Field(..., ge=0, description="Number of unread notifications.")
