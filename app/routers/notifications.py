"""
Notification inbox router.

Mounts under ``/api/notifications`` (prefix set in ``main.py``).  Every
endpoint acts on the caller's own notifications only.

Endpoints
---------
GET /              — Latest notifications (optionally unread only).
GET /unread-count  — Number of unread notifications.
PUT /{id}/read     — Mark one notification read.
PUT /read-all      — Mark all notifications read.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.notification import NotificationResponse, UnreadCountResponse
from app.services import notification_service
from app.services.auth_service import get_current_user

router = APIRouter(tags=["Notifications"])


@router.get("", response_model=list[NotificationResponse], summary="List notifications")
def list_notifications(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    unread_only: Annotated[bool, Query(description="Only unread notifications.")] = False,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
) -> list[NotificationResponse]:
    rows = notification_service.list_notifications(db, current_user, unread_only, limit)
    return [NotificationResponse.model_validate(n) for n in rows]


@router.get("/unread-count", response_model=UnreadCountResponse, summary="Unread count")
def unread_count(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> UnreadCountResponse:
    return UnreadCountResponse(unread=notification_service.unread_count(db, current_user))


@router.put("/read-all", response_model=MessageResponse, summary="Mark all read")
def mark_all_read(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> MessageResponse:
    updated = notification_service.mark_all_read(db, current_user)
    return MessageResponse(message="All notifications marked as read", affected=updated)


@router.put(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    summary="Mark one read",
    responses={404: {"description": "Notification not found."}},
)
def mark_read(
    notification_id: str,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> NotificationResponse:
    notification = notification_service.mark_read(db, current_user, notification_id)
    return NotificationResponse.model_validate(notification)
