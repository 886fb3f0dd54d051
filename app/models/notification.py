"""Notification model — in-app message for a single user."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.sql import func

from app.database import Base, generate_uuid


class Notification(Base):
    """In-app notification.

    Attributes:
        type: One of ``constants.NotificationType``.
        link: Frontend route the notification points to, e.g.
            ``"/finance/requests/<id>"``.
        email_sent: Whether an email copy was dispatched.
    """

    __tablename__ = "notification"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("app_user.id"), nullable=False, index=True)
    type = Column(String(30), nullable=False)
    title = Column(String(300), nullable=False)
    message = Column(Text, nullable=False)
    link = Column(String(300), nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    email_sent = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)
