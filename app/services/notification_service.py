"""
In-app notifications and their optional email copies.

Ledger operations call the ``notify_*`` helpers only after their own commit.
Those helpers are best-effort: a failure to persist a notification is rolled
back and logged and never propagates to the operation that triggered it.
Email copies are queued on FastAPI ``BackgroundTasks`` and run after the
response is sent.

Endpoints served (via ``app/routers/notifications.py``):
    list, unread count, mark one read, mark all read.
"""

from __future__ import annotations

import logging

from fastapi import BackgroundTasks, HTTPException, status
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.budget_request import BudgetRequest
from app.models.notification import Notification
from app.models.project import Project
from app.models.user import User
from app.services.email_service import email_service, format_amount
from app.utils.constants import NotificationType, RequestStatus, Role

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


def create_notification(
    db: Session,
    user_id: str,
    type_: NotificationType,
    title: str,
    message: str,
    link: str | None = None,
    email_sent: bool = False,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        type=type_.value,
        title=title,
        message=message,
        link=link,
        email_sent=email_sent,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    logger.debug("create_notification: %s for user=%s", type_.value, user_id)
    return notification


def _notify(db: Session, **kwargs) -> Notification | None:
    try:
        return create_notification(db, **kwargs)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Failed to create %s notification for user=%s",
            kwargs.get("type_"),
            kwargs.get("user_id"),
        )
        return None


def notify_supervisors_of_request(
    db: Session, request: BudgetRequest, project: Project, requester: User
) -> int:
    """Tell every active supervisor that a request awaits a decision.

    Returns:
        Number of notifications created.
    """
    try:
        supervisor_ids = [
            row.id
            for row in db.query(User.id)
            .filter(User.role == Role.SUPERVISOR.value, User.is_active.is_(True))
            .all()
        ]
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Could not load supervisors for request %s", request.id)
        return 0

    created = 0
    for supervisor_id in supervisor_ids:
        notification = _notify(
            db,
            user_id=supervisor_id,
            type_=NotificationType.BUDGET_REQUEST,
            title=f"New Budget Request: {project.code}",
            message=(
                f"{requester.full_name} requested {format_amount(request.amount)} "
                f"for {request.category} on {project.code}."
            ),
            link=f"/finance/requests/{request.id}",
        )
        if notification is not None:
            created += 1
    logger.info("notify_supervisors_of_request: request=%s notified=%d", request.id, created)
    return created


def notify_request_decision(
    db: Session,
    request: BudgetRequest,
    project: Project,
    background_tasks: BackgroundTasks | None = None,
) -> Notification | None:
    """Notify the requester of a decision and queue the summary email."""
    decision = RequestStatus(request.status).value
    verb = decision.lower().replace("_", " ")
    message = f"Your budget request for {project.code} has been {verb}."
    if request.comments:
        message += f" Comments: {request.comments}"

    requester: User | None = db.get(User, request.requested_by_id)
    email_queued = False
    if background_tasks is not None and requester is not None and email_service.is_configured:
        html = email_service.render_request_decision(
            first_name=requester.first_name,
            project_code=project.code,
            category=request.category,
            requested=request.amount,
            status=decision,
            approved_amount=request.approved_amount,
            comments=request.comments,
        )
        background_tasks.add_task(
            email_service.send_email,
            requester.email,
            f"Budget Request {decision}: {project.code}",
            html,
        )
        email_queued = True

    return _notify(
        db,
        user_id=request.requested_by_id,
        type_=NotificationType.BUDGET_REQUEST,
        title=f"Budget Request {decision}",
        message=message,
        link=f"/projects/{request.project_id}",
        email_sent=email_queued,
    )


def notify_budget_warning(
    db: Session,
    project: Project,
    category: str,
    utilization_percent: int,
    background_tasks: BackgroundTasks | None = None,
) -> Notification | None:
    """Warn the project head that a budget head is nearly (or over) spent."""
    if project.project_head_id is None:
        return None

    title = f"Budget Alert: {utilization_percent}% utilized"
    message = (
        f'Project "{project.title}" has utilized {utilization_percent}% '
        f"of its {category} allocation."
    )
    link = f"/projects/{project.id}"

    head: User | None = db.get(User, project.project_head_id)
    email_queued = False
    if background_tasks is not None and head is not None and email_service.is_configured:
        background_tasks.add_task(
            email_service.send_email,
            head.email,
            title,
            email_service.render_notification(title, message, head.first_name, link),
        )
        email_queued = True

    return _notify(
        db,
        user_id=project.project_head_id,
        type_=NotificationType.BUDGET_WARNING,
        title=title,
        message=message,
        link=link,
        email_sent=email_queued,
    )


# ---------------------------------------------------------------------------
# Inbox
# ---------------------------------------------------------------------------


def list_notifications(
    db: Session, user: User, unread_only: bool = False, limit: int = 50
) -> list[Notification]:
    query = db.query(Notification).filter(Notification.user_id == user.id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    return query.order_by(Notification.created_at.desc()).limit(limit).all()


def unread_count(db: Session, user: User) -> int:
    return (
        db.query(Notification)
        .filter(Notification.user_id == user.id, Notification.is_read.is_(False))
        .count()
    )


def mark_read(db: Session, user: User, notification_id: str) -> Notification:
    """Mark one of the caller's notifications as read.

    Raises:
        HTTPException 404: If the notification does not exist or belongs to
            another user.
    """
    notification: Notification | None = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user.id)
        .first()
    )
    if notification is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Notification with id={notification_id} not found.",
        )
    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification


def mark_all_read(db: Session, user: User) -> int:
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == user.id, Notification.is_read.is_(False))
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    logger.debug("mark_all_read: user=%s updated=%d", user.id, result.rowcount)
    return result.rowcount
