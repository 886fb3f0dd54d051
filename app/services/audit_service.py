"""
Audit trail for ledger mutations.

``record`` adds an ``AuditLog`` row to the caller's session without
committing, so the audit entry and the mutation it describes land in the same
transaction: either both are persisted or neither is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from app.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestMeta:
    """Client information captured alongside an audit entry."""

    ip_address: str | None = None
    user_agent: str | None = None


def request_meta(request: Request) -> RequestMeta:
    """FastAPI dependency extracting the client address and user agent."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    else:
        ip = request.client.host if request.client else None
    agent = request.headers.get("user-agent")
    return RequestMeta(ip_address=ip, user_agent=agent[:300] if agent else None)


def record(
    db: Session,
    user_id: str | None,
    action: str,
    entity_type: str,
    entity_id: str | None = None,
    old_value: dict[str, Any] | None = None,
    new_value: dict[str, Any] | None = None,
    meta: RequestMeta | None = None,
) -> AuditLog:
    """Stage an audit entry in *db*; the caller commits."""
    meta = meta or RequestMeta()
    entry = AuditLog(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        old_value=jsonable_encoder(old_value) if old_value is not None else None,
        new_value=jsonable_encoder(new_value) if new_value is not None else None,
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    db.add(entry)
    logger.debug("audit: %s %s id=%s by user=%s", action, entity_type, entity_id, user_id)
    return entry
