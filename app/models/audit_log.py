"""AuditLog model — trace of every ledger mutation."""

from sqlalchemy import JSON, Column, DateTime, String
from sqlalchemy.sql import func

from app.database import Base, generate_uuid


class AuditLog(Base):
    """One row per mutating operation, written in the same transaction.

    Attributes:
        user_id: Acting user (kept as plain id so the log survives user removal).
        action: ``ALLOCATE``, ``CREATE``, ``APPROVE``, ``TRANSFER`` or ``ARCHIVE``.
        entity_type: Affected entity, e.g. ``"BudgetEntry"``.
        entity_id: Affected row id, or the fiscal year for archival.
        old_value: JSON snapshot before the change, when meaningful.
        new_value: JSON snapshot after the change.
    """

    __tablename__ = "audit_log"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), nullable=True, index=True)
    action = Column(String(30), nullable=False)
    entity_type = Column(String(50), nullable=False)
    entity_id = Column(String(50), nullable=True)
    old_value = Column(JSON, nullable=True)
    new_value = Column(JSON, nullable=True)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(300), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
