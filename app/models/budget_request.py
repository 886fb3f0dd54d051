"""BudgetRequest model — member-submitted request awaiting a one-time decision."""

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base, generate_uuid


class BudgetRequest(Base):
    """Request for additional allocation on a project budget head.

    Lifecycle: created ``PENDING``; moves exactly once to ``APPROVED``,
    ``REJECTED`` or ``PARTIALLY_APPROVED``.

    Attributes:
        approved_amount: Set only for APPROVED (= amount) and
            PARTIALLY_APPROVED (caller supplied, ≤ amount).
        fiscal_year: Fiscal year whose ledger slot was credited on approval.
    """

    __tablename__ = "budget_request"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    project_id = Column(String(36), ForeignKey("project.id"), nullable=False, index=True)
    requested_by_id = Column(String(36), ForeignKey("app_user.id"), nullable=False)
    category = Column(String(20), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    justification = Column(Text, nullable=False)
    status = Column(String(20), default="PENDING", nullable=False, index=True)
    approved_by_id = Column(String(36), ForeignKey("app_user.id"), nullable=True)
    approved_amount = Column(Numeric(15, 2), nullable=True)
    approved_at = Column(DateTime, nullable=True)
    comments = Column(Text, nullable=True)
    fiscal_year = Column(String(7), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    project = relationship("Project", lazy="select")
    requested_by = relationship("User", foreign_keys=[requested_by_id], lazy="select")
    approved_by = relationship("User", foreign_keys=[approved_by_id], lazy="select")
