"""BudgetEntry model — live allocation/utilization figures per ledger slot."""

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base, generate_uuid


class BudgetEntry(Base):
    """Allocation and utilization for one (project, category, fiscal year) slot.

    The natural key is enforced by ``uq_budget_entry_slot`` so that the ledger
    can credit a slot with a single ``INSERT ... ON CONFLICT DO UPDATE``.

    Attributes:
        id: Opaque UUID primary key.
        project_id: FK to Project.
        category: Budget head, one of ``constants.BudgetCategory``.
        fiscal_year: ``YYYY-YY`` label.
        allocated_amount: Amount assigned to the slot (base currency).
        utilized_amount: Amount already spent against the slot.
    """

    __tablename__ = "budget_entry"
    __table_args__ = (
        UniqueConstraint("project_id", "category", "fiscal_year", name="uq_budget_entry_slot"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    project_id = Column(String(36), ForeignKey("project.id"), nullable=False, index=True)
    category = Column(String(20), nullable=False)
    fiscal_year = Column(String(7), nullable=False, index=True)
    allocated_amount = Column(Numeric(15, 2), default=0, nullable=False)
    utilized_amount = Column(Numeric(15, 2), default=0, nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    project = relationship("Project", back_populates="budget_entries", lazy="select")
