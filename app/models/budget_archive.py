"""BudgetArchive model — year-end snapshot of a ledger slot."""

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.sql import func

from app.database import Base, generate_uuid


class BudgetArchive(Base):
    """Frozen figures for one (project, category) at fiscal year-end.

    ``carried_forward + returned_amount == allocated_amount - utilized_amount``
    holds exactly for every row.

    Attributes:
        carried_forward: Share of the unspent balance kept for next year.
        returned_amount: Share of the unspent balance returned to the
            institution.
        carry_forward_percent: Percentage used to split the balance.
    """

    __tablename__ = "budget_archive"
    __table_args__ = (
        UniqueConstraint("project_id", "category", "fiscal_year", name="uq_budget_archive_slot"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    project_id = Column(String(36), ForeignKey("project.id"), nullable=False)
    category = Column(String(20), nullable=False)
    fiscal_year = Column(String(7), nullable=False, index=True)
    allocated_amount = Column(Numeric(15, 2), nullable=False)
    utilized_amount = Column(Numeric(15, 2), nullable=False)
    carried_forward = Column(Numeric(15, 2), nullable=False)
    returned_amount = Column(Numeric(15, 2), nullable=False)
    carry_forward_percent = Column(Numeric(5, 2), nullable=False)
    archived_by_id = Column(String(36), ForeignKey("app_user.id"), nullable=True)
    archived_at = Column(DateTime, default=func.now(), nullable=False)
