"""BudgetTransfer model — immutable audit record of a reallocation."""

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.sql import func

from app.database import Base, generate_uuid


class BudgetTransfer(Base):
    """One amount moved between two (project, category) slots.

    Either side may be partial: a missing ``from`` pair records an injection,
    a missing ``to`` pair a withdrawal.  Rows are never updated.
    """

    __tablename__ = "budget_transfer"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    fiscal_year = Column(String(7), nullable=False, index=True)
    from_project_id = Column(String(36), ForeignKey("project.id"), nullable=True)
    to_project_id = Column(String(36), ForeignKey("project.id"), nullable=True)
    from_category = Column(String(20), nullable=True)
    to_category = Column(String(20), nullable=True)
    amount = Column(Numeric(15, 2), nullable=False)
    reason = Column(Text, nullable=False)
    transferred_by_id = Column(String(36), ForeignKey("app_user.id"), nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)
