"""Expense model — spending posted against a ledger slot."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String
from sqlalchemy.sql import func

from app.database import Base, generate_uuid


class Expense(Base):
    """A single expense; posting it increments the slot's ``utilized_amount``."""

    __tablename__ = "expense"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    project_id = Column(String(36), ForeignKey("project.id"), nullable=False, index=True)
    category = Column(String(20), nullable=False)
    fiscal_year = Column(String(7), nullable=False)
    description = Column(String(500), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    vendor = Column(String(200), nullable=True)
    invoice_number = Column(String(100), nullable=True)
    invoice_date = Column(Date, nullable=True)
    recorded_by_id = Column(String(36), ForeignKey("app_user.id"), nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)
