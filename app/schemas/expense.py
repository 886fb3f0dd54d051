"""
Pydantic v2 schemas for expense posting and the per-project budget view.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.budget import BudgetEntryResponse
from app.utils.constants import FISCAL_YEAR_PATTERN, BudgetCategory


class ExpenseCreate(BaseModel):
    """Payload for ``POST /api/finance/projects/{project_id}/expenses``.

    Attributes:
        fiscal_year: Slot to charge; defaults to the fiscal year of
            ``invoice_date`` or, without one, the current fiscal year.
    """

    category: BudgetCategory
    amount: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)
    description: str = Field(..., min_length=3, max_length=500)
    fiscal_year: str | None = Field(default=None, pattern=FISCAL_YEAR_PATTERN)
    vendor: str | None = Field(default=None, max_length=200)
    invoice_number: str | None = Field(default=None, max_length=100)
    invoice_date: date | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "category": "CONSUMABLES",
                "amount": 12500.50,
                "description": "Reagents for batch 7",
                "vendor": "Sigma Labs",
                "invoice_number": "INV-2291",
                "invoice_date": "2024-08-14",
            }
        }
    )


class ExpenseResponse(BaseModel):
    id: str
    project_id: str
    category: str
    fiscal_year: str
    description: str
    amount: float
    vendor: str | None = None
    invoice_number: str | None = None
    invoice_date: date | None = None
    recorded_by_id: str
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ExpensePostingResult(BaseModel):
    """Expense plus the slot it was charged to.

    Attributes:
        over_budget: ``True`` when the slot's utilization now exceeds its
            allocation (only possible while overruns are allowed).
        utilization_percent: Slot utilization after posting.
    """

    expense: ExpenseResponse
    entry: BudgetEntryResponse
    over_budget: bool
    utilization_percent: int


class ProjectBudgetSummary(BaseModel):
    total_allocated: float
    total_utilized: float
    remaining: float
    utilization_percent: int


class ProjectBudgetResponse(BaseModel):
    """Budget view of a single project across all fiscal years."""

    project_id: str
    project_code: str
    project_title: str
    entries: list[BudgetEntryResponse]
    expenses: list[ExpenseResponse]
    summary: ProjectBudgetSummary
