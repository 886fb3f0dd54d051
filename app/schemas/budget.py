"""
Pydantic v2 schemas for the budget ledger module.

Request models carry amounts as ``Decimal`` so that validation and ledger
arithmetic never pass through binary floating point; response models expose
amounts as ``float`` for the JSON consumer.  The schema layer stays free of
SQLAlchemy imports.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.utils.constants import (
    FISCAL_YEAR_PATTERN,
    MIN_JUSTIFICATION_LENGTH,
    MIN_TRANSFER_REASON_LENGTH,
    BudgetCategory,
    RequestStatus,
)

_AMOUNT = {"gt": 0, "max_digits": 15, "decimal_places": 2}


# ---------------------------------------------------------------------------
# Allocation
# ---------------------------------------------------------------------------


class BudgetAllocationCreate(BaseModel):
    """Payload for ``POST /api/budget/allocate``.

    Allocation is additive: posting the same payload twice adds the amount
    twice.
    """

    project_id: str = Field(..., min_length=1, description="Target project id.")
    category: BudgetCategory = Field(..., description="Budget head.")
    fiscal_year: str = Field(..., pattern=FISCAL_YEAR_PATTERN, description="Fiscal year, e.g. 2024-25.")
    amount: Decimal = Field(..., **_AMOUNT, description="Amount to add to the allocation.")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "project_id": "5b0d6f0e-3c52-4d1e-9a0c-6a4f3b7e2d11",
                "category": "EQUIPMENT",
                "fiscal_year": "2024-25",
                "amount": 500000,
            }
        }
    )


class BudgetEntryResponse(BaseModel):
    """Live ledger slot for one (project, category, fiscal year)."""

    id: str
    project_id: str
    category: str
    fiscal_year: str
    allocated_amount: float
    utilized_amount: float
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Requests and approval
# ---------------------------------------------------------------------------


class BudgetRequestCreate(BaseModel):
    """Payload for ``POST /api/budget/projects/{project_id}/requests``."""

    category: BudgetCategory
    amount: Decimal = Field(..., **_AMOUNT)
    justification: str = Field(..., min_length=MIN_JUSTIFICATION_LENGTH, max_length=5000)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "category": "TRAVEL",
                "amount": 50000,
                "justification": "Conference travel needed",
            }
        }
    )


class BudgetApprovalAction(BaseModel):
    """Decision on a pending request.

    Attributes:
        action: Terminal status to move the request to.
        approved_amount: Required for ``PARTIALLY_APPROVED``; ignored for
            ``APPROVED`` (the requested amount is used) and ``REJECTED``.
        comments: Free-text remark shown to the requester.
    """

    action: RequestStatus
    approved_amount: Decimal | None = Field(default=None, **_AMOUNT)
    comments: str | None = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def _check_action(self) -> "BudgetApprovalAction":
        if self.action == RequestStatus.PENDING:
            raise ValueError("action must be APPROVED, REJECTED or PARTIALLY_APPROVED")
        if self.action == RequestStatus.PARTIALLY_APPROVED and self.approved_amount is None:
            raise ValueError("approved_amount is required for PARTIALLY_APPROVED")
        return self

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "action": "PARTIALLY_APPROVED",
                "approved_amount": 30000,
                "comments": "Economy fares only",
            }
        }
    )


class BudgetRequestResponse(BaseModel):
    id: str
    project_id: str
    requested_by_id: str
    category: str
    amount: float
    justification: str
    status: str
    approved_by_id: str | None = None
    approved_amount: float | None = None
    approved_at: datetime | None = None
    comments: str | None = None
    fiscal_year: str | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Transfers
# ---------------------------------------------------------------------------


class BudgetTransferCreate(BaseModel):
    """Payload for ``POST /api/budget/transfer``.

    Each side needs at least one of its project/category fields.  The ledger
    only moves money for a side whose project *and* category are both given,
    so a half-specified source records an injection and a half-specified
    destination records a withdrawal.
    """

    from_project_id: str | None = None
    to_project_id: str | None = None
    from_category: BudgetCategory | None = None
    to_category: BudgetCategory | None = None
    amount: Decimal = Field(..., **_AMOUNT)
    reason: str = Field(..., min_length=MIN_TRANSFER_REASON_LENGTH, max_length=2000)
    fiscal_year: str | None = Field(
        default=None,
        pattern=FISCAL_YEAR_PATTERN,
        description="Defaults to the current fiscal year.",
    )

    @model_validator(mode="after")
    def _check_sides(self) -> "BudgetTransferCreate":
        if self.from_project_id is None and self.from_category is None:
            raise ValueError("from_project_id or from_category is required")
        if self.to_project_id is None and self.to_category is None:
            raise ValueError("to_project_id or to_category is required")
        return self

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "from_project_id": "5b0d6f0e-3c52-4d1e-9a0c-6a4f3b7e2d11",
                "from_category": "EQUIPMENT",
                "to_project_id": "0e1f2d3c-8b7a-4c5d-9e6f-a1b2c3d4e5f6",
                "to_category": "EQUIPMENT",
                "amount": 100000,
                "reason": "Reallocation",
            }
        }
    )


class BudgetTransferResponse(BaseModel):
    id: str
    fiscal_year: str
    from_project_id: str | None = None
    to_project_id: str | None = None
    from_category: str | None = None
    to_category: str | None = None
    amount: float
    reason: str
    transferred_by_id: str
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Year-end archival
# ---------------------------------------------------------------------------


class YearEndArchiveCreate(BaseModel):
    """Payload for ``POST /api/budget/archive``.

    Attributes:
        carry_forward_percent: Share (0–100) of each unspent balance kept
            for next year; the rest is recorded as returned.
        roll_forward: Also credit each positive carried-forward amount to
            the same (project, category) in the next fiscal year.
    """

    fiscal_year: str = Field(..., pattern=FISCAL_YEAR_PATTERN)
    carry_forward_percent: Decimal = Field(default=Decimal("100"), ge=0, le=100, decimal_places=2)
    roll_forward: bool = False


class BudgetArchiveResponse(BaseModel):
    id: str
    project_id: str
    category: str
    fiscal_year: str
    allocated_amount: float
    utilized_amount: float
    carried_forward: float
    returned_amount: float
    carry_forward_percent: float
    archived_by_id: str | None = None
    archived_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class YearEndArchiveResult(BaseModel):
    """Outcome of a year-end archival run.

    Attributes:
        archived_count: Number of archive rows written (one per entry).
        rolled_forward_count: Number of next-year entries credited when
            ``roll_forward`` was requested.
    """

    message: str
    fiscal_year: str
    carry_forward_percent: float
    archived_count: int
    rolled_forward_count: int = 0
    total_carried_forward: float
    total_returned: float
    archives: list[BudgetArchiveResponse]


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


class CategorySummary(BaseModel):
    category: str
    total_allocated: float
    total_utilized: float
    remaining: float
    utilization_percent: int


class BudgetSummaryEntry(BudgetEntryResponse):
    """Entry row enriched with its project's code and title."""

    project_code: str | None = None
    project_title: str | None = None
    remaining_amount: float


class BudgetSummaryResponse(BaseModel):
    """Fiscal-year totals overall and per category.

    ``utilization_percent`` is ``round(100 × utilized / allocated)``, and 0
    when nothing is allocated.  It is not capped at 100.
    """

    fiscal_year: str
    currency: str
    total_allocated: float
    total_utilized: float
    remaining: float
    utilization_percent: int
    by_category: list[CategorySummary]
    entries: list[BudgetSummaryEntry]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "fiscal_year": "2024-25",
                "currency": "INR",
                "total_allocated": 800000.0,
                "total_utilized": 120000.0,
                "remaining": 680000.0,
                "utilization_percent": 15,
                "by_category": [
                    {
                        "category": "EQUIPMENT",
                        "total_allocated": 700000.0,
                        "total_utilized": 120000.0,
                        "remaining": 580000.0,
                        "utilization_percent": 17,
                    }
                ],
                "entries": [],
            }
        }
    )
