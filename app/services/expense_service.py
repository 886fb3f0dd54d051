"""
Finance service layer: expense posting and the per-project budget view.

Posting an expense charges the matching ledger slot's ``utilized_amount``
in one UPDATE (see ``budget_service.record_utilization``).  Whether
utilization may exceed allocation is governed by ``ALLOW_BUDGET_OVERRUN``:
when allowed, the posting succeeds and is flagged ``over_budget``.
"""

from __future__ import annotations

import logging

from fastapi import BackgroundTasks
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.budget_entry import BudgetEntry
from app.models.expense import Expense
from app.models.user import User
from app.schemas.budget import BudgetEntryResponse
from app.schemas.expense import (
    ExpenseCreate,
    ExpensePostingResult,
    ExpenseResponse,
    ProjectBudgetResponse,
    ProjectBudgetSummary,
)
from app.services import audit_service, budget_service, notification_service
from app.services.audit_service import RequestMeta
from app.services.auth_service import authorize
from app.utils.constants import AUDIT_CREATE
from app.utils.fiscal_year import current_fiscal_year, fiscal_year_for
from app.utils.permissions import BUDGET, EXPENSE

logger = logging.getLogger(__name__)


def post_expense(
    db: Session,
    project_id: str,
    data: ExpenseCreate,
    user: User,
    meta: RequestMeta | None = None,
    background_tasks: BackgroundTasks | None = None,
) -> ExpensePostingResult:
    """Record an expense and charge it to its budget slot.

    The fiscal year is ``data.fiscal_year`` when given, otherwise the one
    containing ``invoice_date``, otherwise the current one.

    Raises:
        HTTPException 404: If the project or its budget slot does not exist.
        HTTPException 403: If the caller may not post expenses on the project.
        HTTPException 400: If overruns are disallowed and the slot is short.
    """
    settings = get_settings()
    project = authorize(db, user, EXPENSE, "create", project_id=project_id)
    category = data.category.value
    if data.fiscal_year:
        fiscal_year = data.fiscal_year
    elif data.invoice_date:
        fiscal_year = fiscal_year_for(data.invoice_date)
    else:
        fiscal_year = current_fiscal_year()

    entry = budget_service.record_utilization(
        db,
        project.id,
        category,
        fiscal_year,
        data.amount,
        allow_overrun=settings.ALLOW_BUDGET_OVERRUN,
    )

    expense = Expense(
        project_id=project.id,
        category=category,
        fiscal_year=fiscal_year,
        description=data.description,
        amount=data.amount,
        vendor=data.vendor,
        invoice_number=data.invoice_number,
        invoice_date=data.invoice_date,
        recorded_by_id=user.id,
    )
    db.add(expense)
    db.flush()

    utilized = budget_service.to_decimal(entry.utilized_amount)
    allocated = budget_service.to_decimal(entry.allocated_amount)
    audit_service.record(
        db,
        user.id,
        AUDIT_CREATE,
        "Expense",
        expense.id,
        old_value={"utilized_amount": utilized - data.amount},
        new_value={
            "budget_entry_id": entry.id,
            "amount": data.amount,
            "utilized_amount": utilized,
        },
        meta=meta,
    )
    db.commit()
    db.refresh(expense)

    pct = budget_service.utilization_percent(utilized, allocated)
    over_budget = utilized > allocated
    logger.info(
        "post_expense: %s %s/%s amount=%s utilization=%d%%%s",
        project.code, category, fiscal_year, data.amount, pct,
        " (over budget)" if over_budget else "",
    )

    if pct >= settings.BUDGET_WARNING_PERCENT:
        notification_service.notify_budget_warning(db, project, category, pct, background_tasks)

    return ExpensePostingResult(
        expense=ExpenseResponse.model_validate(expense),
        entry=BudgetEntryResponse.model_validate(entry),
        over_budget=over_budget,
        utilization_percent=pct,
    )


def get_project_budget(db: Session, project_id: str, user: User) -> ProjectBudgetResponse:
    """Entries, expenses and totals of one project across all fiscal years.

    Raises:
        HTTPException 404: If the project does not exist.
        HTTPException 403: If the caller may not read this project's budget.
    """
    project = authorize(db, user, BUDGET, "read", project_id=project_id)

    entries = (
        db.query(BudgetEntry)
        .filter(BudgetEntry.project_id == project.id)
        .order_by(BudgetEntry.fiscal_year.desc(), BudgetEntry.category.asc())
        .all()
    )
    expenses = (
        db.query(Expense)
        .filter(Expense.project_id == project.id)
        .order_by(Expense.created_at.desc())
        .all()
    )
    totals = (
        db.query(
            func.coalesce(func.sum(BudgetEntry.allocated_amount), 0),
            func.coalesce(func.sum(BudgetEntry.utilized_amount), 0),
        )
        .filter(BudgetEntry.project_id == project.id)
        .one()
    )
    allocated = budget_service.to_decimal(totals[0])
    utilized = budget_service.to_decimal(totals[1])

    return ProjectBudgetResponse(
        project_id=project.id,
        project_code=project.code,
        project_title=project.title,
        entries=[BudgetEntryResponse.model_validate(e) for e in entries],
        expenses=[ExpenseResponse.model_validate(x) for x in expenses],
        summary=ProjectBudgetSummary(
            total_allocated=float(allocated),
            total_utilized=float(utilized),
            remaining=float(allocated - utilized),
            utilization_percent=budget_service.utilization_percent(utilized, allocated),
        ),
    )
