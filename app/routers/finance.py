"""
Finance router: expense posting and the per-project budget view.

Mounts under ``/api/finance`` (prefix set in ``main.py``).

Endpoints
---------
GET  /projects/{project_id}/budget    — Entries, expenses and totals.
POST /projects/{project_id}/expenses  — Post an expense against a slot.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.expense import ExpenseCreate, ExpensePostingResult, ProjectBudgetResponse
from app.services import expense_service
from app.services.audit_service import RequestMeta, request_meta
from app.services.auth_service import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Finance"])


@router.get(
    "/projects/{project_id}/budget",
    response_model=ProjectBudgetResponse,
    summary="Project budget",
    responses={
        403: {"description": "Caller may not read this project's budget."},
        404: {"description": "Project not found."},
    },
)
def get_project_budget(
    project_id: str,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ProjectBudgetResponse:
    return expense_service.get_project_budget(db, project_id, current_user)


@router.post(
    "/projects/{project_id}/expenses",
    response_model=ExpensePostingResult,
    status_code=status.HTTP_201_CREATED,
    summary="Post an expense",
    description=(
        "Records an expense and adds it to the utilization of the matching "
        "(project, category, fiscal year) entry. The response flags "
        "``over_budget`` when utilization exceeds allocation."
    ),
    responses={
        201: {"description": "Expense recorded."},
        400: {"description": "Validation failed, or overrun while overruns are disabled."},
        403: {"description": "Caller may not post expenses on this project."},
        404: {"description": "Project or budget entry not found."},
    },
)
def post_expense(
    project_id: str,
    payload: ExpenseCreate,
    background_tasks: BackgroundTasks,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    meta: Annotated[RequestMeta, Depends(request_meta)],
) -> ExpensePostingResult:
    return expense_service.post_expense(
        db, project_id, payload, current_user, meta, background_tasks
    )
