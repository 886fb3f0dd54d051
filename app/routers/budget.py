"""
Budget ledger router.

Mounts under ``/api/budget`` (prefix set in ``main.py``).

Mutating endpoints resolve the caller with ``get_current_user`` and leave the
permission check to the service (``auth_service.authorize``), which also
checks project membership where a project is involved.  Read endpoints with
no project in scope use the ``require_permission`` dependency.

Endpoints
---------
POST /allocate                         — Add to a slot's allocation.
POST /projects/{project_id}/requests   — Submit a budget request.
GET  /projects/{project_id}/requests   — Requests of one project.
GET  /requests/pending                 — Requests awaiting a decision.
POST /requests/{request_id}/approve    — Approve / partially approve / reject.
POST /transfer                         — Move allocation between slots.
GET  /transfers                        — Transfer history.
GET  /summary[/{fiscal_year}]          — Fiscal-year totals.
POST /archive                          — Year-end archival.
GET  /archives                         — Archive records.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Path, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.budget import (
    BudgetAllocationCreate,
    BudgetApprovalAction,
    BudgetArchiveResponse,
    BudgetEntryResponse,
    BudgetRequestCreate,
    BudgetRequestResponse,
    BudgetSummaryResponse,
    BudgetTransferCreate,
    BudgetTransferResponse,
    YearEndArchiveCreate,
    YearEndArchiveResult,
)
from app.services import budget_service
from app.services.audit_service import RequestMeta, request_meta
from app.services.auth_service import get_current_user, require_permission
from app.utils.constants import FISCAL_YEAR_PATTERN
from app.utils.permissions import BUDGET

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Budget"])

_FY_DESCRIPTION = "Fiscal year as YYYY-YY, e.g. 2024-25. Defaults to the current one."


# ---------------------------------------------------------------------------
# Allocation
# ---------------------------------------------------------------------------


@router.post(
    "/allocate",
    response_model=BudgetEntryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Allocate budget",
    description=(
        "Adds ``amount`` to the allocation of (project, category, fiscal year), "
        "creating the entry if needed. Additive: repeating the call adds again."
    ),
    responses={
        201: {"description": "Entry after the allocation."},
        400: {"description": "Validation failed."},
        403: {"description": "Caller may not allocate."},
        404: {"description": "Project not found."},
    },
)
def allocate(
    payload: BudgetAllocationCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    meta: Annotated[RequestMeta, Depends(request_meta)],
) -> BudgetEntryResponse:
    entry = budget_service.allocate(db, payload, current_user, meta)
    return BudgetEntryResponse.model_validate(entry)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


@router.post(
    "/projects/{project_id}/requests",
    response_model=BudgetRequestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a budget request",
    responses={
        201: {"description": "Request created as PENDING."},
        400: {"description": "Validation failed."},
        403: {"description": "Caller is not a member of the project."},
        404: {"description": "Project not found."},
    },
)
def create_request(
    project_id: str,
    payload: BudgetRequestCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    meta: Annotated[RequestMeta, Depends(request_meta)],
) -> BudgetRequestResponse:
    request = budget_service.request_budget(db, project_id, payload, current_user, meta)
    return BudgetRequestResponse.model_validate(request)


@router.get(
    "/projects/{project_id}/requests",
    response_model=list[BudgetRequestResponse],
    summary="Budget requests of a project",
)
def list_project_requests(
    project_id: str,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> list[BudgetRequestResponse]:
    rows = budget_service.list_project_requests(db, project_id, current_user)
    return [BudgetRequestResponse.model_validate(r) for r in rows]


@router.get(
    "/requests/pending",
    response_model=list[BudgetRequestResponse],
    summary="Pending budget requests",
    description="Requests awaiting a decision, oldest first.",
)
def list_pending_requests(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission(BUDGET, "approve"))],
) -> list[BudgetRequestResponse]:
    rows = budget_service.list_pending_requests(db)
    return [BudgetRequestResponse.model_validate(r) for r in rows]


@router.post(
    "/requests/{request_id}/approve",
    response_model=BudgetRequestResponse,
    summary="Decide a budget request",
    description=(
        "Moves a PENDING request to APPROVED, PARTIALLY_APPROVED or REJECTED. "
        "Approved amounts are credited to the current fiscal year."
    ),
    responses={
        200: {"description": "Request after the decision."},
        400: {"description": "Validation failed or partial amount above requested."},
        403: {"description": "Caller may not approve."},
        404: {"description": "Request not found."},
        409: {"description": "Request already decided."},
    },
)
def approve_request(
    request_id: str,
    payload: BudgetApprovalAction,
    background_tasks: BackgroundTasks,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    meta: Annotated[RequestMeta, Depends(request_meta)],
) -> BudgetRequestResponse:
    request = budget_service.approve_request(
        db, request_id, payload, current_user, meta, background_tasks
    )
    return BudgetRequestResponse.model_validate(request)


# ---------------------------------------------------------------------------
# Transfers
# ---------------------------------------------------------------------------


@router.post(
    "/transfer",
    response_model=BudgetTransferResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Transfer budget",
    responses={
        201: {"description": "Transfer recorded and applied."},
        400: {"description": "Validation failed or insufficient source balance."},
        403: {"description": "Caller may not transfer."},
        404: {"description": "Project or source entry not found."},
    },
)
def transfer_budget(
    payload: BudgetTransferCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    meta: Annotated[RequestMeta, Depends(request_meta)],
) -> BudgetTransferResponse:
    transfer = budget_service.transfer_budget(db, payload, current_user, meta)
    return BudgetTransferResponse.model_validate(transfer)


@router.get(
    "/transfers",
    response_model=list[BudgetTransferResponse],
    summary="Transfer history",
    description="Newest first; ``project_id`` matches either side of a transfer.",
)
def list_transfers(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission(BUDGET, "read"))],
    fiscal_year: Annotated[
        str | None, Query(pattern=FISCAL_YEAR_PATTERN, description="Filter by fiscal year.")
    ] = None,
    project_id: Annotated[str | None, Query(description="Filter by project.")] = None,
) -> list[BudgetTransferResponse]:
    rows = budget_service.list_transfers(db, fiscal_year, project_id)
    return [BudgetTransferResponse.model_validate(t) for t in rows]


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


@router.get(
    "/summary",
    response_model=BudgetSummaryResponse,
    summary="Budget summary for the current fiscal year",
)
def get_current_summary(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission(BUDGET, "read"))],
) -> BudgetSummaryResponse:
    return budget_service.get_summary(db)


@router.get(
    "/summary/{fiscal_year}",
    response_model=BudgetSummaryResponse,
    summary="Budget summary for a fiscal year",
)
def get_summary(
    fiscal_year: Annotated[str, Path(pattern=FISCAL_YEAR_PATTERN, description=_FY_DESCRIPTION)],
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission(BUDGET, "read"))],
) -> BudgetSummaryResponse:
    return budget_service.get_summary(db, fiscal_year)


# ---------------------------------------------------------------------------
# Year-end archival
# ---------------------------------------------------------------------------


@router.post(
    "/archive",
    response_model=YearEndArchiveResult,
    summary="Archive a fiscal year",
    description=(
        "Writes one archive row per entry of the year, splitting each unspent "
        "balance into carried-forward and returned amounts. With "
        "``roll_forward`` the carried amounts are credited to the next fiscal year."
    ),
    responses={
        200: {"description": "Archive rows written."},
        400: {"description": "Validation failed."},
        403: {"description": "Caller may not archive."},
        409: {"description": "Fiscal year already archived, or it has no entries."},
    },
)
def archive_year_end(
    payload: YearEndArchiveCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    meta: Annotated[RequestMeta, Depends(request_meta)],
) -> YearEndArchiveResult:
    return budget_service.archive_year_end(db, payload, current_user, meta)


@router.get(
    "/archives",
    response_model=list[BudgetArchiveResponse],
    summary="Year-end archive records",
)
def list_archives(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(require_permission(BUDGET, "read"))],
    fiscal_year: Annotated[
        str | None, Query(pattern=FISCAL_YEAR_PATTERN, description="Filter by fiscal year.")
    ] = None,
) -> list[BudgetArchiveResponse]:
    rows = budget_service.list_archives(db, fiscal_year)
    return [BudgetArchiveResponse.model_validate(a) for a in rows]
