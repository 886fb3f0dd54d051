"""
Budget ledger service layer.

All reads and writes of the ``/api/budget`` endpoints live here: direct
allocation, request-then-approval, transfers between (project, category)
slots, year-end archival, and the fiscal-year summary.

Design notes
------------
- Every change to a ``BudgetEntry`` is one SQL statement.  Credits are an
  ``INSERT ... ON CONFLICT (project_id, category, fiscal_year) DO UPDATE``
  on PostgreSQL and SQLite; other dialects fall back to
  update-then-insert inside a SAVEPOINT.  Debits are conditional
  ``UPDATE ... WHERE allocated - utilized >= :amount`` so the balance check
  and the write cannot interleave with another request.
- A request leaves ``PENDING`` through ``UPDATE ... WHERE status = 'PENDING'``;
  a zero row count means another approver got there first (409).
- Each operation stages its audit record in the same transaction and commits
  once.  Notifications are sent after the commit and never fail the
  operation.
- Amounts are ``Decimal`` end to end; only response schemas turn them into
  ``float``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from fastapi import BackgroundTasks, HTTPException, status
from sqlalchemy import func, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import generate_uuid
from app.models.budget_archive import BudgetArchive
from app.models.budget_entry import BudgetEntry
from app.models.budget_request import BudgetRequest
from app.models.budget_transfer import BudgetTransfer
from app.models.project import Project
from app.models.user import User
from app.schemas.budget import (
    BudgetAllocationCreate,
    BudgetApprovalAction,
    BudgetArchiveResponse,
    BudgetRequestCreate,
    BudgetSummaryEntry,
    BudgetSummaryResponse,
    BudgetTransferCreate,
    CategorySummary,
    YearEndArchiveCreate,
    YearEndArchiveResult,
)
from app.services import audit_service, notification_service
from app.services.audit_service import RequestMeta
from app.services.auth_service import authorize, get_project_or_404
from app.utils.constants import (
    AUDIT_ALLOCATE,
    AUDIT_APPROVE,
    AUDIT_ARCHIVE,
    AUDIT_CREATE,
    AUDIT_TRANSFER,
    CREDITING_REQUEST_STATUSES,
    RequestStatus,
)
from app.utils.fiscal_year import current_fiscal_year, next_fiscal_year
from app.utils.permissions import BUDGET

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")
_SLOT_COLUMNS = ["project_id", "category", "fiscal_year"]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def to_decimal(value: Any) -> Decimal:
    """Coerce a DB or JSON amount to ``Decimal``; ``None`` becomes zero."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def utilization_percent(utilized: Any, allocated: Any) -> int:
    """Return ``round(100 * utilized / allocated)`` (half-up), 0 when nothing is allocated.

    The result is not capped: an overrun slot reports more than 100.
    """
    allocated = to_decimal(allocated)
    if allocated == 0:
        return 0
    pct = to_decimal(utilized) * 100 / allocated
    return int(pct.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def split_remaining(remaining: Decimal, carry_forward_percent: Decimal) -> tuple[Decimal, Decimal]:
    """Split an unspent balance into (carried_forward, returned).

    ``carried_forward`` is rounded half-up to cents and ``returned`` is the
    exact remainder, so the two always add back up to *remaining*.
    """
    carried = (remaining * carry_forward_percent / 100).quantize(_CENT, rounding=ROUND_HALF_UP)
    return carried, remaining - carried


def _slot(project_id: str, category: str, fiscal_year: str) -> tuple:
    return (
        BudgetEntry.project_id == project_id,
        BudgetEntry.category == category,
        BudgetEntry.fiscal_year == fiscal_year,
    )


def _balance_covers(amount: Decimal):
    """SQL condition: the unspent balance is at least *amount*, to the cent.

    SQLite stores ``Numeric`` as REAL, so the difference is rounded before
    the comparison.
    """
    return func.round(BudgetEntry.allocated_amount - BudgetEntry.utilized_amount - amount, 2) >= 0


def get_entry(db: Session, project_id: str, category: str, fiscal_year: str) -> BudgetEntry | None:
    """Load a slot, refreshing any stale copy held by the session."""
    return db.execute(
        select(BudgetEntry)
        .where(*_slot(project_id, category, fiscal_year))
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()


def _increment_allocation(
    db: Session, project_id: str, category: str, fiscal_year: str, amount: Decimal
) -> int:
    result = db.execute(
        update(BudgetEntry)
        .where(*_slot(project_id, category, fiscal_year))
        .values(allocated_amount=BudgetEntry.allocated_amount + amount, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


def credit_allocation(
    db: Session, project_id: str, category: str, fiscal_year: str, amount: Decimal
) -> BudgetEntry:
    """Add *amount* to a slot's allocation, creating the slot if absent.

    Does not commit.
    """
    dialect = db.get_bind().dialect.name
    if dialect in ("postgresql", "sqlite"):
        insert = pg_insert if dialect == "postgresql" else sqlite_insert
        stmt = insert(BudgetEntry).values(
            id=generate_uuid(),
            project_id=project_id,
            category=category,
            fiscal_year=fiscal_year,
            allocated_amount=amount,
            utilized_amount=Decimal("0"),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=_SLOT_COLUMNS,
            set_={
                "allocated_amount": BudgetEntry.allocated_amount + stmt.excluded.allocated_amount,
                "updated_at": func.now(),
            },
        )
        db.execute(stmt)
    elif not _increment_allocation(db, project_id, category, fiscal_year, amount):
        try:
            with db.begin_nested():
                db.add(
                    BudgetEntry(
                        project_id=project_id,
                        category=category,
                        fiscal_year=fiscal_year,
                        allocated_amount=amount,
                        utilized_amount=Decimal("0"),
                    )
                )
        except IntegrityError:
            # Another transaction created the slot between our UPDATE and INSERT
            logger.debug("credit_allocation: insert race on %s/%s/%s", project_id, category, fiscal_year)
            _increment_allocation(db, project_id, category, fiscal_year, amount)

    entry = get_entry(db, project_id, category, fiscal_year)
    logger.debug(
        "credit_allocation: %s/%s/%s +%s -> %s",
        project_id, category, fiscal_year, amount, entry.allocated_amount,
    )
    return entry


def debit_allocation(
    db: Session, project_id: str, category: str, fiscal_year: str, amount: Decimal
) -> BudgetEntry:
    """Subtract *amount* from a slot's allocation.

    The slot must exist and its unspent balance (allocated − utilized) must
    cover *amount*.  Does not commit.

    Raises:
        HTTPException 404: If the slot does not exist.
        HTTPException 400: If the unspent balance is insufficient.
    """
    result = db.execute(
        update(BudgetEntry)
        .where(
            *_slot(project_id, category, fiscal_year),
            _balance_covers(amount),
        )
        .values(allocated_amount=BudgetEntry.allocated_amount - amount, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    entry = get_entry(db, project_id, category, fiscal_year)
    if result.rowcount == 0:
        if entry is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No {category} budget for project {project_id} in {fiscal_year}.",
            )
        available = to_decimal(entry.allocated_amount) - to_decimal(entry.utilized_amount)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Insufficient unspent {category} budget in {fiscal_year}: "
                f"available {available}, requested {amount}."
            ),
        )
    return entry


def record_utilization(
    db: Session,
    project_id: str,
    category: str,
    fiscal_year: str,
    amount: Decimal,
    allow_overrun: bool,
) -> BudgetEntry:
    """Add *amount* to a slot's utilization.

    With *allow_overrun* false the update is conditional on the unspent
    balance covering *amount*.  Does not commit.

    Raises:
        HTTPException 404: If no budget exists for the slot.
        HTTPException 400: If overruns are disallowed and the balance is short.
    """
    conditions = list(_slot(project_id, category, fiscal_year))
    if not allow_overrun:
        conditions.append(_balance_covers(amount))
    result = db.execute(
        update(BudgetEntry)
        .where(*conditions)
        .values(utilized_amount=BudgetEntry.utilized_amount + amount, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    entry = get_entry(db, project_id, category, fiscal_year)
    if result.rowcount == 0:
        if entry is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No {category} budget allocated for this project in {fiscal_year}.",
            )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Expense exceeds the remaining {category} budget for {fiscal_year}.",
        )
    return entry


def _get_request_or_404(db: Session, request_id: str) -> BudgetRequest:
    request: BudgetRequest | None = (
        db.query(BudgetRequest).filter(BudgetRequest.id == request_id).first()
    )
    if request is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Budget request with id={request_id} not found.",
        )
    return request


# ---------------------------------------------------------------------------
# Allocate
# ---------------------------------------------------------------------------


def allocate(
    db: Session,
    data: BudgetAllocationCreate,
    user: User,
    meta: RequestMeta | None = None,
) -> BudgetEntry:
    """Add ``data.amount`` to the allocation of one slot.

    Additive, not idempotent: the same payload twice adds the amount twice.

    Raises:
        HTTPException 403: If the caller may not allocate.
        HTTPException 404: If the project does not exist.
    """
    project = authorize(db, user, BUDGET, "allocate", project_id=data.project_id)
    category = data.category.value

    created = get_entry(db, project.id, category, data.fiscal_year) is None
    entry = credit_allocation(db, project.id, category, data.fiscal_year, data.amount)
    new_amount = to_decimal(entry.allocated_amount)
    audit_service.record(
        db,
        user.id,
        AUDIT_ALLOCATE,
        "BudgetEntry",
        entry.id,
        old_value=None if created else {"allocated_amount": new_amount - data.amount},
        new_value={"allocated_amount": new_amount},
        meta=meta,
    )
    db.commit()

    logger.info(
        "allocate: %s %s/%s +%s (allocated=%s) by user=%s",
        project.code, category, data.fiscal_year, data.amount, new_amount, user.id,
    )
    return entry


# ---------------------------------------------------------------------------
# Requests and approval
# ---------------------------------------------------------------------------


def request_budget(
    db: Session,
    project_id: str,
    data: BudgetRequestCreate,
    user: User,
    meta: RequestMeta | None = None,
) -> BudgetRequest:
    """Create a PENDING request and notify the supervisors.

    No ledger mutation happens until the request is approved.

    Raises:
        HTTPException 404: If the project does not exist.
        HTTPException 403: If the caller is not a member of the project.
    """
    project = authorize(db, user, BUDGET, "request", project_id=project_id)

    request = BudgetRequest(
        project_id=project.id,
        requested_by_id=user.id,
        category=data.category.value,
        amount=data.amount,
        justification=data.justification,
        status=RequestStatus.PENDING.value,
    )
    db.add(request)
    db.flush()
    audit_service.record(
        db,
        user.id,
        AUDIT_CREATE,
        "BudgetRequest",
        request.id,
        new_value={
            "project_id": project.id,
            "category": request.category,
            "amount": data.amount,
            "status": request.status,
        },
        meta=meta,
    )
    db.commit()
    db.refresh(request)

    logger.info(
        "request_budget: created %s for %s %s amount=%s by user=%s",
        request.id, project.code, request.category, data.amount, user.id,
    )
    notification_service.notify_supervisors_of_request(db, request, project, user)
    return request


def approve_request(
    db: Session,
    request_id: str,
    data: BudgetApprovalAction,
    user: User,
    meta: RequestMeta | None = None,
    background_tasks: BackgroundTasks | None = None,
) -> BudgetRequest:
    """Move a PENDING request to its terminal status, crediting the ledger.

    - ``APPROVED``: the requested amount is credited (any caller-supplied
      amount is ignored).
    - ``PARTIALLY_APPROVED``: ``approved_amount`` is credited; it must not
      exceed the requested amount.
    - ``REJECTED``: nothing is credited.

    Credits go to the slot (project, category, current fiscal year).

    Raises:
        HTTPException 403: If the caller may not approve.
        HTTPException 404: If the request does not exist.
        HTTPException 409: If the request has already been decided.
        HTTPException 400: If a partial amount exceeds the requested amount.
    """
    authorize(db, user, BUDGET, "approve")
    request = _get_request_or_404(db, request_id)

    if request.status != RequestStatus.PENDING.value:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Budget request already {request.status}.",
        )

    decision = data.action
    requested = to_decimal(request.amount)
    if decision == RequestStatus.APPROVED:
        approved_amount: Decimal | None = requested
    elif decision == RequestStatus.PARTIALLY_APPROVED:
        approved_amount = data.approved_amount
        if approved_amount is None or approved_amount > requested:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=(
                    f"approved_amount must be greater than 0 and at most the "
                    f"requested amount ({requested})."
                ),
            )
    else:
        approved_amount = None

    fiscal_year = current_fiscal_year() if decision in CREDITING_REQUEST_STATUSES else None

    result = db.execute(
        update(BudgetRequest)
        .where(
            BudgetRequest.id == request.id,
            BudgetRequest.status == RequestStatus.PENDING.value,
        )
        .values(
            status=decision.value,
            approved_by_id=user.id,
            approved_amount=approved_amount,
            approved_at=datetime.now(timezone.utc),
            comments=data.comments,
            fiscal_year=fiscal_year,
            updated_at=func.now(),
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Budget request was decided by another user.",
        )

    entry_id = None
    if approved_amount is not None:
        entry = credit_allocation(db, request.project_id, request.category, fiscal_year, approved_amount)
        entry_id = entry.id

    audit_service.record(
        db,
        user.id,
        AUDIT_APPROVE,
        "BudgetRequest",
        request.id,
        old_value={"status": RequestStatus.PENDING.value},
        new_value={
            "status": decision.value,
            "approved_amount": approved_amount,
            "fiscal_year": fiscal_year,
            "budget_entry_id": entry_id,
        },
        meta=meta,
    )
    db.commit()
    db.refresh(request)

    logger.info(
        "approve_request: %s -> %s approved_amount=%s fy=%s by user=%s",
        request.id, decision.value, approved_amount, fiscal_year, user.id,
    )
    project = db.get(Project, request.project_id)
    notification_service.notify_request_decision(db, request, project, background_tasks)
    return request


# ---------------------------------------------------------------------------
# Transfer
# ---------------------------------------------------------------------------


def transfer_budget(
    db: Session,
    data: BudgetTransferCreate,
    user: User,
    meta: RequestMeta | None = None,
) -> BudgetTransfer:
    """Move an amount between two slots within one fiscal year.

    The transfer record is always written.  The source slot is debited only
    when both its project and category are given; likewise the destination
    is credited only when both are given.

    Raises:
        HTTPException 403: If the caller may not transfer.
        HTTPException 404: If a referenced project or the source slot is missing.
        HTTPException 400: If the source's unspent balance is insufficient.
    """
    authorize(db, user, BUDGET, "transfer")
    for project_id in (data.from_project_id, data.to_project_id):
        if project_id is not None:
            get_project_or_404(db, project_id)

    fiscal_year = data.fiscal_year or current_fiscal_year()
    from_category = data.from_category.value if data.from_category else None
    to_category = data.to_category.value if data.to_category else None

    transfer = BudgetTransfer(
        fiscal_year=fiscal_year,
        from_project_id=data.from_project_id,
        to_project_id=data.to_project_id,
        from_category=from_category,
        to_category=to_category,
        amount=data.amount,
        reason=data.reason,
        transferred_by_id=user.id,
    )
    try:
        db.add(transfer)
        db.flush()
        if data.from_project_id and from_category:
            debit_allocation(db, data.from_project_id, from_category, fiscal_year, data.amount)
        if data.to_project_id and to_category:
            credit_allocation(db, data.to_project_id, to_category, fiscal_year, data.amount)
    except HTTPException:
        db.rollback()
        raise

    audit_service.record(
        db,
        user.id,
        AUDIT_TRANSFER,
        "Budget",
        transfer.id,
        new_value={
            "fiscal_year": fiscal_year,
            "from_project_id": data.from_project_id,
            "from_category": from_category,
            "to_project_id": data.to_project_id,
            "to_category": to_category,
            "amount": data.amount,
        },
        meta=meta,
    )
    db.commit()
    db.refresh(transfer)

    logger.info(
        "transfer_budget: %s %s/%s -> %s/%s amount=%s by user=%s",
        fiscal_year, data.from_project_id, from_category,
        data.to_project_id, to_category, data.amount, user.id,
    )
    return transfer


def list_transfers(
    db: Session, fiscal_year: str | None = None, project_id: str | None = None
) -> list[BudgetTransfer]:
    """Transfer history, newest first, optionally filtered by year and project (either side)."""
    query = db.query(BudgetTransfer)
    if fiscal_year:
        query = query.filter(BudgetTransfer.fiscal_year == fiscal_year)
    if project_id:
        query = query.filter(
            or_(
                BudgetTransfer.from_project_id == project_id,
                BudgetTransfer.to_project_id == project_id,
            )
        )
    return query.order_by(BudgetTransfer.created_at.desc()).all()


# ---------------------------------------------------------------------------
# Year-end archival
# ---------------------------------------------------------------------------


def archive_year_end(
    db: Session,
    data: YearEndArchiveCreate,
    user: User,
    meta: RequestMeta | None = None,
) -> YearEndArchiveResult:
    """Snapshot every entry of a fiscal year into ``BudgetArchive`` rows.

    Live entries are left untouched.  With ``roll_forward`` each positive
    carried-forward amount is also credited to the same (project, category)
    in the next fiscal year.

    Raises:
        HTTPException 403: If the caller may not archive.
        HTTPException 409: If the fiscal year has already been archived or
            holds no entries.
    """
    authorize(db, user, BUDGET, "archive")
    fiscal_year = data.fiscal_year
    pct = data.carry_forward_percent

    already = db.query(BudgetArchive.id).filter(BudgetArchive.fiscal_year == fiscal_year).first()
    if already is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Fiscal year {fiscal_year} has already been archived.",
        )

    entries: list[BudgetEntry] = (
        db.query(BudgetEntry)
        .filter(BudgetEntry.fiscal_year == fiscal_year)
        .order_by(BudgetEntry.project_id, BudgetEntry.category)
        .all()
    )
    if not entries:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Fiscal year {fiscal_year} has no budget entries to archive.",
        )

    archives: list[BudgetArchive] = []
    total_carried = Decimal("0")
    total_returned = Decimal("0")
    for entry in entries:
        allocated = to_decimal(entry.allocated_amount)
        utilized = to_decimal(entry.utilized_amount)
        carried, returned = split_remaining(allocated - utilized, pct)
        archive = BudgetArchive(
            project_id=entry.project_id,
            category=entry.category,
            fiscal_year=fiscal_year,
            allocated_amount=allocated,
            utilized_amount=utilized,
            carried_forward=carried,
            returned_amount=returned,
            carry_forward_percent=pct,
            archived_by_id=user.id,
        )
        db.add(archive)
        archives.append(archive)
        total_carried += carried
        total_returned += returned

    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Fiscal year {fiscal_year} has already been archived.",
        )

    rolled_forward = 0
    if data.roll_forward:
        target_year = next_fiscal_year(fiscal_year)
        for archive in archives:
            if archive.carried_forward > 0:
                credit_allocation(
                    db, archive.project_id, archive.category, target_year, archive.carried_forward
                )
                rolled_forward += 1

    audit_service.record(
        db,
        user.id,
        AUDIT_ARCHIVE,
        "Budget",
        fiscal_year,
        new_value={
            "budget_count": len(archives),
            "carry_forward_percent": pct,
            "roll_forward": data.roll_forward,
            "rolled_forward_count": rolled_forward,
        },
        meta=meta,
    )
    db.commit()

    logger.info(
        "archive_year_end: %s archived=%d pct=%s rolled_forward=%d by user=%s",
        fiscal_year, len(archives), pct, rolled_forward, user.id,
    )
    return YearEndArchiveResult(
        message=f"Archived {len(archives)} budget entries for {fiscal_year}",
        fiscal_year=fiscal_year,
        carry_forward_percent=float(pct),
        archived_count=len(archives),
        rolled_forward_count=rolled_forward,
        total_carried_forward=float(total_carried),
        total_returned=float(total_returned),
        archives=[BudgetArchiveResponse.model_validate(a) for a in archives],
    )


def list_archives(db: Session, fiscal_year: str | None = None) -> list[BudgetArchive]:
    query = db.query(BudgetArchive)
    if fiscal_year:
        query = query.filter(BudgetArchive.fiscal_year == fiscal_year)
    return query.order_by(
        BudgetArchive.fiscal_year.desc(), BudgetArchive.project_id, BudgetArchive.category
    ).all()


# ---------------------------------------------------------------------------
# Requests: read side
# ---------------------------------------------------------------------------


def list_pending_requests(db: Session) -> list[BudgetRequest]:
    """Pending requests, oldest first."""
    return (
        db.query(BudgetRequest)
        .filter(BudgetRequest.status == RequestStatus.PENDING.value)
        .order_by(BudgetRequest.created_at.asc())
        .all()
    )


def list_project_requests(db: Session, project_id: str, user: User) -> list[BudgetRequest]:
    authorize(db, user, BUDGET, "read", project_id=project_id)
    return (
        db.query(BudgetRequest)
        .filter(BudgetRequest.project_id == project_id)
        .order_by(BudgetRequest.created_at.desc())
        .all()
    )


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


def get_summary(db: Session, fiscal_year: str | None = None) -> BudgetSummaryResponse:
    """Totals for a fiscal year, overall and per category.

    Defaults to the current fiscal year.
    """
    fiscal_year = fiscal_year or current_fiscal_year()

    rows = (
        db.query(
            BudgetEntry.category,
            func.coalesce(func.sum(BudgetEntry.allocated_amount), 0).label("allocated"),
            func.coalesce(func.sum(BudgetEntry.utilized_amount), 0).label("utilized"),
        )
        .filter(BudgetEntry.fiscal_year == fiscal_year)
        .group_by(BudgetEntry.category)
        .order_by(BudgetEntry.category)
        .all()
    )

    by_category: list[CategorySummary] = []
    total_allocated = Decimal("0")
    total_utilized = Decimal("0")
    for row in rows:
        allocated = to_decimal(row.allocated)
        utilized = to_decimal(row.utilized)
        total_allocated += allocated
        total_utilized += utilized
        by_category.append(
            CategorySummary(
                category=row.category,
                total_allocated=float(allocated),
                total_utilized=float(utilized),
                remaining=float(allocated - utilized),
                utilization_percent=utilization_percent(utilized, allocated),
            )
        )

    entry_rows = (
        db.query(BudgetEntry, Project.code, Project.title)
        .join(Project, Project.id == BudgetEntry.project_id)
        .filter(BudgetEntry.fiscal_year == fiscal_year)
        .order_by(Project.code, BudgetEntry.category)
        .all()
    )
    entries = [
        BudgetSummaryEntry(
            id=entry.id,
            project_id=entry.project_id,
            category=entry.category,
            fiscal_year=entry.fiscal_year,
            allocated_amount=float(entry.allocated_amount),
            utilized_amount=float(entry.utilized_amount),
            created_at=entry.created_at,
            updated_at=entry.updated_at,
            project_code=code,
            project_title=title,
            remaining_amount=float(to_decimal(entry.allocated_amount) - to_decimal(entry.utilized_amount)),
        )
        for entry, code, title in entry_rows
    ]

    logger.debug(
        "get_summary: %s categories=%d entries=%d", fiscal_year, len(by_category), len(entries)
    )
    return BudgetSummaryResponse(
        fiscal_year=fiscal_year,
        currency=get_settings().BASE_CURRENCY,
        total_allocated=float(total_allocated),
        total_utilized=float(total_utilized),
        remaining=float(total_allocated - total_utilized),
        utilization_percent=utilization_percent(total_utilized, total_allocated),
        by_category=by_category,
        entries=entries,
    )
