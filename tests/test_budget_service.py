"""
Budget ledger service tests: allocation, request approval, transfers,
year-end archival and the fiscal-year summary.
"""
from decimal import Decimal

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from app.models import AuditLog, BudgetArchive, BudgetEntry, BudgetRequest, BudgetTransfer, Notification
from app.schemas.budget import (
    BudgetAllocationCreate,
    BudgetApprovalAction,
    BudgetRequestCreate,
    BudgetTransferCreate,
    YearEndArchiveCreate,
)
from app.services import budget_service
from app.utils.constants import Role
from app.utils.fiscal_year import current_fiscal_year

FY = '2024-25'


def _allocate(db, user, project, amount, category='EQUIPMENT', fiscal_year=FY):
    data = BudgetAllocationCreate(
        project_id=project.id, category=category, fiscal_year=fiscal_year, amount=Decimal(amount)
    )
    return budget_service.allocate(db, data, user)


def _request(db, user, project, amount='50000', category='TRAVEL'):
    data = BudgetRequestCreate(
        category=category, amount=Decimal(amount), justification='Conference travel needed'
    )
    return budget_service.request_budget(db, project.id, data, user)


def _entry(db, project, category, fiscal_year=FY):
    return budget_service.get_entry(db, project.id, category, fiscal_year)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


class TestUtilizationPercent:

    def test_zero_allocation_is_zero(self):
        assert budget_service.utilization_percent(Decimal('0'), Decimal('0')) == 0
        assert budget_service.utilization_percent(Decimal('500'), Decimal('0')) == 0

    def test_rounds_half_up(self):
        assert budget_service.utilization_percent(Decimal('1'), Decimal('200')) == 1
        assert budget_service.utilization_percent(Decimal('1'), Decimal('3')) == 33
        assert budget_service.utilization_percent(Decimal('2'), Decimal('3')) == 67

    def test_not_capped(self):
        assert budget_service.utilization_percent(Decimal('150'), Decimal('100')) == 150

    def test_accepts_floats_and_none(self):
        assert budget_service.utilization_percent(25.0, 100.0) == 25
        assert budget_service.utilization_percent(None, 100) == 0


class TestSplitRemaining:

    @pytest.mark.parametrize(
        'remaining, pct',
        [
            ('750.00', '100'),
            ('750.00', '0'),
            ('1000.01', '33.33'),
            ('0.01', '50'),
            ('999999.99', '66.67'),
            ('-120.00', '50'),
        ],
    )
    def test_parts_add_up(self, remaining, pct):
        carried, returned = budget_service.split_remaining(Decimal(remaining), Decimal(pct))
        assert carried + returned == Decimal(remaining)
        assert carried == carried.quantize(Decimal('0.01'))

    def test_full_carry_returns_nothing(self):
        assert budget_service.split_remaining(Decimal('750'), Decimal('100')) == (Decimal('750.00'), Decimal('0.00'))

    def test_zero_carry_returns_everything(self):
        carried, returned = budget_service.split_remaining(Decimal('750'), Decimal('0'))
        assert carried == 0
        assert returned == Decimal('750')

    def test_carried_rounds_half_up_to_cents(self):
        carried, returned = budget_service.split_remaining(Decimal('0.01'), Decimal('50'))
        assert carried == Decimal('0.01')
        assert returned == Decimal('0.00')


# ---------------------------------------------------------------------------
# Allocate
# ---------------------------------------------------------------------------


class TestAllocate:

    def test_allocation_is_additive(self, db_session, supervisor, project):
        first = _allocate(db_session, supervisor, project, '500000')
        assert first.allocated_amount == Decimal('500000')
        assert first.utilized_amount == 0

        second = _allocate(db_session, supervisor, project, '200000')
        assert second.id == first.id
        assert second.allocated_amount == Decimal('700000')
        assert db_session.query(BudgetEntry).count() == 1

    def test_each_allocation_is_audited(self, db_session, supervisor, project):
        _allocate(db_session, supervisor, project, '500000')
        _allocate(db_session, supervisor, project, '200000')

        logs = db_session.query(AuditLog).filter_by(action='ALLOCATE').all()
        assert len(logs) == 2
        assert {log.entity_type for log in logs} == {'BudgetEntry'}
        assert sorted(log.new_value['allocated_amount'] for log in logs) == [500000.0, 700000.0]

        first, second = sorted(logs, key=lambda log: log.new_value['allocated_amount'])
        assert first.old_value is None
        assert second.old_value == {'allocated_amount': 500000.0}

    def test_slots_are_per_category_and_year(self, db_session, supervisor, project):
        _allocate(db_session, supervisor, project, '100', category='TRAVEL')
        _allocate(db_session, supervisor, project, '100', category='EQUIPMENT')
        _allocate(db_session, supervisor, project, '100', category='EQUIPMENT', fiscal_year='2025-26')
        assert db_session.query(BudgetEntry).count() == 3

    def test_missing_project_is_404(self, db_session, supervisor):
        data = BudgetAllocationCreate(
            project_id='missing', category='EQUIPMENT', fiscal_year=FY, amount=Decimal('1')
        )
        with pytest.raises(HTTPException) as exc:
            budget_service.allocate(db_session, data, supervisor)
        assert exc.value.status_code == 404

    def test_project_head_cannot_allocate(self, db_session, project_head, project):
        with pytest.raises(HTTPException) as exc:
            _allocate(db_session, project_head, project, '100')
        assert exc.value.status_code == 403
        assert db_session.query(BudgetEntry).count() == 0

    @pytest.mark.parametrize('amount', ['0', '-5', '1.001'])
    def test_rejects_bad_amounts(self, amount):
        with pytest.raises(ValidationError):
            BudgetAllocationCreate(project_id='p', category='EQUIPMENT', fiscal_year=FY, amount=Decimal(amount))

    def test_rejects_bad_fiscal_year(self):
        with pytest.raises(ValidationError):
            BudgetAllocationCreate(project_id='p', category='EQUIPMENT', fiscal_year='2024', amount=Decimal('1'))


# ---------------------------------------------------------------------------
# Requests and approval
# ---------------------------------------------------------------------------


class TestRequestBudget:

    def test_member_creates_pending_request(self, db_session, employee, project):
        request = _request(db_session, employee, project)
        assert request.status == 'PENDING'
        assert request.requested_by_id == employee.id
        assert request.approved_amount is None
        assert db_session.query(BudgetEntry).count() == 0

    def test_supervisors_are_notified(self, db_session, supervisor, employee, project):
        request = _request(db_session, employee, project)
        notifications = db_session.query(Notification).filter_by(user_id=supervisor.id).all()
        assert len(notifications) == 1
        assert notifications[0].type == 'BUDGET_REQUEST'
        assert notifications[0].link == f'/finance/requests/{request.id}'

    @pytest.mark.parametrize('role', [Role.RC_MEMBER, Role.DIRECTOR_GENERAL, Role.EXTERNAL_OWNER, Role.DIRECTOR])
    def test_staff_of_any_role_may_request(self, db_session, staff_on, project, role):
        member = staff_on(project, role)
        request = _request(db_session, member, project)
        assert request.status == 'PENDING'
        assert request.requested_by_id == member.id

    def test_non_member_is_403(self, db_session, outsider, project):
        with pytest.raises(HTTPException) as exc:
            _request(db_session, outsider, project)
        assert exc.value.status_code == 403
        assert db_session.query(BudgetRequest).count() == 0

    def test_short_justification_is_rejected(self):
        with pytest.raises(ValidationError):
            BudgetRequestCreate(category='TRAVEL', amount=Decimal('10'), justification='short')


class TestApproveRequest:

    def test_partial_approval_credits_current_year(self, db_session, supervisor, employee, project):
        request = _request(db_session, employee, project)
        action = BudgetApprovalAction(action='PARTIALLY_APPROVED', approved_amount=Decimal('30000'))

        decided = budget_service.approve_request(db_session, request.id, action, supervisor)

        fiscal_year = current_fiscal_year()
        assert decided.status == 'PARTIALLY_APPROVED'
        assert decided.approved_amount == Decimal('30000')
        assert decided.approved_by_id == supervisor.id
        assert decided.approved_at is not None
        assert decided.fiscal_year == fiscal_year
        assert _entry(db_session, project, 'TRAVEL', fiscal_year).allocated_amount == Decimal('30000')

    def test_full_approval_ignores_supplied_amount(self, db_session, supervisor, employee, project):
        request = _request(db_session, employee, project)
        action = BudgetApprovalAction(action='APPROVED', approved_amount=Decimal('1'))

        decided = budget_service.approve_request(db_session, request.id, action, supervisor)

        assert decided.approved_amount == Decimal('50000')
        entry = _entry(db_session, project, 'TRAVEL', current_fiscal_year())
        assert entry.allocated_amount == Decimal('50000')

    def test_approval_adds_to_existing_slot(self, db_session, supervisor, employee, project):
        _allocate(db_session, supervisor, project, '10000', category='TRAVEL', fiscal_year=current_fiscal_year())
        request = _request(db_session, employee, project)
        budget_service.approve_request(db_session, request.id, BudgetApprovalAction(action='APPROVED'), supervisor)
        entry = _entry(db_session, project, 'TRAVEL', current_fiscal_year())
        assert entry.allocated_amount == Decimal('60000')

    def test_rejection_credits_nothing(self, db_session, supervisor, employee, project):
        request = _request(db_session, employee, project)
        action = BudgetApprovalAction(action='REJECTED', comments='Not this year')

        decided = budget_service.approve_request(db_session, request.id, action, supervisor)

        assert decided.status == 'REJECTED'
        assert decided.approved_amount is None
        assert decided.fiscal_year is None
        assert decided.comments == 'Not this year'
        assert db_session.query(BudgetEntry).count() == 0

    def test_second_decision_is_409_and_credits_once(self, db_session, supervisor, employee, project):
        request = _request(db_session, employee, project)
        budget_service.approve_request(db_session, request.id, BudgetApprovalAction(action='APPROVED'), supervisor)

        with pytest.raises(HTTPException) as exc:
            budget_service.approve_request(
                db_session, request.id, BudgetApprovalAction(action='REJECTED'), supervisor
            )
        assert exc.value.status_code == 409
        entry = _entry(db_session, project, 'TRAVEL', current_fiscal_year())
        assert entry.allocated_amount == Decimal('50000')

    def test_partial_above_requested_is_400(self, db_session, supervisor, employee, project):
        request = _request(db_session, employee, project)
        action = BudgetApprovalAction(action='PARTIALLY_APPROVED', approved_amount=Decimal('50000.01'))

        with pytest.raises(HTTPException) as exc:
            budget_service.approve_request(db_session, request.id, action, supervisor)
        assert exc.value.status_code == 400
        db_session.expire_all()
        assert db_session.get(BudgetRequest, request.id).status == 'PENDING'
        assert db_session.query(BudgetEntry).count() == 0

    def test_partial_equal_to_requested_is_allowed(self, db_session, supervisor, employee, project):
        request = _request(db_session, employee, project)
        action = BudgetApprovalAction(action='PARTIALLY_APPROVED', approved_amount=Decimal('50000'))
        decided = budget_service.approve_request(db_session, request.id, action, supervisor)
        assert decided.status == 'PARTIALLY_APPROVED'

    def test_missing_request_is_404(self, db_session, supervisor):
        with pytest.raises(HTTPException) as exc:
            budget_service.approve_request(
                db_session, 'missing', BudgetApprovalAction(action='APPROVED'), supervisor
            )
        assert exc.value.status_code == 404

    def test_requester_cannot_approve(self, db_session, project_head, project):
        request = _request(db_session, project_head, project)
        with pytest.raises(HTTPException) as exc:
            budget_service.approve_request(
                db_session, request.id, BudgetApprovalAction(action='APPROVED'), project_head
            )
        assert exc.value.status_code == 403

    def test_requester_is_notified(self, db_session, supervisor, employee, project):
        request = _request(db_session, employee, project)
        budget_service.approve_request(
            db_session, request.id, BudgetApprovalAction(action='REJECTED', comments='Too early'), supervisor
        )
        notification = db_session.query(Notification).filter_by(user_id=employee.id).one()
        assert notification.title == 'Budget Request REJECTED'
        assert 'Too early' in notification.message
        assert notification.link == f'/projects/{project.id}'

    def test_decision_is_audited(self, db_session, supervisor, employee, project):
        request = _request(db_session, employee, project)
        budget_service.approve_request(db_session, request.id, BudgetApprovalAction(action='APPROVED'), supervisor)
        log = db_session.query(AuditLog).filter_by(action='APPROVE').one()
        assert log.entity_id == request.id
        assert log.old_value == {'status': 'PENDING'}
        assert log.new_value['status'] == 'APPROVED'

    def test_pending_list_excludes_decided(self, db_session, supervisor, employee, project):
        first = _request(db_session, employee, project)
        second = _request(db_session, employee, project, amount='100')
        budget_service.approve_request(db_session, first.id, BudgetApprovalAction(action='APPROVED'), supervisor)
        assert [r.id for r in budget_service.list_pending_requests(db_session)] == [second.id]

    def test_pending_is_not_a_decision(self):
        with pytest.raises(ValidationError):
            BudgetApprovalAction(action='PENDING')

    def test_partial_requires_amount(self):
        with pytest.raises(ValidationError):
            BudgetApprovalAction(action='PARTIALLY_APPROVED')


# ---------------------------------------------------------------------------
# Transfer
# ---------------------------------------------------------------------------


class TestTransferBudget:

    def _transfer(self, db, user, amount, **sides):
        data = BudgetTransferCreate(amount=Decimal(amount), reason='Reallocation', fiscal_year=FY, **sides)
        return budget_service.transfer_budget(db, data, user)

    def test_moves_money_between_projects(self, db_session, supervisor, project, project2):
        _allocate(db_session, supervisor, project, '700000')

        transfer = self._transfer(
            db_session, supervisor, '100000',
            from_project_id=project.id, from_category='EQUIPMENT',
            to_project_id=project2.id, to_category='EQUIPMENT',
        )

        assert _entry(db_session, project, 'EQUIPMENT').allocated_amount == Decimal('600000')
        assert _entry(db_session, project2, 'EQUIPMENT').allocated_amount == Decimal('100000')
        assert db_session.query(BudgetTransfer).count() == 1
        assert transfer.fiscal_year == FY
        assert transfer.transferred_by_id == supervisor.id

    def test_exact_unspent_balance_with_cents(self, db_session, supervisor, add_entry, project, project2):
        add_entry(project, 'EQUIPMENT', FY, allocated='0.30', utilized='0.10')

        self._transfer(
            db_session, supervisor, '0.20',
            from_project_id=project.id, from_category='EQUIPMENT',
            to_project_id=project2.id, to_category='EQUIPMENT',
        )

        assert _entry(db_session, project, 'EQUIPMENT').allocated_amount == Decimal('0.10')
        assert _entry(db_session, project2, 'EQUIPMENT').allocated_amount == Decimal('0.20')

    def test_moves_money_between_categories(self, db_session, supervisor, project):
        _allocate(db_session, supervisor, project, '1000', category='TRAVEL')
        self._transfer(
            db_session, supervisor, '400',
            from_project_id=project.id, from_category='TRAVEL',
            to_project_id=project.id, to_category='CONSUMABLES',
        )
        assert _entry(db_session, project, 'TRAVEL').allocated_amount == Decimal('600')
        assert _entry(db_session, project, 'CONSUMABLES').allocated_amount == Decimal('400')

    def test_missing_source_slot_writes_nothing(self, db_session, supervisor, project, project2):
        with pytest.raises(HTTPException) as exc:
            self._transfer(
                db_session, supervisor, '100',
                from_project_id=project2.id, from_category='EQUIPMENT',
                to_project_id=project.id, to_category='EQUIPMENT',
            )
        assert exc.value.status_code == 404
        assert db_session.query(BudgetTransfer).count() == 0
        assert db_session.query(BudgetEntry).count() == 0

    def test_insufficient_unspent_balance_is_400(self, db_session, add_entry, supervisor, project, project2):
        add_entry(project, 'EQUIPMENT', FY, allocated=100, utilized=80)

        with pytest.raises(HTTPException) as exc:
            self._transfer(
                db_session, supervisor, '50',
                from_project_id=project.id, from_category='EQUIPMENT',
                to_project_id=project2.id, to_category='EQUIPMENT',
            )
        assert exc.value.status_code == 400
        assert db_session.query(BudgetTransfer).count() == 0
        assert _entry(db_session, project, 'EQUIPMENT').allocated_amount == Decimal('100')
        assert _entry(db_session, project2, 'EQUIPMENT') is None

    def test_exact_unspent_balance_can_move(self, db_session, add_entry, supervisor, project, project2):
        add_entry(project, 'EQUIPMENT', FY, allocated=100, utilized=80)
        self._transfer(
            db_session, supervisor, '20',
            from_project_id=project.id, from_category='EQUIPMENT',
            to_project_id=project2.id, to_category='EQUIPMENT',
        )
        assert _entry(db_session, project, 'EQUIPMENT').allocated_amount == Decimal('80')

    def test_half_specified_source_only_credits(self, db_session, supervisor, project):
        self._transfer(
            db_session, supervisor, '250',
            from_category='CONTINGENCY',
            to_project_id=project.id, to_category='EQUIPMENT',
        )
        assert _entry(db_session, project, 'EQUIPMENT').allocated_amount == Decimal('250')
        assert db_session.query(BudgetTransfer).one().from_project_id is None

    def test_half_specified_destination_only_debits(self, db_session, supervisor, project):
        _allocate(db_session, supervisor, project, '1000')
        self._transfer(
            db_session, supervisor, '300',
            from_project_id=project.id, from_category='EQUIPMENT',
            to_category='OTHER',
        )
        assert _entry(db_session, project, 'EQUIPMENT').allocated_amount == Decimal('700')
        assert db_session.query(BudgetEntry).count() == 1

    def test_unknown_destination_project_is_404(self, db_session, supervisor, project):
        _allocate(db_session, supervisor, project, '1000')
        with pytest.raises(HTTPException) as exc:
            self._transfer(
                db_session, supervisor, '10',
                from_project_id=project.id, from_category='EQUIPMENT',
                to_project_id='missing', to_category='EQUIPMENT',
            )
        assert exc.value.status_code == 404
        assert _entry(db_session, project, 'EQUIPMENT').allocated_amount == Decimal('1000')

    def test_each_side_needs_a_field(self):
        with pytest.raises(ValidationError):
            BudgetTransferCreate(amount=Decimal('1'), reason='Reallocation', to_category='OTHER')
        with pytest.raises(ValidationError):
            BudgetTransferCreate(amount=Decimal('1'), reason='Reallocation', from_category='OTHER')

    def test_list_transfers_filters_by_project_on_either_side(self, db_session, supervisor, project, project2):
        _allocate(db_session, supervisor, project, '1000')
        self._transfer(
            db_session, supervisor, '10',
            from_project_id=project.id, from_category='EQUIPMENT',
            to_project_id=project2.id, to_category='EQUIPMENT',
        )
        assert len(budget_service.list_transfers(db_session, project_id=project2.id)) == 1
        assert len(budget_service.list_transfers(db_session, project_id=project.id)) == 1
        assert budget_service.list_transfers(db_session, fiscal_year='2030-31') == []


# ---------------------------------------------------------------------------
# Year-end archival
# ---------------------------------------------------------------------------


class TestArchiveYearEnd:

    @pytest.fixture
    def ledger(self, db_session, add_entry, project, project2):
        add_entry(project, 'EQUIPMENT', FY, allocated=1000, utilized=250)
        add_entry(project2, 'TRAVEL', FY, allocated=500, utilized=500)
        add_entry(project, 'EQUIPMENT', '2023-24', allocated=42)

    def _archive(self, db, user, pct='100', roll_forward=False):
        data = YearEndArchiveCreate(fiscal_year=FY, carry_forward_percent=Decimal(pct), roll_forward=roll_forward)
        return budget_service.archive_year_end(db, data, user)

    def test_full_carry_forward(self, db_session, supervisor, project, ledger):
        result = self._archive(db_session, supervisor, '100')

        assert result.archived_count == 2
        assert result.total_carried_forward == 750.0
        assert result.total_returned == 0.0
        row = db_session.query(BudgetArchive).filter_by(project_id=project.id).one()
        assert row.carried_forward == Decimal('750')
        assert row.returned_amount == 0
        assert row.archived_by_id == supervisor.id

    def test_zero_carry_forward(self, db_session, supervisor, ledger):
        result = self._archive(db_session, supervisor, '0')
        assert result.total_carried_forward == 0.0
        assert result.total_returned == 750.0

    def test_fractional_percent_parts_add_up(self, db_session, supervisor, ledger):
        self._archive(db_session, supervisor, '33.33')
        for row in db_session.query(BudgetArchive).all():
            remaining = row.allocated_amount - row.utilized_amount
            assert row.carried_forward + row.returned_amount == remaining

    def test_live_entries_are_untouched(self, db_session, supervisor, project, ledger):
        self._archive(db_session, supervisor, '50')
        entry = _entry(db_session, project, 'EQUIPMENT')
        assert entry.allocated_amount == Decimal('1000')
        assert entry.utilized_amount == Decimal('250')
        assert db_session.query(BudgetEntry).count() == 3

    def test_only_the_given_year_is_archived(self, db_session, supervisor, ledger):
        self._archive(db_session, supervisor)
        assert {row.fiscal_year for row in db_session.query(BudgetArchive).all()} == {FY}

    def test_archiving_twice_is_409(self, db_session, supervisor, ledger):
        self._archive(db_session, supervisor)
        with pytest.raises(HTTPException) as exc:
            self._archive(db_session, supervisor)
        assert exc.value.status_code == 409
        assert db_session.query(BudgetArchive).count() == 2

    def test_roll_forward_credits_next_year(self, db_session, supervisor, project, project2, ledger):
        result = self._archive(db_session, supervisor, '100', roll_forward=True)

        assert result.rolled_forward_count == 1
        assert _entry(db_session, project, 'EQUIPMENT', '2025-26').allocated_amount == Decimal('750')
        assert _entry(db_session, project2, 'TRAVEL', '2025-26') is None

    def test_roll_forward_adds_to_existing_next_year_slot(self, db_session, add_entry, supervisor, project, ledger):
        add_entry(project, 'EQUIPMENT', '2025-26', allocated=1000)
        self._archive(db_session, supervisor, '50', roll_forward=True)
        assert _entry(db_session, project, 'EQUIPMENT', '2025-26').allocated_amount == Decimal('1375')

    def test_overrun_slot_carries_its_deficit(self, db_session, add_entry, supervisor, project):
        add_entry(project, 'OTHER', FY, allocated=100, utilized=150)
        self._archive(db_session, supervisor, '100', roll_forward=True)
        row = db_session.query(BudgetArchive).one()
        assert row.carried_forward == Decimal('-50')
        assert _entry(db_session, project, 'OTHER', '2025-26') is None

    def test_year_without_entries_is_409(self, db_session, supervisor):
        with pytest.raises(HTTPException) as exc:
            self._archive(db_session, supervisor)
        assert exc.value.status_code == 409
        assert db_session.query(AuditLog).filter_by(action='ARCHIVE').count() == 0

    def test_employee_cannot_archive(self, db_session, employee, ledger):
        with pytest.raises(HTTPException) as exc:
            self._archive(db_session, employee)
        assert exc.value.status_code == 403

    @pytest.mark.parametrize('pct', ['-1', '100.01'])
    def test_percent_must_be_between_0_and_100(self, pct):
        with pytest.raises(ValidationError):
            YearEndArchiveCreate(fiscal_year=FY, carry_forward_percent=Decimal(pct))


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


class TestGetSummary:

    def test_totals_and_categories(self, db_session, add_entry, project, project2):
        add_entry(project, 'EQUIPMENT', FY, allocated=600000, utilized=100000)
        add_entry(project2, 'EQUIPMENT', FY, allocated=100000, utilized=20000)
        add_entry(project, 'TRAVEL', FY, allocated=100000)
        add_entry(project, 'TRAVEL', '2025-26', allocated=999)

        summary = budget_service.get_summary(db_session, FY)

        assert summary.fiscal_year == FY
        assert summary.currency == 'INR'
        assert summary.total_allocated == 800000.0
        assert summary.total_utilized == 120000.0
        assert summary.remaining == 680000.0
        assert summary.utilization_percent == 15
        by_category = {c.category: c for c in summary.by_category}
        assert set(by_category) == {'EQUIPMENT', 'TRAVEL'}
        assert by_category['EQUIPMENT'].utilization_percent == 17
        assert by_category['TRAVEL'].utilization_percent == 0
        assert [(e.project_code, e.category) for e in summary.entries] == [
            ('P1', 'EQUIPMENT'), ('P1', 'TRAVEL'), ('P2', 'EQUIPMENT'),
        ]
        assert summary.entries[0].remaining_amount == 500000.0

    def test_zero_allocation_reports_zero_percent(self, db_session, add_entry, project):
        add_entry(project, 'OTHER', FY, allocated=0)
        summary = budget_service.get_summary(db_session, FY)
        assert summary.utilization_percent == 0
        assert summary.by_category[0].utilization_percent == 0

    def test_empty_year(self, db_session):
        summary = budget_service.get_summary(db_session, '2030-31')
        assert summary.total_allocated == 0
        assert summary.utilization_percent == 0
        assert summary.by_category == []
        assert summary.entries == []

    def test_defaults_to_current_year(self, db_session, supervisor, project):
        _allocate(db_session, supervisor, project, '10', fiscal_year=current_fiscal_year())
        summary = budget_service.get_summary(db_session)
        assert summary.fiscal_year == current_fiscal_year()
        assert summary.total_allocated == 10.0
