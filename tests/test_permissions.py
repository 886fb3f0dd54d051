"""Tests for the role capability table and the authorize gate."""
import pytest
from fastapi import HTTPException

from app.services.auth_service import authorize, is_project_member
from app.utils.constants import Role
from app.utils.permissions import BUDGET, EXPENSE, REPORT, Grant, get_grant


class TestGetGrant:

    def test_ledger_managers_hold_all(self):
        for role in (Role.ADMIN.value, Role.SUPERVISOR.value):
            for action in ('allocate', 'approve', 'transfer', 'archive', 'read'):
                assert get_grant(role, BUDGET, action) == Grant.ALL

    def test_requests_are_member_scoped(self):
        for role in Role:
            assert get_grant(role.value, BUDGET, 'request') == Grant.MEMBER

    def test_missing_entries_are_denied(self):
        assert get_grant('EMPLOYEE', BUDGET, 'allocate') is None
        assert get_grant('PROJECT_HEAD', REPORT, 'export') is None
        assert get_grant('EMPLOYEE', EXPENSE, 'create') is None
        assert get_grant('EXTERNAL_OWNER', BUDGET, 'read') is None

    def test_unknown_role_resource_action(self):
        assert get_grant('JANITOR', BUDGET, 'read') is None
        assert get_grant(None, BUDGET, 'read') is None
        assert get_grant('ADMIN', 'payroll', 'read') is None
        assert get_grant('ADMIN', BUDGET, 'delete') is None


class TestAuthorize:

    def test_missing_project_is_404_before_role_check(self, db_session, outsider):
        with pytest.raises(HTTPException) as exc:
            authorize(db_session, outsider, BUDGET, 'allocate', project_id='no-such-project')
        assert exc.value.status_code == 404

    def test_role_without_grant_is_403(self, db_session, project, employee):
        with pytest.raises(HTTPException) as exc:
            authorize(db_session, employee, BUDGET, 'allocate', project_id=project.id)
        assert exc.value.status_code == 403

    def test_all_grant_returns_project(self, db_session, project, supervisor):
        assert authorize(db_session, supervisor, BUDGET, 'allocate', project_id=project.id).id == project.id

    def test_all_grant_without_project(self, db_session, supervisor):
        assert authorize(db_session, supervisor, BUDGET, 'approve') is None

    def test_member_grant_for_head_and_staff(self, db_session, project, project_head, employee):
        assert authorize(db_session, project_head, BUDGET, 'request', project_id=project.id) is not None
        assert authorize(db_session, employee, BUDGET, 'request', project_id=project.id) is not None

    def test_member_grant_for_non_member_is_403(self, db_session, project, outsider):
        with pytest.raises(HTTPException) as exc:
            authorize(db_session, outsider, BUDGET, 'request', project_id=project.id)
        assert exc.value.status_code == 403

    def test_request_grant_needs_membership_for_every_role(self, db_session, project, external_owner):
        with pytest.raises(HTTPException) as exc:
            authorize(db_session, external_owner, BUDGET, 'request', project_id=project.id)
        assert exc.value.status_code == 403

    def test_inactive_staff_is_not_a_member(self, db_session, project, employee):
        project.staff[0].is_active = False
        db_session.commit()
        assert not is_project_member(db_session, employee, project)
