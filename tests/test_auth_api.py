"""
Login, token refresh and profile endpoint tests.
"""
from datetime import datetime, timedelta, timezone

from jose import jwt

from app.config import get_settings
from app.models import AuditLog
from app.utils.security import create_access_token, verify_token

PASSWORD = 'testpassword123'


def _login(client, username, password=PASSWORD):
    return client.post('/api/auth/login', data={'username': username, 'password': password})


class TestLogin:

    def test_login_with_email(self, client, supervisor):
        response = _login(client, 'supervisor@test.local')

        assert response.status_code == 200
        body = response.json()
        assert body['token_type'] == 'bearer'
        claims = verify_token(body['access_token'])
        assert claims['sub'] == supervisor.id
        assert claims['role'] == 'SUPERVISOR'

    def test_email_is_case_insensitive(self, client, supervisor):
        assert _login(client, '  Supervisor@Test.LOCAL ').status_code == 200

    def test_wrong_password_is_401(self, client, supervisor):
        response = _login(client, 'supervisor@test.local', 'nope')
        assert response.status_code == 401
        assert response.json()['detail'] == 'Incorrect email or password'

    def test_unknown_user_is_401(self, client):
        assert _login(client, 'ghost@test.local').status_code == 401

    def test_inactive_user_is_401(self, client, db_session, supervisor):
        supervisor.is_active = False
        db_session.commit()
        assert _login(client, 'supervisor@test.local').status_code == 401

    def test_login_records_last_login(self, client, db_session, supervisor):
        _login(client, 'supervisor@test.local')
        db_session.expire_all()
        assert supervisor.last_login_at is not None


class TestProfile:

    def test_me_and_refresh(self, client, employee, employee_headers):
        me = client.get('/api/auth/me', headers=employee_headers)
        assert me.status_code == 200
        assert me.json()['email'] == 'staff@test.local'
        assert 'password_hash' not in me.json()
        assert me.json()['full_name'] == 'Ravi Employee'

        refreshed = client.post('/api/auth/refresh', headers=employee_headers)
        assert refreshed.status_code == 200
        assert verify_token(refreshed.json()['access_token'])['sub'] == employee.id

    def test_deactivated_user_token_is_rejected(self, client, db_session, employee, employee_headers):
        employee.is_active = False
        db_session.commit()
        assert client.get('/api/auth/me', headers=employee_headers).status_code == 401

    def test_token_without_access_type_is_rejected(self, client, employee):
        settings = get_settings()
        token = jwt.encode(
            {'sub': employee.id, 'exp': datetime.now(timezone.utc) + timedelta(minutes=5)},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )
        response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 401

    def test_expired_token_is_rejected(self, client, employee):
        token = create_access_token({'sub': employee.id}, expires_in=timedelta(minutes=-1))
        response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 401


class TestLoginAudit:

    def test_successful_login_is_audited(self, client, db_session, supervisor):
        _login(client, 'supervisor@test.local')
        log = db_session.query(AuditLog).filter_by(action='LOGIN').one()
        assert log.user_id == supervisor.id
        assert log.entity_type == 'User'
        assert log.ip_address == 'testclient'

    def test_failed_login_is_not_audited(self, client, db_session, supervisor):
        _login(client, 'supervisor@test.local', 'nope')
        assert db_session.query(AuditLog).count() == 0


class TestChangePassword:

    URL = '/api/auth/change-password'

    def test_change_then_login_with_new_password(self, client, db_session, employee, employee_headers):
        response = client.post(
            self.URL,
            json={'current_password': PASSWORD, 'new_password': 'n3w-passw0rd'},
            headers=employee_headers,
        )
        assert response.status_code == 200
        assert response.json()['message'] == 'Password changed'

        assert _login(client, 'staff@test.local').status_code == 401
        assert _login(client, 'staff@test.local', 'n3w-passw0rd').status_code == 200
        assert db_session.query(AuditLog).filter_by(action='CHANGE_PASSWORD').count() == 1

    def test_wrong_current_password_is_401(self, client, employee_headers):
        response = client.post(
            self.URL,
            json={'current_password': 'wrong-one', 'new_password': 'n3w-passw0rd'},
            headers=employee_headers,
        )
        assert response.status_code == 401

    def test_short_or_unchanged_password_is_400(self, client, employee_headers):
        short = client.post(
            self.URL, json={'current_password': PASSWORD, 'new_password': 'short'}, headers=employee_headers
        )
        same = client.post(
            self.URL, json={'current_password': PASSWORD, 'new_password': PASSWORD}, headers=employee_headers
        )
        assert short.status_code == 400
        assert same.status_code == 400
