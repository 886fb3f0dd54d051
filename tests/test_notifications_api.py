"""
Notification inbox endpoint tests.
"""
from app.services import notification_service
from app.utils.constants import NotificationType


def _notify(db, user, title='Budget Alert: 95% utilized'):
    return notification_service.create_notification(
        db, user.id, NotificationType.BUDGET_WARNING, title, 'Nearly spent.', link='/projects/p1'
    )


class TestInbox:

    def test_lists_only_own_notifications(self, client, db_session, employee, outsider, employee_headers):
        mine = _notify(db_session, employee)
        _notify(db_session, outsider)

        response = client.get('/api/notifications', headers=employee_headers)

        assert response.status_code == 200
        assert [n['id'] for n in response.json()] == [mine.id]
        assert response.json()[0]['is_read'] is False

    def test_unread_count_and_mark_read(self, client, db_session, employee, employee_headers):
        first = _notify(db_session, employee)
        _notify(db_session, employee, title='Budget Request APPROVED')

        assert client.get('/api/notifications/unread-count', headers=employee_headers).json() == {'unread': 2}

        response = client.put(f'/api/notifications/{first.id}/read', headers=employee_headers)
        assert response.status_code == 200
        assert response.json()['is_read'] is True

        assert client.get('/api/notifications/unread-count', headers=employee_headers).json() == {'unread': 1}
        unread = client.get('/api/notifications', params={'unread_only': True}, headers=employee_headers)
        assert [n['title'] for n in unread.json()] == ['Budget Request APPROVED']

    def test_mark_all_read(self, client, db_session, employee, employee_headers):
        _notify(db_session, employee)
        _notify(db_session, employee)

        response = client.put('/api/notifications/read-all', headers=employee_headers)

        assert response.status_code == 200
        assert response.json()['affected'] == 2
        assert client.get('/api/notifications/unread-count', headers=employee_headers).json() == {'unread': 0}

    def test_cannot_mark_someone_elses(self, client, db_session, outsider, employee_headers):
        theirs = _notify(db_session, outsider)
        response = client.put(f'/api/notifications/{theirs.id}/read', headers=employee_headers)
        assert response.status_code == 404

    def test_requires_token(self, client):
        assert client.get('/api/notifications').status_code == 401
