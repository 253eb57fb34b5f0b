"""
Tests for NotificationService and the notification pages.
"""

import pytest

from conftest import CompanyUserFactory, NotificationFactory
from notifications.models import Notification
from notifications.services import NotificationService, user_group_name


@pytest.fixture
def sent_events(monkeypatch):
    """Capture channel-layer sends instead of delivering them."""
    events = []

    def record(user_id, event):
        events.append((user_group_name(user_id), event))
        return True

    monkeypatch.setattr(NotificationService, '_group_send', staticmethod(record))
    return events


@pytest.mark.django_db
class TestNotificationService:

    def test_notify_pushes_after_commit(self, company, company_admin, sent_events, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            notification = NotificationService.notify(
                company, company_admin, 'stage_changed', 'Moved', 'Ada moved to Offer', '/app/jobs/1/',
            )
            assert sent_events == []

        for callback in callbacks:
            callback()

        group, event = sent_events[0]
        assert group == f'notifications_{company_admin.pk}'
        assert event['type'] == 'send_notification'
        assert event['notification']['id'] == notification.pk
        assert event['notification']['link'] == '/app/jobs/1/'

    def test_notify_company_admins_skips_members(self, company, company_admin, member_membership, sent_events):
        CompanyUserFactory(company=company, role='admin', user__email='second@acme.example.com')

        created = NotificationService.notify_company_admins(company, 'system', 'Hello')

        assert len(created) == 2
        assert not Notification.objects.filter(user=member_membership.user).exists()

    def test_mark_read_broadcasts_database_count(self, company, company_admin, sent_events,
                                                 django_capture_on_commit_callbacks):
        first, _second = NotificationFactory.create_batch(2, company=company, user=company_admin)

        with django_capture_on_commit_callbacks(execute=True):
            assert NotificationService.mark_read(company_admin, first.pk) is True

        assert sent_events == [
            (f'notifications_{company_admin.pk}', {'type': 'unread_count_update', 'count': 1}),
        ]

    def test_mark_read_twice(self, company, company_admin, sent_events):
        notification = NotificationFactory(company=company, user=company_admin)

        assert NotificationService.mark_read(company_admin, notification.pk, broadcast=False)
        assert not NotificationService.mark_read(company_admin, notification.pk, broadcast=False)

    def test_cannot_mark_someone_elses(self, company, company_admin, member_membership, sent_events):
        notification = NotificationFactory(company=company, user=member_membership.user)

        assert not NotificationService.mark_read(company_admin, notification.pk)
        notification.refresh_from_db()
        assert not notification.read

    def test_mark_all_read(self, company, company_admin, sent_events, django_capture_on_commit_callbacks):
        NotificationFactory.create_batch(3, company=company, user=company_admin)

        with django_capture_on_commit_callbacks(execute=True):
            assert NotificationService.mark_all_read(company_admin) == 3

        assert NotificationService.unread_count(company_admin) == 0
        assert sent_events[-1][1] == {'type': 'unread_count_update', 'count': 0}

    def test_push_failure_is_not_fatal(self, company, company_admin, monkeypatch):
        class BrokenLayer:
            async def group_send(self, group, event):
                raise ConnectionError('redis down')

        monkeypatch.setattr('notifications.services.get_channel_layer', lambda: BrokenLayer())
        notification = NotificationFactory(company=company, user=company_admin)

        assert NotificationService.push(notification) is False


@pytest.mark.django_db
class TestNotificationViews:

    def test_list_json(self, company_client, company, company_admin):
        NotificationFactory(company=company, user=company_admin, title='Welcome')

        response = company_client.get('/app/notifications/', HTTP_ACCEPT='application/json')

        data = response.json()
        assert data['unread_count'] == 1
        assert data['results'][0]['title'] == 'Welcome'

    def test_list_page(self, company_client):
        assert company_client.get('/app/notifications/').status_code == 200

    def test_mark_read_json(self, company_client, company, company_admin, sent_events):
        notification = NotificationFactory(company=company, user=company_admin)

        response = company_client.post(
            f'/app/notifications/{notification.pk}/read/', HTTP_ACCEPT='application/json',
        )

        assert response.json() == {'success': True, 'unread_count': 0}

    def test_mark_all_read_form_redirects(self, company_client, company, company_admin, sent_events):
        NotificationFactory.create_batch(2, company=company, user=company_admin)

        response = company_client.post('/app/notifications/read-all/')

        assert response.status_code == 302
        assert response['Location'] == '/app/notifications/'
        assert NotificationService.unread_count(company_admin) == 0
