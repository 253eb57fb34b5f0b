"""
Tests for transactional email tasks and the email webhook.
"""

import pytest

from conftest import ApplicationFactory, CompanyUserFactory, TeamMemberFactory
from notifications.emails import EmailDispatcher, stage_label
from notifications.tasks import (
    send_application_received_email,
    send_stage_changed_email,
    send_team_invite_email,
)
from tenants.context import get_current_scope

WEBHOOK_URL = '/api/webhooks/email'
SECRET = 'email-webhook-test-secret'


@pytest.mark.django_db
class TestEmailTasks:

    def test_team_invite(self, company, company_admin, mailoutbox):
        member = TeamMemberFactory(company=company, email='new@example.com', invited_by=company_admin)

        assert send_team_invite_email.delay(member.pk).get() == 1

        message = mailoutbox[0]
        assert message.to == ['new@example.com']
        assert f'/auth/invite/{member.invite_token}/' in message.body
        assert message.alternatives[0][1] == 'text/html'

    def test_accepted_invite_is_skipped(self, company, mailoutbox):
        member = TeamMemberFactory(company=company, status='accepted')

        assert send_team_invite_email.delay(member.pk).get() == 0
        assert mailoutbox == []

    def test_application_received_goes_to_admins(self, company, company_admin, member_membership, mailoutbox):
        application = ApplicationFactory(company=company)

        send_application_received_email.delay(application.pk)

        assert mailoutbox[0].to == [company_admin.email]
        assert application.job.display_title in mailoutbox[0].subject

    def test_stage_changed_excludes_actor(self, company, company_admin, mailoutbox):
        CompanyUserFactory(company=company, role='manager', user__email='lead@acme.example.com')
        application = ApplicationFactory(company=company)

        send_stage_changed_email.delay(application.pk, 'new', 'phone-screen', company_admin.pk)

        assert mailoutbox[0].to == ['lead@acme.example.com']
        assert 'Phone screen' in mailoutbox[0].subject

    def test_tasks_run_in_company_scope(self, company, company_admin, monkeypatch):
        seen = []

        def capture(application, *args, **kwargs):
            seen.append(get_current_scope())
            return 1

        monkeypatch.setattr(EmailDispatcher, 'send_stage_changed', staticmethod(capture))
        application = ApplicationFactory(company=company)

        send_stage_changed_email.delay(application.pk, 'new', 'interview', company_admin.pk)

        assert seen[0].company == company
        assert seen[0].user == company_admin
        assert get_current_scope() is None

    def test_missing_application(self, db, mailoutbox):
        assert send_application_received_email.delay(424242).get() == 0
        assert mailoutbox == []

    def test_no_recipients(self, company, mailoutbox):
        assert EmailDispatcher._send('Hi', 'application_received', {}, ['', None]) == 0

    def test_stage_label(self):
        assert stage_label('phone-screen') == 'Phone screen'
        assert stage_label('unknown') == 'unknown'


@pytest.mark.django_db
class TestEmailWebhook:

    def post(self, api_client, body, secret=SECRET):
        headers = {'HTTP_X_WEBHOOK_SECRET': secret} if secret is not None else {}
        return api_client.post(WEBHOOK_URL, body, format='json', **headers)

    def test_queues_email(self, api_client, company, company_admin, mailoutbox):
        application = ApplicationFactory(company=company)

        response = self.post(api_client, {'type': 'application_received', 'data': {'application_id': application.pk}})

        assert response.status_code == 202
        assert response.json() == {'queued': True, 'type': 'application_received'}
        assert len(mailoutbox) == 1

    def test_stage_changed_needs_all_keys(self, api_client):
        response = self.post(api_client, {'type': 'stage_changed', 'data': {'application_id': 1}})
        assert response.status_code == 400

    def test_non_numeric_id_is_rejected(self, api_client, mailoutbox):
        response = self.post(api_client, {'type': 'application_received', 'data': {'application_id': 'abc'}})

        assert response.status_code == 400
        assert 'application_id' in response.json()['error']['data']
        assert mailoutbox == []

    def test_unknown_stage_is_rejected(self, api_client):
        body = {'type': 'stage_changed', 'data': {'application_id': 1, 'from_stage': 'new', 'to_stage': 'limbo'}}

        response = self.post(api_client, body)

        assert response.status_code == 400
        assert 'to_stage' in response.json()['error']['data']

    def test_numeric_string_id_is_coerced(self, api_client, company, company_admin, mailoutbox):
        application = ApplicationFactory(company=company)

        response = self.post(
            api_client, {'type': 'application_received', 'data': {'application_id': str(application.pk)}},
        )

        assert response.status_code == 202
        assert len(mailoutbox) == 1

    def test_unknown_type(self, api_client):
        response = self.post(api_client, {'type': 'newsletter', 'data': {}})
        assert response.status_code == 400

    def test_wrong_secret(self, api_client):
        response = self.post(api_client, {'type': 'team_invite', 'data': {'team_member_id': 1}}, secret='nope')
        assert response.status_code == 401

    def test_missing_secret_header(self, api_client):
        response = self.post(api_client, {'type': 'team_invite', 'data': {'team_member_id': 1}}, secret=None)
        assert response.status_code == 401

    def test_unconfigured(self, api_client, settings):
        settings.EMAIL_WEBHOOK_SECRET = ''

        response = self.post(api_client, {'type': 'team_invite', 'data': {'team_member_id': 1}})

        assert response.status_code == 500
