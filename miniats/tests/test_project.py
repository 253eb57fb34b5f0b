"""
Tests for the project-level views: home page, health check and error handlers.
"""

import pytest
from django.conf import settings


@pytest.fixture
def full_env(monkeypatch):
    for name in settings.REQUIRED_ENV_VARS:
        monkeypatch.setenv(name, 'set')


@pytest.mark.django_db
class TestHealthCheck:

    def test_healthy(self, client, full_env):
        response = client.get('/api/health')

        assert response.status_code == 200
        data = response.json()
        assert data['status'] == 'healthy'
        assert data['database'] == 'connected'
        assert data['missing_env'] == []

    def test_reports_missing_variables(self, client, full_env, monkeypatch):
        monkeypatch.delenv('STRIPE_WEBHOOK_SECRET')
        monkeypatch.delenv('EMAIL_HOST')

        response = client.get('/api/health')

        assert response.status_code == 500
        assert response.json()['status'] == 'unhealthy'
        assert response.json()['missing_env'] == ['STRIPE_WEBHOOK_SECRET', 'EMAIL_HOST']


@pytest.mark.django_db
class TestPublicPages:

    def test_home_lists_public_plans(self, client):
        response = client.get('/')

        assert response.status_code == 200
        slugs = [plan.slug for plan in response.context['plans']]
        assert slugs == ['starter', 'professional', 'business']

    def test_app_subdomain_root_is_marketing(self, client):
        response = client.get('/', HTTP_HOST='app.miniats.com')
        assert response.status_code == 200
        assert 'plans' in response.context


@pytest.mark.django_db
class TestErrorHandlers:

    def test_api_404_is_json(self, client):
        response = client.get('/api/nothing-here')

        assert response.status_code == 404
        data = response.json()
        assert data['status_code'] == 404
        assert len(data['error_id']) == 8

    def test_page_404_renders_template(self, client):
        response = client.get('/no-such-page/')

        assert response.status_code == 404
        assert 'errors/404.html' in [t.name for t in response.templates]

    def test_403_page_has_dashboard_link(self, member_client):
        response = member_client.get('/app/settings/')

        assert response.status_code == 403
        assert response.context['dashboard_url'] == '/app/dashboard/'
