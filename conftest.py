"""
Mini ATS Test Configuration - pytest fixtures and factories

This module provides:
- pytest-django configuration (settings come from miniats.settings_test)
- factory_boy factories for every model
- Shared fixtures for company-scoped and cross-company (isolation) tests

RUNNING TESTS:
# Run all tests
pytest -v

# Run one app
pytest ats/tests -v

# Run by marker
pytest -m isolation -v
"""

import uuid
from decimal import Decimal

import factory
import pytest
from factory.django import DjangoModelFactory


# ============================================================================
# USER FACTORIES
# ============================================================================

class UserFactory(DjangoModelFactory):
    """Factory for auth users. Logins use the email as username."""

    class Meta:
        model = 'auth.User'
        django_get_or_create = ('username',)
        skip_postgeneration_save = True

    email = factory.LazyFunction(lambda: f"user_{uuid.uuid4().hex[:8]}@example.com")
    username = factory.LazyAttribute(lambda o: o.email)
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    password = factory.PostGenerationMethodCall('set_password', 'testpass123')
    is_active = True

    @factory.post_generation
    def save_password(obj, create, extracted, **kwargs):
        if create:
            obj.save()


# ============================================================================
# TENANT FACTORIES
# ============================================================================

class PlanFactory(DjangoModelFactory):
    """Factory for subscription plans. Seeded slugs are reused, not duplicated."""

    class Meta:
        model = 'tenants.Plan'
        django_get_or_create = ('slug',)

    name = factory.Sequence(lambda n: f"Plan {n}")
    slug = factory.Sequence(lambda n: f"plan-{n}")
    description = factory.Faker('sentence')

    price_monthly = Decimal('79.00')
    price_yearly = Decimal('790.00')
    currency = 'BRL'
    stripe_price_id_monthly = factory.Sequence(lambda n: f"price_month_{n}")
    stripe_price_id_yearly = factory.Sequence(lambda n: f"price_year_{n}")

    max_jobs = 25
    max_users = 5
    max_applications_per_month = 1000
    is_public = True
    sort_order = 10


class CompanyFactory(DjangoModelFactory):
    """Factory for companies (tenants). Starts on the seeded trial plan."""

    class Meta:
        model = 'tenants.Company'
        django_get_or_create = ('slug',)

    name = factory.Sequence(lambda n: f"Company {n}")
    slug = factory.Sequence(lambda n: f"company-{n}")
    plan = 'trial'
    subscription_status = 'trialing'
    industry = 'Technology'
    size = '11-50'
    website = factory.LazyAttribute(lambda o: f"https://{o.slug}.example.com")


class CompanyUserFactory(DjangoModelFactory):
    """Factory for company memberships."""

    class Meta:
        model = 'tenants.CompanyUser'

    user = factory.SubFactory(UserFactory)
    company = factory.SubFactory(CompanyFactory)
    role = 'admin'


class SystemAdminFactory(DjangoModelFactory):
    """Factory for platform operators."""

    class Meta:
        model = 'tenants.SystemAdmin'

    user = factory.SubFactory(UserFactory)


class TeamMemberFactory(DjangoModelFactory):
    """Factory for team invitations."""

    class Meta:
        model = 'tenants.TeamMember'

    company = factory.SubFactory(CompanyFactory)
    email = factory.LazyFunction(lambda: f"invitee_{uuid.uuid4().hex[:8]}@example.com")
    role = 'member'
    status = 'pending'


class ActivityLogFactory(DjangoModelFactory):
    """Factory for audit log entries."""

    class Meta:
        model = 'tenants.ActivityLog'

    company = factory.SubFactory(CompanyFactory)
    action = 'job_created'
    entity_type = 'job'
    entity_id = '1'


# ============================================================================
# ATS FACTORIES
# ============================================================================

class JobFactory(DjangoModelFactory):
    """Factory for published jobs."""

    class Meta:
        model = 'ats.Job'

    company = factory.SubFactory(CompanyFactory)
    title = factory.LazyFunction(lambda: {'pt': 'Desenvolvedor Python', 'en': 'Python Developer'})
    description = factory.LazyFunction(lambda: {'pt': 'Descrição da vaga', 'en': 'Job description'})
    location = factory.Faker('city')
    department = 'Engineering'
    remote_type = 'remote'
    employment_type = 'full-time'
    status = 'published'


class DraftJobFactory(JobFactory):
    status = 'draft'


class CandidateFactory(DjangoModelFactory):
    """Factory for candidates. Candidates are shared across companies."""

    class Meta:
        model = 'ats.Candidate'
        django_get_or_create = ('email',)

    name = factory.Faker('name')
    email = factory.LazyFunction(lambda: f"candidate_{uuid.uuid4().hex[:8]}@example.com")
    phone = '+55 11 99999-0000'
    location = factory.Faker('city')
    resume_url = 'http://testserver/media/resumes/cv.pdf'


class ApplicationFactory(DjangoModelFactory):
    """Factory for applications; job and company always agree."""

    class Meta:
        model = 'ats.Application'

    company = factory.SubFactory(CompanyFactory)
    job = factory.SubFactory(JobFactory, company=factory.SelfAttribute('..company'))
    candidate = factory.SubFactory(CandidateFactory)
    stage = 'new'


class TalentPoolEntryFactory(DjangoModelFactory):
    """Factory for talent pool bookmarks."""

    class Meta:
        model = 'ats.TalentPoolEntry'

    company = factory.SubFactory(CompanyFactory)
    candidate = factory.SubFactory(CandidateFactory)
    notes = factory.Faker('sentence')
    tags = factory.LazyFunction(lambda: ['python'])


# ============================================================================
# NOTIFICATION FACTORIES
# ============================================================================

class NotificationFactory(DjangoModelFactory):
    """Factory for in-app notifications."""

    class Meta:
        model = 'notifications.Notification'

    company = factory.SubFactory(CompanyFactory)
    user = factory.SubFactory(UserFactory)
    notification_type = 'system'
    title = factory.Faker('sentence', nb_words=4)
    message = factory.Faker('sentence')
    read = False


# ============================================================================
# FACTORY FIXTURES
# ============================================================================

@pytest.fixture
def user_factory(db):
    return UserFactory


@pytest.fixture
def plan_factory(db):
    return PlanFactory


@pytest.fixture
def company_factory(db):
    return CompanyFactory


@pytest.fixture
def company_user_factory(db):
    return CompanyUserFactory


@pytest.fixture
def team_member_factory(db):
    return TeamMemberFactory


@pytest.fixture
def job_factory(db):
    return JobFactory


@pytest.fixture
def candidate_factory(db):
    return CandidateFactory


@pytest.fixture
def application_factory(db):
    return ApplicationFactory


@pytest.fixture
def talent_pool_entry_factory(db):
    return TalentPoolEntryFactory


@pytest.fixture
def notification_factory(db):
    return NotificationFactory


# ============================================================================
# COMMON FIXTURES
# ============================================================================

@pytest.fixture
def company(db):
    """A company on the seeded professional plan."""
    return CompanyFactory(slug='acme', name='Acme', plan='professional', subscription_status='active')


@pytest.fixture
def other_company(db):
    """A second company, for isolation checks."""
    return CompanyFactory(slug='globex', name='Globex', plan='professional', subscription_status='active')


@pytest.fixture
def membership(db, company):
    """Admin membership in `company`."""
    return CompanyUserFactory(company=company, role='admin', user__email='admin@acme.example.com')


@pytest.fixture
def company_admin(membership):
    return membership.user


@pytest.fixture
def member_membership(db, company):
    """Plain member of `company`."""
    return CompanyUserFactory(company=company, role='member', user__email='member@acme.example.com')


@pytest.fixture
def scope(membership):
    """TenantScope for the company admin."""
    from tenants.context import TenantScope

    return TenantScope.for_membership(membership)


@pytest.fixture
def member_scope(member_membership):
    from tenants.context import TenantScope

    return TenantScope.for_membership(member_membership)


@pytest.fixture
def other_scope(db, other_company):
    from tenants.context import TenantScope

    return TenantScope.for_membership(CompanyUserFactory(company=other_company, role='admin'))


@pytest.fixture
def company_client(client, company_admin):
    """Django test client logged in as the company admin."""
    client.force_login(company_admin)
    return client


@pytest.fixture
def member_client(client, member_membership):
    client.force_login(member_membership.user)
    return client


@pytest.fixture
def system_admin(db):
    return SystemAdminFactory().user


@pytest.fixture
def operator_client(client, system_admin):
    client.force_login(system_admin)
    return client


@pytest.fixture
def job(company, company_admin):
    return JobFactory(company=company, created_by=company_admin)


@pytest.fixture
def company_row_locks(monkeypatch):
    """Records the company pks locked with select_for_update()."""
    from tenants.models import Company

    locked = []
    manager = Company.objects
    original = manager.select_for_update

    def select_for_update(*args, **kwargs):
        qs = original(*args, **kwargs)
        get = qs.get

        def locking_get(*get_args, **get_kwargs):
            company = get(*get_args, **get_kwargs)
            locked.append(company.pk)
            return company

        qs.get = locking_get
        return qs

    monkeypatch.setattr(manager, 'select_for_update', select_for_update)
    return locked


@pytest.fixture
def api_client(db):
    from rest_framework.test import APIClient

    return APIClient()


# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================

def pytest_configure(config):
    config.addinivalue_line('markers', 'isolation: cross-company data isolation tests')
    config.addinivalue_line('markers', 'integration: multi-component flow tests')
