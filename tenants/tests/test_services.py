"""
Tests for company onboarding, invitations and the audit trail.
"""

import pytest
from django.core import mail

from conftest import CompanyUserFactory, TeamMemberFactory, UserFactory
from tenants.exceptions import (
    AlreadyMember,
    DuplicateInvitation,
    InvalidInvitation,
    PermissionDenied,
    PlanLimitExceeded,
)
from tenants.models import ActivityLog, Company, CompanyUser, TeamMember
from tenants.services import AuditService, CompanyService, InvitationService


@pytest.mark.django_db
class TestCompanyOnboarding:
    """CompanyService.onboard and friends."""

    def test_onboard_creates_trial_company_with_admin(self):
        user = UserFactory()

        company = CompanyService.onboard(user, name='Initech', slug='initech', industry='Software')

        assert company.plan == Company.TRIAL_PLAN
        assert company.subscription_status == 'trialing'
        assert company.is_on_trial
        membership = CompanyUser.objects.get(user=user)
        assert membership.company == company
        assert membership.role == 'admin'
        assert ActivityLog.objects.filter(company=company, action='company_created').exists()

    def test_onboard_twice_is_rejected(self, company_admin):
        with pytest.raises(AlreadyMember):
            CompanyService.onboard(company_admin, name='Second', slug='second')

    def test_suggest_slug_avoids_taken_slugs(self, company):
        assert CompanyService.suggest_slug('Acme') == 'acme-1'
        assert CompanyService.suggest_slug('Brand New Co') == 'brand-new-co'

    def test_update_career_page_merges_settings(self, scope):
        CompanyService.update_career_page(scope, {'headline': 'Join us'})
        CompanyService.update_career_page(scope, {'show_salary': False})

        page = Company.objects.get(pk=scope.company.pk).career_page
        assert page['headline'] == 'Join us'
        assert page['show_salary'] is False
        assert page['show_company_info'] is True

    def test_member_cannot_update_settings(self, member_scope):
        with pytest.raises(PermissionDenied):
            CompanyService.update_settings(member_scope, {'name': 'Hacked'})


@pytest.mark.django_db
class TestInvitations:
    """InvitationService invite / accept / remove."""

    def test_invite_creates_pending_member_and_sends_email(self, scope, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            member = InvitationService.invite(scope, 'New.Person@Example.com', 'manager')

        assert member.status == TeamMember.Status.PENDING
        assert member.email == 'new.person@example.com'
        assert len(mail.outbox) == 1
        assert member.invite_token in mail.outbox[0].body
        assert ActivityLog.objects.filter(action='team_member_invited').count() == 1

    def test_invite_locks_company_before_counting_seats(self, scope, company_row_locks):
        InvitationService.invite(scope, 'seat@example.com')

        assert company_row_locks == [scope.company.pk]

    def test_duplicate_invitation_is_rejected(self, scope):
        InvitationService.invite(scope, 'dup@example.com')
        with pytest.raises(DuplicateInvitation):
            InvitationService.invite(scope, 'DUP@example.com')

    def test_existing_member_cannot_be_invited(self, scope, company_admin):
        with pytest.raises(DuplicateInvitation):
            InvitationService.invite(scope, company_admin.email)

    def test_plan_seat_limit(self, scope, company):
        company.plan = 'starter'
        company.save()
        # Starter allows a single user and the admin already holds it.
        with pytest.raises(PlanLimitExceeded):
            InvitationService.invite(scope, 'extra@example.com')

    def test_non_admin_cannot_invite(self, member_scope):
        with pytest.raises(PermissionDenied):
            InvitationService.invite(member_scope, 'x@example.com')

    def test_accept_creates_membership(self, company, django_capture_on_commit_callbacks):
        invite = TeamMemberFactory(company=company, email='joiner@example.com', role='manager')
        user = UserFactory(email='joiner@example.com')

        with django_capture_on_commit_callbacks(execute=True):
            membership = InvitationService.accept(invite.invite_token, user)

        invite.refresh_from_db()
        assert membership.company == company
        assert membership.role == 'manager'
        assert invite.status == TeamMember.Status.ACCEPTED
        assert invite.user == user
        assert invite.joined_at is not None

    def test_token_cannot_be_reused(self, company):
        invite = TeamMemberFactory(company=company)
        InvitationService.accept(invite.invite_token, UserFactory())

        with pytest.raises(InvalidInvitation):
            InvitationService.accept(invite.invite_token, UserFactory())

    def test_user_in_another_company_cannot_accept(self, company, other_company):
        invite = TeamMemberFactory(company=company)
        outsider = CompanyUserFactory(company=other_company).user

        with pytest.raises(AlreadyMember):
            InvitationService.accept(invite.invite_token, outsider)
        assert TeamMember.objects.get(pk=invite.pk).is_pending

    def test_resend_rotates_token(self, scope):
        member = InvitationService.invite(scope, 'again@example.com')
        old_token = member.invite_token

        resent = InvitationService.resend(scope, member.pk)

        assert resent.invite_token != old_token

    def test_remove_accepted_member_drops_membership(self, scope, company):
        invite = TeamMemberFactory(company=company)
        user = UserFactory()
        InvitationService.accept(invite.invite_token, user)

        InvitationService.remove(scope, invite.pk)

        assert not CompanyUser.objects.filter(user=user).exists()
        assert not TeamMember.objects.filter(pk=invite.pk).exists()


@pytest.mark.django_db
class TestAuditService:

    def test_recent_is_newest_first_and_scoped(self, scope, other_scope):
        AuditService.log(scope, ActivityLog.Action.JOB_CREATED, 'job', 1)
        AuditService.log(scope, ActivityLog.Action.JOB_UPDATED, 'job', 1)
        AuditService.log(other_scope, ActivityLog.Action.JOB_CREATED, 'job', 2)

        recent = AuditService.recent(scope)

        assert [entry.action for entry in recent] == ['job_updated', 'job_created']

    def test_recent_swallows_errors(self, scope, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError('database down')

        monkeypatch.setattr(ActivityLog.objects, 'for_company', boom)
        assert AuditService.recent(scope) == []
