"""
Tenants Services - company lifecycle, team membership and the audit trail.

- CompanyService: onboarding, settings and career page updates
- InvitationService: invite / resend / remove / accept team members
- AuditService: append ActivityLog rows
"""

import logging
from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone
from django.utils.text import slugify

from core.storage import store_upload

from .context import TenantScope
from .exceptions import (
    AlreadyMember,
    DuplicateInvitation,
    InvalidInvitation,
    PermissionDenied,
    PlanLimitExceeded,
)
from .models import ActivityLog, Company, CompanyUser, Plan, TeamMember

logger = logging.getLogger(__name__)
User = get_user_model()

CAREER_PAGE_FIELDS = ('headline', 'description', 'custom_css', 'show_salary', 'show_company_info')


class AuditService:
    """
    Service class for activity logging.
    """

    @classmethod
    def log(
        cls,
        scope: TenantScope,
        action: str,
        entity_type: str = '',
        entity_id: Any = '',
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ActivityLog:
        return ActivityLog.objects.create(
            company=scope.company,
            user=scope.user if getattr(scope.user, 'pk', None) else None,
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id != '' else '',
            metadata=metadata or {},
        )

    @classmethod
    def recent(cls, scope: TenantScope, limit: int = 10):
        """
        Most recent activity for the dashboard.

        The feed is non-critical: failures are logged and yield an empty list.
        """
        try:
            return list(
                ActivityLog.objects.for_company(scope.company)
                .select_related('user')
                .order_by('-created_at', '-pk')[:limit]
            )
        except Exception as e:
            logger.error(f"Failed to load recent activity for {scope.company.slug}: {e}")
            return []


class CompanyService:
    """
    Service class for company operations.
    """

    @classmethod
    def suggest_slug(cls, name: str) -> str:
        base_slug = slugify(name)[:50] or 'company'
        slug = base_slug
        counter = 1
        while Company.objects.filter(slug=slug).exists():
            slug = f"{base_slug}-{counter}"
            counter += 1
        return slug

    @classmethod
    @transaction.atomic
    def onboard(cls, user, name: str, slug: str, industry: str = '', size: str = '', website: str = '') -> Company:
        """
        Create a company on the trial plan and make `user` its admin.

        Raises:
            AlreadyMember: If the user already belongs to a company.
        """
        if CompanyUser.objects.filter(user=user).exists():
            raise AlreadyMember()

        company = Company.objects.create(
            name=name,
            slug=slug,
            industry=industry,
            size=size,
            website=website,
            plan=Company.TRIAL_PLAN,
            subscription_status=Company.SubscriptionStatus.TRIALING,
        )
        membership = CompanyUser.objects.create(user=user, company=company, role=CompanyUser.Role.ADMIN)

        AuditService.log(
            TenantScope.for_membership(membership),
            ActivityLog.Action.COMPANY_CREATED,
            entity_type='company',
            entity_id=company.pk,
            metadata={'name': company.name, 'slug': company.slug},
        )
        logger.info(f"Company {company.slug} created by user {user.pk}")
        return company

    @classmethod
    @transaction.atomic
    def update_settings(cls, scope: TenantScope, data: Dict[str, Any], logo=None) -> Company:
        if not scope.is_admin:
            raise PermissionDenied()

        company = Company.objects.select_for_update().get(pk=scope.company.pk)
        for field in ('name', 'website', 'industry', 'size', 'description'):
            if field in data:
                setattr(company, field, data[field])
        if logo is not None:
            company.logo_url = store_upload(logo, 'logos')
        company.save()

        AuditService.log(
            scope,
            ActivityLog.Action.SETTINGS_UPDATED,
            entity_type='company',
            entity_id=company.pk,
            metadata={'fields': sorted(k for k in data if k != 'logo')},
        )
        return company

    @classmethod
    @transaction.atomic
    def update_career_page(cls, scope: TenantScope, data: Dict[str, Any]) -> Company:
        if not scope.can_manage:
            raise PermissionDenied()

        company = Company.objects.select_for_update().get(pk=scope.company.pk)
        company_settings = dict(company.settings or {})
        career_page = dict(company_settings.get('career_page', {}))
        career_page.update({k: data[k] for k in CAREER_PAGE_FIELDS if k in data})
        company_settings['career_page'] = career_page
        company.settings = company_settings
        company.save(update_fields=['settings', 'updated_at'])

        AuditService.log(
            scope,
            ActivityLog.Action.SETTINGS_UPDATED,
            entity_type='career_page',
            entity_id=company.pk,
        )
        return company

    @classmethod
    def admins(cls, company: Company):
        """Users with the admin role in `company`."""
        return User.objects.filter(
            company_membership__company=company,
            company_membership__role=CompanyUser.Role.ADMIN,
        )

    @classmethod
    def managers(cls, company: Company):
        """Users with the admin or manager role in `company`."""
        return User.objects.filter(
            company_membership__company=company,
            company_membership__role__in=[CompanyUser.Role.ADMIN, CompanyUser.Role.MANAGER],
        )


class InvitationService:
    """
    Service class for team invitations.
    """

    @classmethod
    def seat_count(cls, company: Company) -> int:
        """Accepted members plus outstanding invitations."""
        members = CompanyUser.objects.filter(company=company).count()
        pending = TeamMember.objects.for_company(company).filter(status=TeamMember.Status.PENDING).count()
        return members + pending

    @classmethod
    @transaction.atomic
    def invite(cls, scope: TenantScope, email: str, role: str = CompanyUser.Role.MEMBER) -> TeamMember:
        """
        Invite `email` into the scope's company.

        Raises:
            PermissionDenied: If the acting user is not an admin.
            DuplicateInvitation: If the email is already invited or a member.
            PlanLimitExceeded: If the plan has no free seat.
        """
        if not scope.is_admin:
            raise PermissionDenied()

        email = email.strip().lower()
        # Held until commit so concurrent invites see each other's seats.
        company = Company.objects.select_for_update().get(pk=scope.company.pk)

        if TeamMember.objects.for_company(company).filter(email__iexact=email).exists():
            raise DuplicateInvitation()
        if CompanyUser.objects.filter(company=company, user__email__iexact=email).exists():
            raise DuplicateInvitation('This email already belongs to a team member.')

        plan = company.get_plan()
        if plan is not None and not Plan.within_limit(plan.max_users, cls.seat_count(company)):
            raise PlanLimitExceeded(
                f'The {plan.name} plan allows {plan.max_users} user(s). Upgrade to invite more.'
            )

        member = TeamMember.objects.create(
            company=company,
            email=email,
            role=role,
            invited_by=scope.user,
        )
        AuditService.log(
            scope,
            ActivityLog.Action.TEAM_MEMBER_INVITED,
            entity_type='team_member',
            entity_id=member.pk,
            metadata={'email': email, 'role': role},
        )
        cls._send_invite_email(member)
        return member

    @classmethod
    @transaction.atomic
    def resend(cls, scope: TenantScope, member_id) -> TeamMember:
        if not scope.is_admin:
            raise PermissionDenied()

        member = TeamMember.objects.for_company(scope.company).select_for_update().get(
            pk=member_id, status=TeamMember.Status.PENDING,
        )
        member.regenerate_token()
        cls._send_invite_email(member)
        return member

    @classmethod
    @transaction.atomic
    def remove(cls, scope: TenantScope, member_id) -> None:
        """Delete an invitation and, when accepted, the membership it created."""
        if not scope.is_admin:
            raise PermissionDenied()

        member = TeamMember.objects.for_company(scope.company).get(pk=member_id)
        if member.user_id and member.user_id == scope.user.pk:
            raise PermissionDenied('You cannot remove yourself.')

        if member.user_id:
            CompanyUser.objects.filter(company=scope.company, user_id=member.user_id).delete()

        AuditService.log(
            scope,
            ActivityLog.Action.TEAM_MEMBER_REMOVED,
            entity_type='team_member',
            entity_id=member.pk,
            metadata={'email': member.email},
        )
        member.delete()

    @classmethod
    def get_pending(cls, token: str) -> TeamMember:
        member = (
            TeamMember.objects.select_related('company')
            .filter(invite_token=token, status=TeamMember.Status.PENDING)
            .first()
        )
        if member is None:
            raise InvalidInvitation()
        return member

    @classmethod
    @transaction.atomic
    def accept(cls, token: str, user) -> CompanyUser:
        """
        Accept an invitation for `user`.

        Raises:
            InvalidInvitation: Unknown or already used token.
            AlreadyMember: The user already belongs to a company.
        """
        member = cls.get_pending(token)
        member = TeamMember.objects.select_for_update().get(pk=member.pk)
        if member.status != TeamMember.Status.PENDING:
            raise InvalidInvitation()
        if CompanyUser.objects.filter(user=user).exists():
            raise AlreadyMember()

        membership = CompanyUser.objects.create(user=user, company=member.company, role=member.role)

        member.status = TeamMember.Status.ACCEPTED
        member.joined_at = timezone.now()
        member.user = user
        member.save(update_fields=['status', 'joined_at', 'user', 'updated_at'])

        AuditService.log(
            TenantScope.for_membership(membership),
            ActivityLog.Action.TEAM_MEMBER_JOINED,
            entity_type='team_member',
            entity_id=member.pk,
            metadata={'email': member.email, 'role': member.role},
        )
        transaction.on_commit(lambda: cls._notify_joined(member, user))
        logger.info(f"User {user.pk} joined company {member.company.slug} as {member.role}")
        return membership

    @classmethod
    def _notify_joined(cls, member: TeamMember, user):
        from notifications.services import NotificationService

        NotificationService.notify_company_admins(
            member.company,
            notification_type='team_member_joined',
            title='New team member',
            message=f"{user.get_full_name() or user.email} joined as {member.get_role_display()}",
            link='/app/settings/team/',
        )

    @classmethod
    def _send_invite_email(cls, member: TeamMember):
        from notifications.tasks import send_team_invite_email

        transaction.on_commit(lambda: send_team_invite_email.delay(member.pk))
