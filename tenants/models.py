"""
Tenants Models - companies, plans and team membership.

- Plan: subscription tiers and their limits
- Company: the tenant; every scoped row points at one
- CompanyUser: links a login to its company with a role
- SystemAdmin: operators allowed into the admin panel
- TeamMember: pending or accepted invitation to join a company
- ActivityLog: append-only audit trail per company
"""

import secrets
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.db.models import TenantAwareModel, TimestampedModel

UNLIMITED = -1

slug_validator = RegexValidator(
    regex=r'^[a-z0-9-]+$',
    message=_('Use only lowercase letters, numbers and hyphens.'),
)


class Plan(TimestampedModel):
    """
    Subscription plans and their limits.

    Limits use -1 for "unlimited".
    """

    class Interval(models.TextChoices):
        MONTH = 'month', _('Monthly')
        YEAR = 'year', _('Yearly')

    slug = models.SlugField(max_length=50, unique=True)
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)

    price_monthly = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    price_yearly = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    currency = models.CharField(max_length=3, default='BRL')
    stripe_price_id_monthly = models.CharField(max_length=255, blank=True)
    stripe_price_id_yearly = models.CharField(max_length=255, blank=True)

    max_jobs = models.IntegerField(default=5, help_text=_('Active job postings, -1 for unlimited'))
    max_users = models.IntegerField(default=1, help_text=_('Team members, -1 for unlimited'))
    max_applications_per_month = models.IntegerField(
        default=100, help_text=_('Applications per month, -1 for unlimited')
    )

    is_public = models.BooleanField(default=True, help_text=_('Offered on the billing page'))
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['sort_order', 'price_monthly']
        verbose_name = _('Plan')
        verbose_name_plural = _('Plans')

    def __str__(self):
        return self.name

    def price_id_for(self, interval):
        """Stripe price for a billing interval; anything but 'year' is monthly."""
        if interval == self.Interval.YEAR:
            return self.stripe_price_id_yearly
        return self.stripe_price_id_monthly

    @staticmethod
    def within_limit(limit, current):
        """True when one more item fits under `limit`."""
        return limit == UNLIMITED or current < limit


class Company(TimestampedModel):
    """
    A company using the system. Companies are never hard-deleted.
    """

    class SubscriptionStatus(models.TextChoices):
        TRIALING = 'trialing', _('Trialing')
        ACTIVE = 'active', _('Active')
        PAST_DUE = 'past_due', _('Past due')
        CANCELED = 'canceled', _('Canceled')
        UNPAID = 'unpaid', _('Unpaid')
        INCOMPLETE = 'incomplete', _('Incomplete')

    class Size(models.TextChoices):
        TINY = '1-10', '1-10'
        SMALL = '11-50', '11-50'
        MEDIUM = '51-200', '51-200'
        LARGE = '201-500', '201-500'
        HUGE = '500+', '500+'

    TRIAL_PLAN = 'trial'
    FREE_PLAN = 'free'

    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=63, unique=True, validators=[slug_validator])
    plan = models.CharField(max_length=50, default=TRIAL_PLAN, db_index=True)
    # Mirrors the payment provider's status string, which may be outside the choices.
    subscription_status = models.CharField(
        max_length=30,
        default=SubscriptionStatus.TRIALING,
        db_index=True,
    )
    trial_ends_at = models.DateTimeField(null=True, blank=True)

    settings = models.JSONField(default=dict, blank=True)

    logo_url = models.URLField(max_length=500, blank=True)
    website = models.URLField(blank=True)
    industry = models.CharField(max_length=100, blank=True)
    size = models.CharField(max_length=20, choices=Size.choices, blank=True)
    description = models.TextField(blank=True)

    stripe_customer_id = models.CharField(max_length=255, blank=True, db_index=True)
    stripe_subscription_id = models.CharField(max_length=255, blank=True, db_index=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = _('Company')
        verbose_name_plural = _('Companies')

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if self._state.adding and self.trial_ends_at is None:
            days = getattr(settings, 'TRIAL_PERIOD_DAYS', 14)
            self.trial_ends_at = timezone.now() + timedelta(days=days)
        super().save(*args, **kwargs)

    @property
    def is_on_trial(self):
        return (
            self.plan == self.TRIAL_PLAN
            and self.trial_ends_at is not None
            and self.trial_ends_at > timezone.now()
        )

    @property
    def has_active_subscription(self):
        return self.subscription_status == self.SubscriptionStatus.ACTIVE

    def get_plan(self):
        """The Plan row for this company's plan slug, or None."""
        return Plan.objects.filter(slug=self.plan).first()

    @property
    def career_page(self):
        """Career page copy and toggles with defaults filled in."""
        defaults = {
            'headline': '',
            'description': '',
            'custom_css': '',
            'show_salary': True,
            'show_company_info': True,
        }
        defaults.update((self.settings or {}).get('career_page', {}))
        return defaults


class CompanyUser(TimestampedModel):
    """A login's membership in a company. One company per user."""

    class Role(models.TextChoices):
        ADMIN = 'admin', _('Admin')
        MANAGER = 'manager', _('Manager')
        MEMBER = 'member', _('Member')

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='company_membership',
    )
    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name='members')
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.MEMBER)

    objects = models.Manager()

    class Meta:
        verbose_name = _('Company User')
        verbose_name_plural = _('Company Users')

    def __str__(self):
        return f"{self.user} @ {self.company} ({self.role})"

    @property
    def display_name(self):
        return self.user.get_full_name() or self.user.email


class SystemAdmin(TimestampedModel):
    """Operators with access to the platform admin panel."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='system_admin',
    )

    class Meta:
        verbose_name = _('System Admin')
        verbose_name_plural = _('System Admins')

    def __str__(self):
        return str(self.user)


def generate_invite_token():
    return secrets.token_urlsafe(32)


class TeamMember(TenantAwareModel):
    """Invitation of an email address into a company with a role."""

    class Status(models.TextChoices):
        PENDING = 'pending', _('Pending')
        ACCEPTED = 'accepted', _('Accepted')

    email = models.EmailField()
    role = models.CharField(
        max_length=20,
        choices=CompanyUser.Role.choices,
        default=CompanyUser.Role.MEMBER,
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    invite_token = models.CharField(max_length=100, unique=True, default=generate_invite_token)
    invited_at = models.DateTimeField(default=timezone.now)
    joined_at = models.DateTimeField(null=True, blank=True)
    invited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sent_invitations',
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='team_memberships',
    )

    class Meta:
        ordering = ['-invited_at']
        verbose_name = _('Team Member')
        verbose_name_plural = _('Team Members')
        constraints = [
            models.UniqueConstraint(fields=['company', 'email'], name='unique_team_member_email'),
        ]

    def __str__(self):
        return f"{self.email} ({self.status}) - {self.company}"

    @property
    def is_pending(self):
        return self.status == self.Status.PENDING

    def regenerate_token(self):
        self.invite_token = generate_invite_token()
        self.invited_at = timezone.now()
        self.save(update_fields=['invite_token', 'invited_at', 'updated_at'])


class ActivityLog(TenantAwareModel):
    """Append-only record of what happened inside a company."""

    class Action(models.TextChoices):
        COMPANY_CREATED = 'company_created', _('Company created')
        SETTINGS_UPDATED = 'settings_updated', _('Settings updated')
        JOB_CREATED = 'job_created', _('Job created')
        JOB_PUBLISHED = 'job_published', _('Job published')
        JOB_UPDATED = 'job_updated', _('Job updated')
        JOB_STATUS_CHANGED = 'job_status_changed', _('Job status changed')
        JOB_DELETED = 'job_deleted', _('Job deleted')
        APPLICATION_RECEIVED = 'application_received', _('Application received')
        APPLICATION_STAGE_CHANGED = 'application_stage_changed', _('Application stage changed')
        APPLICATION_RATED = 'application_rated', _('Application rated')
        APPLICATION_NOTE_ADDED = 'application_note_added', _('Note added')
        TALENT_POOL_ADDED = 'talent_pool_added', _('Added to talent pool')
        TALENT_POOL_REMOVED = 'talent_pool_removed', _('Removed from talent pool')
        TEAM_MEMBER_INVITED = 'team_member_invited', _('Team member invited')
        TEAM_MEMBER_JOINED = 'team_member_joined', _('Team member joined')
        TEAM_MEMBER_REMOVED = 'team_member_removed', _('Team member removed')
        SUBSCRIPTION_CHANGED = 'subscription_changed', _('Subscription changed')

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='activity_logs',
    )
    action = models.CharField(max_length=50, choices=Action.choices, db_index=True)
    entity_type = models.CharField(max_length=50, blank=True)
    entity_id = models.CharField(max_length=64, blank=True)
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = _('Activity Log')
        verbose_name_plural = _('Activity Logs')
        indexes = [
            models.Index(fields=['company', '-created_at'], name='activity_company_recent_idx'),
            models.Index(fields=['entity_type', 'entity_id'], name='activity_entity_idx'),
        ]

    def __str__(self):
        return f"{self.action} ({self.company_id})"
