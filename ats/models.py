"""
ATS Models - jobs, candidates, applications and the talent pool.

Jobs, applications and talent pool entries belong to one company. Candidates
are global and deduplicated by email; a company only sees the candidates
that applied to its jobs or that it bookmarked.
"""

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.db.models import TenantAwareModel, TimestampedModel


def localized_value(values, locale=None):
    """
    Pick a translation out of a {locale: text} dict.

    Falls back to the default language, then to any non-empty value.
    """
    if not isinstance(values, dict):
        return values or ''
    for key in (locale, settings.LANGUAGE_CODE):
        if key and values.get(key):
            return values[key]
    return next((v for v in values.values() if v), '')


class Job(TenantAwareModel):
    """A job posting. Text fields are stored per locale."""

    class Status(models.TextChoices):
        DRAFT = 'draft', _('Draft')
        PUBLISHED = 'published', _('Published')
        PAUSED = 'paused', _('Paused')
        CLOSED = 'closed', _('Closed')

    class RemoteType(models.TextChoices):
        ONSITE = 'onsite', _('On-site')
        REMOTE = 'remote', _('Remote')
        HYBRID = 'hybrid', _('Hybrid')

    class EmploymentType(models.TextChoices):
        FULL_TIME = 'full-time', _('Full-time')
        PART_TIME = 'part-time', _('Part-time')
        CONTRACT = 'contract', _('Contract')
        INTERNSHIP = 'internship', _('Internship')

    LOCALIZED_FIELDS = ('title', 'description', 'requirements', 'benefits')

    title = models.JSONField(default=dict)
    description = models.JSONField(default=dict, blank=True)
    requirements = models.JSONField(default=dict, blank=True)
    benefits = models.JSONField(default=dict, blank=True)

    location = models.CharField(max_length=200, blank=True)
    remote_type = models.CharField(max_length=20, choices=RemoteType.choices, default=RemoteType.ONSITE)
    employment_type = models.CharField(
        max_length=20, choices=EmploymentType.choices, default=EmploymentType.FULL_TIME
    )
    department = models.CharField(max_length=100, blank=True)

    salary_min = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    salary_max = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    salary_currency = models.CharField(max_length=3, default='BRL')

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT, db_index=True)
    published_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_jobs',
    )

    class Meta:
        ordering = ['-created_at']
        verbose_name = _('Job')
        verbose_name_plural = _('Jobs')
        indexes = [
            models.Index(fields=['company', 'status'], name='job_company_status_idx'),
        ]

    def __str__(self):
        return self.display_title

    def localized(self, field, locale=None):
        return localized_value(getattr(self, field), locale)

    def localized_content(self, locale=None):
        return {field: self.localized(field, locale) for field in self.LOCALIZED_FIELDS}

    @property
    def display_title(self):
        return self.localized('title') or f"Job #{self.pk}"

    @property
    def is_published(self):
        return self.status == self.Status.PUBLISHED

    def set_status(self, status):
        """Change status; publishing stamps published_at the first time."""
        self.status = status
        if status == self.Status.PUBLISHED and self.published_at is None:
            self.published_at = timezone.now()


class CandidateQuerySet(models.QuerySet):

    def visible_to(self, company):
        """Candidates that applied to `company` or sit in its talent pool."""
        if company is None:
            return self.none()
        return self.filter(
            Q(applications__company=company) | Q(talent_pool_entries__company=company)
        ).distinct()


class Candidate(TimestampedModel):
    """A person who applied somewhere. Email is the dedup key across companies."""

    name = models.CharField(max_length=200)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=30, blank=True)
    linkedin_url = models.URLField(blank=True)
    portfolio_url = models.URLField(blank=True)
    location = models.CharField(max_length=200, blank=True)
    resume_url = models.URLField(max_length=500, blank=True)

    objects = CandidateQuerySet.as_manager()

    class Meta:
        ordering = ['name']
        verbose_name = _('Candidate')
        verbose_name_plural = _('Candidates')

    def __str__(self):
        return f"{self.name} <{self.email}>"


class Application(TenantAwareModel):
    """
    A candidate's application to a job, moved through the hiring pipeline.
    """

    class Stage(models.TextChoices):
        NEW = 'new', _('New')
        PHONE_SCREEN = 'phone-screen', _('Phone screen')
        INTERVIEW = 'interview', _('Interview')
        TECHNICAL = 'technical', _('Technical')
        OFFER = 'offer', _('Offer')
        HIRED = 'hired', _('Hired')
        REJECTED = 'rejected', _('Rejected')

    class NoteType(models.TextChoices):
        CANDIDATE_MESSAGE = 'candidate_message', _('Candidate message')
        COMMENT = 'comment', _('Comment')

    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name='applications')
    candidate = models.ForeignKey(Candidate, on_delete=models.CASCADE, related_name='applications')
    stage = models.CharField(max_length=20, choices=Stage.choices, default=Stage.NEW, db_index=True)
    rating = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    notes = models.JSONField(default=list, blank=True)
    rejected_reason = models.TextField(blank=True)

    class Meta:
        ordering = ['-updated_at']
        verbose_name = _('Application')
        verbose_name_plural = _('Applications')
        constraints = [
            models.UniqueConstraint(fields=['job', 'candidate'], name='unique_application_per_job'),
        ]
        indexes = [
            models.Index(fields=['company', 'stage'], name='application_company_stage_idx'),
            models.Index(fields=['job', 'stage'], name='application_job_stage_idx'),
        ]

    def __str__(self):
        return f"{self.candidate.name} - {self.job}"

    def add_note(self, content, note_type=NoteType.COMMENT, author=None):
        note = {
            'type': str(note_type),
            'content': content,
            'author': author,
            'created_at': timezone.now().isoformat(),
        }
        self.notes = list(self.notes or []) + [note]
        return note


class TalentPoolEntry(TenantAwareModel):
    """A company's bookmark of a candidate, independent of any application."""

    candidate = models.ForeignKey(Candidate, on_delete=models.CASCADE, related_name='talent_pool_entries')
    notes = models.TextField(blank=True)
    tags = models.JSONField(default=list, blank=True)
    added_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='talent_pool_additions',
    )

    class Meta:
        ordering = ['-created_at']
        verbose_name = _('Talent Pool Entry')
        verbose_name_plural = _('Talent Pool Entries')
        constraints = [
            models.UniqueConstraint(fields=['company', 'candidate'], name='unique_talent_pool_candidate'),
        ]

    def __str__(self):
        return f"{self.candidate.name} ({self.company})"
