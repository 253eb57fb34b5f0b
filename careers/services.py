"""
Careers Services - public career pages and application intake.
"""

import logging
from collections import OrderedDict
from datetime import timedelta

from django.db import transaction
from django.utils import timezone

from ats.models import Application, Candidate, Job
from ats.services import JobService
from core.storage import store_upload
from tenants.context import TenantScope
from tenants.models import ActivityLog, Company, Plan
from tenants.services import AuditService

from .exceptions import AlreadyApplied, ApplicationsClosed

logger = logging.getLogger(__name__)

OTHER_DEPARTMENT = 'Other'
CANDIDATE_FIELDS = ('name', 'phone', 'linkedin_url', 'portfolio_url', 'location')


def get_company(slug: str) -> Company:
    return Company.objects.get(slug=slug)


def jobs_by_department(company: Company):
    """Published jobs grouped by department, in department order."""
    groups = OrderedDict()
    for job in JobService.published_for_company(company):
        groups.setdefault(job.department or OTHER_DEPARTMENT, []).append(job)
    return groups


def get_published_job(company: Company, job_id) -> Job:
    return JobService.published_for_company(company).get(pk=job_id)


class ApplicationSubmissionService:
    """
    Turns a public application into a candidate and an application row.
    """

    @classmethod
    def _check_monthly_limit(cls, company: Company):
        plan = company.get_plan()
        if plan is None:
            return
        since = timezone.now() - timedelta(days=30)
        received = Application.objects.for_company(company).filter(created_at__gte=since).count()
        if not Plan.within_limit(plan.max_applications_per_month, received):
            logger.warning(f"Company {company.slug} reached its monthly application limit")
            raise ApplicationsClosed()

    @classmethod
    def submit(cls, company: Company, job: Job, data: dict, resume) -> Application:
        """
        Upsert the candidate by email and create the application.

        The resume is uploaded first; the candidate write, the application
        insert and the audit entry share one transaction, which re-checks the
        monthly limit under a lock on the company row.

        Raises:
            ApplicationsClosed: Job not published or monthly limit reached.
            AlreadyApplied: This email already applied to this job.
        """
        if job.company_id != company.pk or not job.is_published:
            raise ApplicationsClosed()
        cls._check_monthly_limit(company)

        email = data['email']
        if Application.objects.for_company(company).filter(job=job, candidate__email__iexact=email).exists():
            raise AlreadyApplied()

        resume_url = store_upload(resume, 'resumes')

        with transaction.atomic():
            Company.objects.select_for_update().get(pk=company.pk)
            cls._check_monthly_limit(company)

            candidate, created = Candidate.objects.select_for_update().get_or_create(
                email=email,
                defaults={**{f: data.get(f) or '' for f in CANDIDATE_FIELDS}, 'resume_url': resume_url},
            )
            if not created:
                for field_name in CANDIDATE_FIELDS:
                    if data.get(field_name):
                        setattr(candidate, field_name, data[field_name])
                candidate.resume_url = resume_url
                candidate.save()

            if Application.objects.filter(job=job, candidate=candidate).exists():
                raise AlreadyApplied()

            application = Application(company=company, job=job, candidate=candidate, stage=Application.Stage.NEW)
            if data.get('message'):
                application.add_note(data['message'], Application.NoteType.CANDIDATE_MESSAGE, author=candidate.name)
            application.save()

            AuditService.log(
                TenantScope(company=company),
                ActivityLog.Action.APPLICATION_RECEIVED,
                entity_type='application',
                entity_id=application.pk,
                metadata={
                    'candidate_name': candidate.name,
                    'job_id': job.pk,
                    'job_title': job.display_title,
                },
            )

            transaction.on_commit(lambda: cls._notify(application))

        logger.info(f"Application {application.pk} received for job {job.pk}")
        return application

    @classmethod
    def _notify(cls, application: Application):
        from notifications.services import NotificationService
        from notifications.tasks import send_application_received_email

        NotificationService.notify_company_admins(
            application.company,
            notification_type='application_received',
            title='New application',
            message=f"{application.candidate.name} applied to {application.job.display_title}",
            link=f"/app/candidates/{application.candidate_id}/",
        )
        send_application_received_email.delay(application.pk)
