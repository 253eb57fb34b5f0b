"""
Celery tasks for transactional email.

All tasks in this module are routed to the ``emails`` queue. Missing rows are
logged and skipped; transport errors are retried with backoff. Each task runs
inside the tenant scope of the row it emails about, so log records carry the
company slug.
"""

import logging
from smtplib import SMTPException

from celery import shared_task
from django.contrib.auth import get_user_model

from tenants.context import TenantScope, tenant_context

from .emails import EmailDispatcher

logger = logging.getLogger(__name__)
User = get_user_model()

RETRYABLE = (SMTPException, ConnectionError, TimeoutError)


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=RETRYABLE,
    retry_backoff=True,
    retry_backoff_max=600,
)
def send_team_invite_email(self, team_member_id: int) -> int:
    from tenants.models import TeamMember

    member = (
        TeamMember.objects.select_related('company', 'invited_by')
        .filter(pk=team_member_id, status=TeamMember.Status.PENDING)
        .first()
    )
    if member is None:
        logger.warning(f"Pending team member {team_member_id} not found, invite email skipped")
        return 0
    with tenant_context(TenantScope(company=member.company)):
        return EmailDispatcher.send_team_invite(member)


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=RETRYABLE,
    retry_backoff=True,
    retry_backoff_max=600,
)
def send_application_received_email(self, application_id: int) -> int:
    application = _load_application(application_id)
    if application is None:
        return 0
    with tenant_context(TenantScope(company=application.company)):
        return EmailDispatcher.send_application_received(application)


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=RETRYABLE,
    retry_backoff=True,
    retry_backoff_max=600,
)
def send_stage_changed_email(self, application_id: int, from_stage: str, to_stage: str, actor_id=None) -> int:
    application = _load_application(application_id)
    if application is None:
        return 0
    actor = User.objects.filter(pk=actor_id).first() if actor_id else None
    with tenant_context(TenantScope(company=application.company, user=actor)):
        return EmailDispatcher.send_stage_changed(application, from_stage, to_stage, actor=actor)


def _load_application(application_id):
    from ats.models import Application

    application = (
        Application.objects.select_related('company', 'job', 'candidate')
        .filter(pk=application_id)
        .first()
    )
    if application is None:
        logger.warning(f"Application {application_id} not found, email skipped")
    return application
