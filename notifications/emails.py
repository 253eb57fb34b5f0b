"""
Transactional email dispatcher.

Each message is rendered from an HTML template under ``templates/emails/``
with a plain-text body derived from it, and sent through the configured
Django email backend.
"""

import logging
from typing import Iterable, List

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils.html import strip_tags

logger = logging.getLogger(__name__)


def stage_label(stage: str) -> str:
    from ats.models import Application

    try:
        return str(Application.Stage(stage).label)
    except ValueError:
        return stage


def absolute_url(path: str) -> str:
    return f"{settings.SITE_URL.rstrip('/')}{path}"


class EmailDispatcher:
    """Renders and sends the three transactional emails."""

    @staticmethod
    def _send(subject: str, template: str, context: dict, recipients: Iterable[str]) -> int:
        to: List[str] = sorted({email for email in recipients if email})
        if not to:
            logger.info(f"No recipients for '{template}', skipping")
            return 0

        context = {
            'support_email': settings.SUPPORT_EMAIL,
            'site_url': settings.SITE_URL,
            **context,
        }
        html_body = render_to_string(f'emails/{template}.html', context)
        message = EmailMultiAlternatives(
            subject=subject,
            body=strip_tags(html_body),
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=to,
        )
        message.attach_alternative(html_body, 'text/html')
        sent = message.send(fail_silently=False)
        logger.info(f"Sent '{template}' email to {len(to)} recipient(s)")
        return sent

    @classmethod
    def send_team_invite(cls, member) -> int:
        company = member.company
        inviter = member.invited_by
        return cls._send(
            subject=f"You've been invited to join {company.name} on Mini ATS",
            template='team_invite',
            context={
                'company': company,
                'member': member,
                'inviter_name': (inviter.get_full_name() or inviter.email) if inviter else company.name,
                'role': member.get_role_display(),
                'invite_url': absolute_url(f'/auth/invite/{member.invite_token}/'),
            },
            recipients=[member.email],
        )

    @classmethod
    def send_application_received(cls, application) -> int:
        from tenants.services import CompanyService

        company = application.company
        return cls._send(
            subject=f"New application for {application.job.display_title}",
            template='application_received',
            context={
                'company': company,
                'application': application,
                'candidate': application.candidate,
                'job_title': application.job.display_title,
                'candidate_url': absolute_url(f'/app/candidates/{application.candidate_id}/'),
            },
            recipients=CompanyService.admins(company).values_list('email', flat=True),
        )

    @classmethod
    def send_stage_changed(cls, application, from_stage: str, to_stage: str, actor=None) -> int:
        from tenants.services import CompanyService

        company = application.company
        recipients = CompanyService.managers(company).values_list('email', flat=True)
        if actor is not None:
            recipients = recipients.exclude(pk=actor.pk)
        return cls._send(
            subject=f"{application.candidate.name} moved to {stage_label(to_stage)}",
            template='stage_changed',
            context={
                'company': company,
                'application': application,
                'candidate': application.candidate,
                'job_title': application.job.display_title,
                'from_label': stage_label(from_stage),
                'to_label': stage_label(to_stage),
                'actor_name': (actor.get_full_name() or actor.email) if actor else '',
                'board_url': absolute_url(f'/app/jobs/{application.job_id}/'),
            },
            recipients=recipients,
        )
